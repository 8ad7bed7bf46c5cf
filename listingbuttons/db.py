"""SQLite-backed access to the listing count tables."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Protocol, Sequence, Tuple

from openpyxl import Workbook

logger = logging.getLogger(__name__)

SQLITE_PREFIX = "sqlite://"
DEFAULT_TABLE_PREFIX = "wp_"

EXPORT_HEADERS = ["location", "type", "propertyTypes", "count", "lastUpdated"]


class DataAccessError(Exception):
    """Raised when the backing store fails to answer a query."""


class CatalogUnavailableError(DataAccessError):
    """Raised when the property type catalog cannot be read."""


class QueryExecutor(Protocol):
    """Read-only, parameter-bound query contract."""

    table_prefix: str

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Tuple]:
        ...

    def fetch_scalar(self, query: str, params: Sequence[Any] = ()) -> Any:
        ...


def resolve_sqlite_path(database_url: str) -> Path:
    """Translate a DATABASE_URL into a filesystem path."""
    if not database_url:
        raise ValueError("DATABASE_URL must not be empty")

    if database_url.startswith(SQLITE_PREFIX):
        raw_path = database_url[len(SQLITE_PREFIX) :]
        # Allow sqlite:///path/to/file and sqlite://path/to/file styles.
        if raw_path.startswith("/"):
            raw_path = raw_path[1:]
        path = Path(raw_path)
    else:
        path = Path(database_url)

    if not path.is_absolute():
        path = Path.cwd() / path

    return path.expanduser().resolve()


@dataclass
class Database:
    """Thin wrapper around sqlite3 implementing QueryExecutor."""

    path: Path
    table_prefix: str = DEFAULT_TABLE_PREFIX

    @property
    def counts_table(self) -> str:
        return f"{self.table_prefix}property_listing_counts"

    @property
    def property_types_table(self) -> str:
        return f"{self.table_prefix}dsidx_property_types"

    def connect(self) -> sqlite3.Connection:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        return sqlite3.connect(self.path)

    def connect_readonly(self) -> sqlite3.Connection:
        # Never creates a missing database file.
        return sqlite3.connect(f"{self.path.as_uri()}?mode=ro", uri=True)

    def initialize(self) -> None:
        with self.connect() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.counts_table} (
                    location TEXT NOT NULL,
                    type TEXT NOT NULL,
                    propertyTypes TEXT NOT NULL,
                    count INTEGER NOT NULL DEFAULT 0,
                    lastUpdated TEXT NOT NULL,
                    PRIMARY KEY(location, type, propertyTypes)
                )
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {self.property_types_table} (
                    property_type_id INTEGER PRIMARY KEY,
                    display_name TEXT NOT NULL
                )
                """
            )
            conn.commit()

    def fetch_all(self, query: str, params: Sequence[Any] = ()) -> List[Tuple]:
        logger.debug("Executing query: %s", " ".join(query.split()))
        try:
            with self.connect_readonly() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except sqlite3.Error as exc:
            raise DataAccessError(str(exc)) from exc

    def fetch_scalar(self, query: str, params: Sequence[Any] = ()) -> Any:
        rows = self.fetch_all(query, params)
        if not rows:
            return None
        return rows[0][0]

    def export_counts_to_xlsx(self, export_path: Path) -> None:
        """Write the aggregate count table to an Excel workbook."""
        rows = self.fetch_all(
            f"""
            SELECT location, type, propertyTypes, count, lastUpdated
            FROM {self.counts_table}
            ORDER BY type ASC, location ASC
            """
        )
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = "listing_counts"
        worksheet.append(EXPORT_HEADERS)
        for row in rows:
            worksheet.append(list(row))

        export_path = Path(export_path)
        export_path.parent.mkdir(parents=True, exist_ok=True)
        workbook.save(export_path)
        logger.info("Exported %d count row(s) to %s", len(rows), export_path)
