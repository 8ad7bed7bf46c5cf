"""Listing count lookups and button generation over a query executor."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Sequence

from .db import CatalogUnavailableError, DataAccessError, QueryExecutor
from .models import ListingCountRow, PropertyType, serialize_property_types
from .renderer import render_location_buttons

logger = logging.getLogger(__name__)


@dataclass
class ListingCountService:
    """Stateless operations over the precomputed listing count tables."""

    executor: QueryExecutor

    @property
    def counts_table(self) -> str:
        return f"{self.executor.table_prefix}property_listing_counts"

    @property
    def property_types_table(self) -> str:
        return f"{self.executor.table_prefix}dsidx_property_types"

    def get_count(self, location: str, property_types: Sequence[int]) -> int:
        """Return the listing count, or 0 when no aggregate row exists."""
        value = self.executor.fetch_scalar(
            f"SELECT count FROM {self.counts_table} WHERE location = ? AND propertyTypes = ?",
            (location, serialize_property_types(property_types)),
        )
        return int(value or 0)

    def fetch_count_rows(
        self,
        property_types: Sequence[int],
        grouping_mode: str,
    ) -> List[ListingCountRow]:
        rows = self.executor.fetch_all(
            f"""
            SELECT location, count, lastUpdated
            FROM {self.counts_table}
            WHERE propertyTypes = ? AND type = ?
            ORDER BY location ASC
            """,
            (serialize_property_types(property_types), grouping_mode),
        )
        return [ListingCountRow.from_row(row) for row in rows]

    def generate_location_buttons(
        self,
        property_types: Sequence[int],
        grouping_mode: str = "zip",
    ) -> str:
        rows = self.fetch_count_rows(property_types, grouping_mode)
        logger.debug(
            "Rendering %d %s row(s) for property types %s",
            len(rows),
            grouping_mode,
            list(property_types),
        )
        return render_location_buttons(rows, grouping_mode, property_types)

    def list_all_property_types(self) -> List[PropertyType]:
        """Return the whole property type catalog in storage order.

        Any storage failure aborts the request; there is no partial result.
        """
        try:
            rows = self.executor.fetch_all(
                f"SELECT property_type_id, display_name FROM {self.property_types_table}"
            )
        except DataAccessError as exc:
            logger.exception("Property type catalog unavailable")
            raise CatalogUnavailableError(f"Database error: {exc}") from exc
        return [
            PropertyType(property_type_id=int(row[0]), display_name=row[1])
            for row in rows
        ]
