import datetime as dt

import pytest
from bs4 import BeautifulSoup

from listingbuttons.db import CatalogUnavailableError, DataAccessError, Database
from listingbuttons.models import ListingCountRow, PropertyType
from listingbuttons.service import ListingCountService


class FakeExecutor:
    """In-memory executor recording the queries it receives."""

    table_prefix = "wp_"

    def __init__(self, rows=None, scalar=None, error=None):
        self.rows = rows or []
        self.scalar = scalar
        self.error = error
        self.calls = []

    def fetch_all(self, query, params=()):
        self.calls.append((query, tuple(params)))
        if self.error:
            raise self.error
        return list(self.rows)

    def fetch_scalar(self, query, params=()):
        self.calls.append((query, tuple(params)))
        if self.error:
            raise self.error
        return self.scalar


def build_service(tmp_path) -> ListingCountService:
    database = Database(path=tmp_path / "counts.db")
    database.initialize()
    with database.connect() as conn:
        conn.executemany(
            f"""
            INSERT INTO {database.counts_table} (location, type, propertyTypes, count, lastUpdated)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                ("35802", "zip", "[1,2]", 5, "2024-03-15 09:00:00"),
                ("35801", "zip", "[1,2]", 9, "2024-01-01 10:00:00"),
                ("35803", "zip", "[1,2]", 0, "2024-05-01 00:00:00"),
                ("35801", "zip", "[2,1]", 1, "2024-01-01 10:00:00"),
                ("Elm", "tract", "[1,2]", 2, "2024-02-01 00:00:00"),
                ("101.02", "tract", "[1,2]", 4, "2024-02-01 00:00:00"),
            ],
        )
        conn.executemany(
            f"INSERT INTO {database.property_types_table} (property_type_id, display_name) VALUES (?, ?)",
            [(1, "Single Family"), (2, "Condo")],
        )
        conn.commit()
    return ListingCountService(executor=database)


def test_get_count_matches_exact_property_type_order(tmp_path):
    service = build_service(tmp_path)

    assert service.get_count("35801", [1, 2]) == 9
    assert service.get_count("35801", [2, 1]) == 1


def test_get_count_returns_zero_when_missing(tmp_path):
    service = build_service(tmp_path)

    assert service.get_count("99999", [1, 2]) == 0
    assert service.get_count("35801", []) == 0


def test_get_count_propagates_data_access_error():
    service = ListingCountService(executor=FakeExecutor(error=DataAccessError("down")))

    with pytest.raises(DataAccessError):
        service.get_count("35801", [1])


def test_get_count_serializes_property_types():
    executor = FakeExecutor(scalar="17")
    service = ListingCountService(executor=executor)

    assert service.get_count("Madison", [3, 1]) == 17
    query, params = executor.calls[0]
    assert "wp_property_listing_counts" in query
    assert params == ("Madison", "[3,1]")


def test_fetch_count_rows_parses_records_sorted_by_location(tmp_path):
    service = build_service(tmp_path)

    rows = service.fetch_count_rows([1, 2], "zip")

    assert [row.location for row in rows] == ["35801", "35802", "35803"]
    assert rows[0] == ListingCountRow(
        location="35801",
        count=9,
        last_updated=dt.datetime(2024, 1, 1, 10, 0),
    )


def test_generate_location_buttons_renders_filtered_rows(tmp_path):
    service = build_service(tmp_path)

    soup = BeautifulSoup(service.generate_location_buttons([1, 2]), "html.parser")

    assert [a.get_text() for a in soup.find_all("a")] == ["35801 (9)", "35802 (5)"]
    note = soup.find(class_="last-updated-note").get_text()
    assert "January 1, 2024, 10:00 AM and March 15, 2024, 9:00 AM" in note


def test_generate_location_buttons_for_tracts(tmp_path):
    service = build_service(tmp_path)

    soup = BeautifulSoup(service.generate_location_buttons([1, 2], "tract"), "html.parser")

    assert [d.summary.get_text() for d in soup.find_all("details")] == ["0-9", "E"]


def test_generate_location_buttons_without_rows(tmp_path):
    service = build_service(tmp_path)

    soup = BeautifulSoup(service.generate_location_buttons([7], "county"), "html.parser")

    assert soup.find_all("a") == []
    assert soup.find("p", class_="footnote") is not None


def test_list_all_property_types(tmp_path):
    service = build_service(tmp_path)

    assert service.list_all_property_types() == [
        PropertyType(property_type_id=1, display_name="Single Family"),
        PropertyType(property_type_id=2, display_name="Condo"),
    ]


def test_list_all_property_types_fails_fast(caplog):
    service = ListingCountService(executor=FakeExecutor(error=DataAccessError("no such table")))

    with pytest.raises(CatalogUnavailableError, match="Database error: no such table"):
        service.list_all_property_types()
    assert "Property type catalog unavailable" in caplog.text


def test_generate_location_buttons_propagates_data_access_error():
    error = DataAccessError("down")
    service = ListingCountService(executor=FakeExecutor(error=error))

    with pytest.raises(DataAccessError) as excinfo:
        service.generate_location_buttons([1])
    assert excinfo.value is error
    assert not isinstance(excinfo.value, CatalogUnavailableError)


def test_zero_count_row_with_missing_timestamp_is_ignored():
    executor = FakeExecutor(
        rows=[
            ("35801", 0, None),
            ("35802", 6, "2024-01-01 10:00:00"),
            ("35803", 0, "not a date"),
        ]
    )
    service = ListingCountService(executor=executor)

    soup = BeautifulSoup(service.generate_location_buttons([1]), "html.parser")

    assert [a.get_text() for a in soup.find_all("a")] == ["35802 (6)"]
    assert "January 1, 2024, 10:00 AM" in soup.find(class_="last-updated-note").get_text()


def test_counted_row_with_bad_timestamp_fails():
    service = ListingCountService(executor=FakeExecutor(rows=[("35801", 2, "not a date")]))

    with pytest.raises(ValueError):
        service.generate_location_buttons([1])


def test_from_row_accepts_utc_suffix():
    row = ListingCountRow.from_row(("35801", 2, "2024-03-15T09:00:00Z"))

    assert row.last_updated == dt.datetime(2024, 3, 15, 9, 0)
