"""Core data models for location buttons."""

from __future__ import annotations

import datetime as dt
import json
from dataclasses import dataclass
from typing import Optional, Sequence


def serialize_property_types(property_types: Sequence[int]) -> str:
    """Encode property type ids the way the aggregate table keys them."""
    return json.dumps([int(value) for value in property_types], separators=(",", ":"))


def parse_timestamp(value: str | dt.datetime) -> dt.datetime:
    """Parse a stored lastUpdated value into a datetime."""
    if isinstance(value, dt.datetime):
        return value
    text = str(value).strip()
    # Trailing "Z" is UTC; stored timestamps are compared naive.
    if text.endswith("Z"):
        text = text[:-1]
    return dt.datetime.fromisoformat(text)


@dataclass(frozen=True)
class ListingCountRow:
    """One precomputed listing count for a location."""

    location: str
    count: int
    last_updated: Optional[dt.datetime]

    @classmethod
    def from_row(cls, row: Sequence) -> "ListingCountRow":
        location, count, last_updated = row
        count = int(count or 0)
        # Zero-count rows are never rendered, so their timestamp is not trusted.
        return cls(
            location=str(location or ""),
            count=count,
            last_updated=parse_timestamp(last_updated) if count else None,
        )


@dataclass(frozen=True)
class PropertyType:
    """Entry of the property types reference table."""

    property_type_id: int
    display_name: str
