"""Location buttons package initialization."""

from .db import CatalogUnavailableError, DataAccessError, Database, QueryExecutor
from .grouping import determine_group
from .models import ListingCountRow, PropertyType, serialize_property_types
from .params import build_query_params, build_query_string
from .renderer import render_location_buttons
from .service import ListingCountService

__all__ = [
    "CatalogUnavailableError",
    "DataAccessError",
    "Database",
    "ListingCountRow",
    "ListingCountService",
    "PropertyType",
    "QueryExecutor",
    "build_query_params",
    "build_query_string",
    "determine_group",
    "render_location_buttons",
    "serialize_property_types",
]
