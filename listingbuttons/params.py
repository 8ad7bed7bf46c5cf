"""Query parameters for links into the IDX search page."""

from __future__ import annotations

from typing import Dict, Sequence
from urllib.parse import urlencode

SEARCH_PATH = "/idx"


def build_query_params(
    grouping_mode: str,
    location: str,
    property_types: Sequence[int],
) -> Dict[str, str]:
    """Build the ordered parameter mapping read by the search page."""
    params = {f"idx-q-{grouping_mode}": location}
    for index, property_type_id in enumerate(property_types):
        params[f"idx-q-PropertyTypes<{index}>"] = str(property_type_id)
    return params


def build_query_string(
    grouping_mode: str,
    location: str,
    property_types: Sequence[int],
) -> str:
    return urlencode(build_query_params(grouping_mode, location, property_types))


def build_search_url(
    grouping_mode: str,
    location: str,
    property_types: Sequence[int],
) -> str:
    return f"{SEARCH_PATH}?{build_query_string(grouping_mode, location, property_types)}"
