"""HTML rendering for grouped location buttons."""

from __future__ import annotations

import datetime as dt
import html
from typing import Iterable, List, Optional, Sequence

from .grouping import determine_group
from .models import ListingCountRow
from .params import build_search_url

TRACT_MODE = "tract"

COUNT_NOTE = (
    "* The number in parentheses represents the count of listings "
    "available in the corresponding location."
)


def render_location_buttons(
    rows: Iterable[ListingCountRow],
    grouping_mode: str,
    property_types: Sequence[int],
) -> str:
    """Render location buttons for rows already sorted by location.

    Tract rows are bucketed by their first character into collapsible
    ``<details>`` sections. Every other mode wraps each button in its own
    container labelled with the mode. Rows with a zero count are skipped.
    """
    mode = html.escape(grouping_mode)
    parts: List[str] = [f'<div class="locations-with-counts {mode}">']
    oldest: Optional[dt.datetime] = None
    newest: Optional[dt.datetime] = None
    current_group = ""

    for row in rows:
        if row.count == 0:
            continue

        oldest = row.last_updated if oldest is None else min(oldest, row.last_updated)
        newest = row.last_updated if newest is None else max(newest, row.last_updated)

        if grouping_mode == TRACT_MODE:
            group = determine_group(row.location)
            if group != current_group:
                if current_group:
                    parts.append("</details>")
                parts.append(
                    '<details class="locations-with-counts locations-with-counts.tract">'
                    f"<summary>{html.escape(group)}</summary>"
                )
                current_group = group
            parts.append(_render_button(row, grouping_mode, property_types))
        else:
            # One wrapper per row.
            parts.append(f'<div class="locations-with-counts locations-with-counts.{mode}">')
            parts.append(_render_button(row, grouping_mode, property_types))
            parts.append("</div>")

    if grouping_mode == TRACT_MODE and current_group:
        parts.append("</details>")

    parts.append(render_footnote(oldest, newest))
    parts.append("</div>")
    return "".join(parts)


def _render_button(
    row: ListingCountRow,
    grouping_mode: str,
    property_types: Sequence[int],
) -> str:
    href = build_search_url(grouping_mode, row.location, property_types)
    return (
        '<span class="btn-group zipcodes">'
        f'<a href="{html.escape(href)}" class="btn btn-default">'
        f"{html.escape(row.location)} ({int(row.count)})"
        "</a></span>"
    )


def render_footnote(
    oldest: Optional[dt.datetime],
    newest: Optional[dt.datetime],
) -> str:
    """Render the count note, plus the freshness window when known."""
    if oldest is None or newest is None:
        return f'<div class="footnote"><p class="footnote">{COUNT_NOTE}</p></div>'
    return (
        '<div class="footnote">'
        f'<span class="listing-count-note">{COUNT_NOTE}</span> '
        '<span class="last-updated-note">The listings counts were last updated between '
        f"{format_timestamp(oldest)} and {format_timestamp(newest)}.</span>"
        "</div>"
    )


def format_timestamp(value: dt.datetime) -> str:
    """Format as e.g. ``March 15, 2024, 9:00 AM``."""
    hour = value.hour % 12 or 12
    meridiem = "AM" if value.hour < 12 else "PM"
    return f"{value:%B} {value.day}, {value.year}, {hour}:{value:%M} {meridiem}"
