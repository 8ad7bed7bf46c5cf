"""Bucket classification for tract listings."""

from __future__ import annotations

import string

DIGIT_GROUP = "0-9"
OTHER_GROUP = "Other"


def determine_group(location: str) -> str:
    """Return the bucket label for a location's first character."""
    first = location[:1]
    if first and first in string.digits:
        return DIGIT_GROUP
    if first and first in string.ascii_letters:
        return first.upper()
    return OTHER_GROUP
