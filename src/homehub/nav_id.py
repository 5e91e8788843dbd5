"""Compound ``prefix://location`` content identifiers."""

from typing import NamedTuple

SEPARATOR = "://"


class NavIDParts(NamedTuple):
    """Decoded navigation id."""

    prefix: str
    location: str


def encode(prefix: str, location: str) -> str:
    """Build a navigation id from a source prefix and a location."""
    return f"{prefix}{SEPARATOR}{location}"


def decode(nav_id: str) -> NavIDParts:
    """Split a navigation id on the first separator.

    A string without a separator decodes to empty prefix and location.
    """
    if not isinstance(nav_id, str):
        return NavIDParts("", "")
    prefix, separator, location = nav_id.partition(SEPARATOR)
    if not separator:
        return NavIDParts("", "")
    return NavIDParts(prefix, location)


def location(nav_id: str) -> str:
    """Get only the location part of a navigation id."""
    return decode(nav_id).location
