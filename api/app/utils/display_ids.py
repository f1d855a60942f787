"""Encode and decode catalog display identifiers.

A movie or show is addressed by its content record id. Each web series season
is addressed as ``<content id>-season-<n>`` with ``n`` starting at 1. These two
functions are the only place that builds or parses that format.
"""

from __future__ import annotations

import re
import uuid
from dataclasses import dataclass
from typing import TypeAlias

SEASON_SEPARATOR = "-season-"
_SEASON_ID_RE = re.compile(r"^(?P<base>.+)-season-(?P<number>[1-9][0-9]*)$")


@dataclass(frozen=True, slots=True)
class ContentKey:
    """Movie or show addressed by its content record id."""
    content_id: uuid.UUID


@dataclass(frozen=True, slots=True)
class SeasonKey:
    """One season of a web series."""
    content_id: uuid.UUID
    season_number: int

    def __post_init__(self) -> None:
        if self.season_number < 1:
            raise ValueError("season_number must be >= 1")


DisplayKey: TypeAlias = ContentKey | SeasonKey


def encode_display_id(key: DisplayKey) -> str:
    if isinstance(key, SeasonKey):
        return f"{key.content_id}{SEASON_SEPARATOR}{key.season_number}"
    return str(key.content_id)


def decode_display_id(value: str) -> DisplayKey:
    """Parse a display id back into its key; raise ValueError when malformed."""
    candidate = (value or "").strip()
    match = _SEASON_ID_RE.match(candidate)
    if match:
        return SeasonKey(content_id=uuid.UUID(match.group("base")), season_number=int(match.group("number")))
    return ContentKey(content_id=uuid.UUID(candidate))
