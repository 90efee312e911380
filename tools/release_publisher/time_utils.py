"""Timestamp helpers for release metadata."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional


def iso_to_epoch(value: Optional[str]) -> Optional[int]:
    """Convert an ISO-8601 timestamp (``2024-05-01T12:00:00Z``) to epoch seconds.

    Returns None for missing or unparsable input. Naive timestamps are taken
    as UTC, which is what the hosting service emits.
    """

    if not value or not isinstance(value, str):
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


def epoch_to_iso(epoch: int) -> str:
    return datetime.fromtimestamp(epoch, tz=timezone.utc).isoformat().replace("+00:00", "Z")
