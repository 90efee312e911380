"""Redaction of signing material and tokens from operator output.

Values come from two places: environment variables whose names look
sensitive, and literals registered at runtime (the configured passphrase and
the armored key). Armored keys span many lines and tool diagnostics often echo
only one of them, so every long line of a multi-line value is redacted too.
"""

from __future__ import annotations

import os
from typing import Iterable, List, Mapping, Tuple

SENSITIVE_KEY_HINTS = (
    "SECRET",
    "TOKEN",
    "PASSWORD",
    "PASSPHRASE",
    "PRIVATE_KEY",
    "SIGNING_KEY",
)

MIN_SECRET_VALUE_LENGTH = 8

_ARMOR_MARKER = "-----"


def _is_sensitive_key(name: str) -> bool:
    upper = name.upper()
    return any(hint in upper for hint in SENSITIVE_KEY_HINTS)


def _fragments(value: str) -> List[str]:
    """The value itself plus each long, non-armor line of a multi-line value."""

    parts = [value]
    if "\n" in value:
        for line in value.splitlines():
            line = line.strip()
            if len(line) >= MIN_SECRET_VALUE_LENGTH and not line.startswith(_ARMOR_MARKER):
                parts.append(line)
    return parts


def _replacements(
    env: Mapping[str, str] | None, extra: Iterable[str]
) -> List[Tuple[str, str]]:
    env_map = os.environ if env is None else env
    pairs: List[Tuple[str, str]] = []
    for key, value in env_map.items():
        if not value or len(value) < MIN_SECRET_VALUE_LENGTH or not _is_sensitive_key(key):
            continue
        pairs.extend((fragment, f"[REDACTED:{key}]") for fragment in _fragments(value))
    for value in extra:
        if value:
            pairs.extend((fragment, "[REDACTED]") for fragment in _fragments(value))
    # Longest first so a secret that contains another is replaced whole.
    pairs.sort(key=lambda pair: len(pair[0]), reverse=True)
    return pairs


def scrub_text(
    text: str,
    env: Mapping[str, str] | None = None,
    extra: Iterable[str] = (),
) -> str:
    for secret, marker in _replacements(env, extra):
        if secret in text:
            text = text.replace(secret, marker)
    return text


__all__ = ["scrub_text"]
