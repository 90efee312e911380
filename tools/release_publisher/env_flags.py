from __future__ import annotations

import os
from typing import Mapping, Optional

_TRUTHY = {"1", "true", "yes", "on"}
_FALSEY = {"0", "false", "no", "off"}

AUTOMATION_MARKERS = ("GITHUB_ACTIONS", "CI")
AUTOMATION_OVERRIDE = "RELPUB_AUTOMATED"


def env_truthy(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _TRUTHY


def env_falsey(value: Optional[str]) -> bool:
    if value is None:
        return False
    return value.strip().lower() in _FALSEY


def env_value(name: str, env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the stripped value of ``name`` or None when unset or blank."""

    source = os.environ if env is None else env
    value = source.get(name)
    if value is None:
        return None
    trimmed = value.strip()
    return trimmed or None


def is_automated(env: Optional[Mapping[str, str]] = None) -> bool:
    """Return True when running inside CI rather than on a developer machine.

    ``RELPUB_AUTOMATED`` wins when it holds a recognised boolean; otherwise any
    truthy ``GITHUB_ACTIONS`` or ``CI`` marker counts.
    """

    source = os.environ if env is None else env
    override = source.get(AUTOMATION_OVERRIDE)
    if env_truthy(override):
        return True
    if env_falsey(override):
        return False
    return any(env_truthy(source.get(marker)) for marker in AUTOMATION_MARKERS)
