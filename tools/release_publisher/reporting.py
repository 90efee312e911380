"""Operator-facing output with the ``publish-release:`` prefix."""

from __future__ import annotations

from typing import Iterable, Mapping, Optional

import click

from tools.release_publisher.constants import LOG_PREFIX
from tools.release_publisher.secret_scrubber import scrub_text

_extra_secrets: list[str] = []


def register_secret(value: Optional[str]) -> None:
    """Redact ``value`` from every message printed afterwards."""

    if value and value not in _extra_secrets:
        _extra_secrets.append(value)


def clear_secrets() -> None:
    _extra_secrets.clear()


def _clean(message: str, env: Optional[Mapping[str, str]] = None) -> str:
    return scrub_text(message, env=env, extra=_extra_secrets)


def info(message: str) -> None:
    click.echo(f"{LOG_PREFIX}: {_clean(message)}")


def warn(message: str) -> None:
    click.echo(f"{LOG_PREFIX}: warning: {_clean(message)}", err=True)


def error(message: str) -> None:
    click.echo(f"{LOG_PREFIX}: error: {_clean(message)}", err=True)


def command(argv: Iterable[str]) -> None:
    click.echo(_clean(f"$ {' '.join(argv)}"))
