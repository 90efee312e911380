"""Error taxonomy for the release publisher.

Every failure surfaces as a subclass of :class:`PublishError`; the CLI turns any
of them into exit code 1. Nothing below is retried.
"""

from __future__ import annotations

from typing import Optional, Sequence


class PublishError(RuntimeError):
    """Base class for fatal publish failures."""


class ConfigurationError(PublishError):
    """Required configuration is absent or malformed."""


class ConsistencyError(PublishError):
    """Hosting state does not match what the publish flow expects."""


class BuildError(PublishError):
    """The packager failed or produced no archives."""


class SigningError(PublishError):
    """Key resolution, import, or detached signing failed."""


class HostingError(PublishError):
    """A release hosting call failed."""


class ToolError(PublishError):
    """An external command exited non-zero."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int,
        stdout: str = "",
        stderr: str = "",
        message: Optional[str] = None,
    ) -> None:
        self.argv = list(argv)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        detail = message or f"{self.argv[0]} exited with status {returncode}"
        tail = stderr.strip()
        if tail:
            detail = f"{detail}: {tail}"
        super().__init__(detail)


__all__ = [
    "PublishError",
    "ConfigurationError",
    "ConsistencyError",
    "BuildError",
    "SigningError",
    "HostingError",
    "ToolError",
]
