"""Private tempfile helpers for key material handed to external tools."""

from __future__ import annotations

import contextlib
import os
import tempfile
from pathlib import Path
from typing import Iterator, Optional


def secure_temp_file(
    *,
    prefix: str = "relpub-",
    suffix: str = "",
    directory: Optional[Path | str] = None,
) -> Path:
    """Create an owner-only temporary file and return its Path.

    :func:`tempfile.mkstemp` opens the file with mode 0600; the descriptor is
    closed immediately so callers work through pathlib.
    """

    dir_path = Path(directory) if directory else Path(tempfile.gettempdir())
    dir_path.mkdir(parents=True, exist_ok=True)
    fd, path_str = tempfile.mkstemp(prefix=prefix, suffix=suffix, dir=str(dir_path))
    os.close(fd)
    return Path(path_str)


@contextlib.contextmanager
def secret_file(
    payload: str,
    *,
    prefix: str = "relpub-key-",
    directory: Optional[Path | str] = None,
) -> Iterator[Path]:
    """Write ``payload`` to a private temp file and remove it on exit."""

    path = secure_temp_file(prefix=prefix, suffix=".asc", directory=directory)
    try:
        path.write_text(payload, encoding="utf-8")
        yield path
    finally:
        path.unlink(missing_ok=True)
