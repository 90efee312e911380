"""Subprocess execution for the external tools the publisher drives."""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional, Protocol, Tuple

from tools.release_publisher import reporting
from tools.release_publisher.errors import ToolError


@dataclass(frozen=True)
class ToolRequest:
    """A single external command invocation."""

    argv: Tuple[str, ...]
    cwd: Optional[Path] = None
    env: Dict[str, str] = field(default_factory=dict)
    input_text: Optional[str] = None
    capture: bool = True


@dataclass(frozen=True)
class ToolResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def run(self, request: ToolRequest, *, check: bool = True) -> ToolResult:
        ...


class CommandRunner:
    """Run requests with :func:`subprocess.run`, raising on non-zero exit."""

    def __init__(self, *, echo: bool = True) -> None:
        self.echo = echo

    def run(self, request: ToolRequest, *, check: bool = True) -> ToolResult:
        if self.echo:
            reporting.command(request.argv)
        env = None
        if request.env:
            env = os.environ.copy()
            env.update(request.env)
        try:
            proc = subprocess.run(
                list(request.argv),
                cwd=str(request.cwd) if request.cwd else None,
                env=env,
                input=request.input_text,
                capture_output=request.capture,
                text=True,
            )
        except FileNotFoundError as exc:
            raise ToolError(
                request.argv, 127, message=f"{request.argv[0]} not found on PATH"
            ) from exc
        result = ToolResult(proc.returncode, proc.stdout or "", proc.stderr or "")
        if check and not result.ok:
            raise ToolError(request.argv, result.returncode, result.stdout, result.stderr)
        return result
