"""Version-control adapter."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List, Optional

from tools.release_publisher.constants import TAG_GLOB
from tools.release_publisher.runner import Runner, ToolRequest

_SLUG_RE = re.compile(r"github\.com[:/](?P<slug>[A-Za-z0-9_.-]+/[A-Za-z0-9_.-]+?)(?:\.git)?$")


class GitClient:
    def __init__(self, runner: Runner, cwd: Optional[Path] = None) -> None:
        self.runner = runner
        self.cwd = cwd

    def list_tags(self) -> List[str]:
        """Return ``v*`` tags, most recently created first."""

        result = self.runner.run(
            ToolRequest(
                ("git", "tag", "--list", TAG_GLOB, "--sort=-creatordate"),
                cwd=self.cwd,
            )
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def latest_tag(self) -> Optional[str]:
        tags = self.list_tags()
        return tags[0] if tags else None

    def repo_slug(self) -> Optional[str]:
        """Return ``owner/repo`` from the ``origin`` remote, if it points at GitHub."""

        result = self.runner.run(
            ToolRequest(("git", "remote", "get-url", "origin"), cwd=self.cwd),
            check=False,
        )
        if not result.ok:
            return None
        match = _SLUG_RE.search(result.stdout.strip())
        return match.group("slug") if match else None
