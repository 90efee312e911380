"""Release hosting adapter backed by the GitHub CLI (``gh``)."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Sequence

from tools.release_publisher.constants import RELEASE_LIST_FIELDS, RELEASE_VIEW_FIELDS
from tools.release_publisher.errors import HostingError, ToolError
from tools.release_publisher.runner import Runner, ToolRequest
from tools.release_publisher.time_utils import iso_to_epoch

_NOT_FOUND_MARKERS = ("release not found", "http 404")


@dataclass(frozen=True)
class Release:
    tag_name: str
    is_prerelease: bool
    created_at: Optional[str] = None
    # Listing calls do not return assets; only releases fetched by tag carry them.
    assets: FrozenSet[str] = field(default_factory=frozenset)

    @property
    def created_epoch(self) -> Optional[int]:
        return iso_to_epoch(self.created_at)

    def is_flagged(self, sentinel: str) -> bool:
        """A pre-release the automation created but never finished publishing."""
        return self.is_prerelease and sentinel in self.assets

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "Release":
        names = set()
        for asset in payload.get("assets") or []:
            if isinstance(asset, dict) and asset.get("name"):
                names.add(str(asset["name"]))
            elif isinstance(asset, str):
                names.add(asset)
        created = payload.get("createdAt")
        return cls(
            tag_name=str(payload.get("tagName", "")),
            is_prerelease=bool(payload.get("isPrerelease", False)),
            created_at=created if isinstance(created, str) and created else None,
            assets=frozenset(names),
        )


def _decode(stdout: str, what: str) -> Any:
    try:
        return json.loads(stdout or "null")
    except json.JSONDecodeError as exc:
        raise HostingError(f"could not parse {what} response: {exc}") from exc


class GitHubReleaseClient:
    def __init__(self, runner: Runner, repo: str, cwd: Optional[Path] = None) -> None:
        self.runner = runner
        self.repo = repo
        self.cwd = cwd

    def _gh(self, *args: str, check: bool = True):
        request = ToolRequest(("gh", "release", *args, "--repo", self.repo), cwd=self.cwd)
        try:
            return self.runner.run(request, check=check)
        except ToolError as exc:
            raise HostingError(f"gh release {args[0]} failed: {exc}") from exc

    def get_release(self, tag: str) -> Optional[Release]:
        """Return the release for ``tag`` or None when the host has no such release."""

        result = self._gh("view", tag, "--json", RELEASE_VIEW_FIELDS, check=False)
        if not result.ok:
            stderr = result.stderr.lower()
            if any(marker in stderr for marker in _NOT_FOUND_MARKERS):
                return None
            raise HostingError(
                f"gh release view {tag} failed ({result.returncode}): {result.stderr.strip()}"
            )
        payload = _decode(result.stdout, "release view")
        if not isinstance(payload, dict):
            raise HostingError(f"unexpected release view payload for {tag}")
        return Release.from_payload(payload)

    def list_releases(self, limit: int) -> List[Release]:
        """Return up to ``limit`` releases in the host's listing order."""

        result = self._gh("list", "--limit", str(limit), "--json", RELEASE_LIST_FIELDS)
        payload = _decode(result.stdout, "release list")
        if not isinstance(payload, list):
            raise HostingError("unexpected release list payload")
        return [Release.from_payload(item) for item in payload if isinstance(item, dict)]

    def upload_assets(self, tag: str, paths: Sequence[Path]) -> None:
        """Upload ``paths``, replacing same-named assets left by an earlier run."""

        self._gh("upload", tag, *(str(path) for path in paths), "--clobber")

    def delete_asset(self, tag: str, name: str) -> None:
        self._gh("delete-asset", tag, name, "--yes")

    def delete_release(self, tag: str) -> None:
        """Delete the release and its assets; the git tag is left in place."""

        self._gh("delete", tag, "--yes")

    def set_prerelease(self, tag: str, prerelease: bool, *, latest: bool = False) -> None:
        args = ["edit", tag, f"--prerelease={'true' if prerelease else 'false'}"]
        if latest:
            args.append("--latest")
        self._gh(*args)
