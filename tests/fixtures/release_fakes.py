"""In-memory collaborators for exercising the publisher without external tools."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from tools.release_publisher.errors import BuildError, HostingError, SigningError, ToolError
from tools.release_publisher.hosting import Release
from tools.release_publisher.runner import ToolRequest, ToolResult

SENTINEL = "publish-pending"


def make_release(
    tag: str,
    *,
    prerelease: bool = True,
    created_at: Optional[str] = "2024-05-01T12:00:00Z",
    sentinel: bool = True,
    assets: Sequence[str] = (),
) -> Release:
    names = set(assets)
    if sentinel:
        names.add(SENTINEL)
    return Release(tag, prerelease, created_at, frozenset(names))


class FakeHosting:
    def __init__(
        self, releases: Sequence[Release] = (), events: Optional[List[str]] = None
    ) -> None:
        # Listing order is insertion order, newest first by convention.
        self.releases: Dict[str, Release] = {r.tag_name: r for r in releases}
        self.uploaded: Dict[str, Dict[str, bytes]] = {}
        self.deleted_releases: List[str] = []
        self.events = events if events is not None else []
        self.fail_upload = False

    def get_release(self, tag: str) -> Optional[Release]:
        self.events.append(f"get:{tag}")
        return self.releases.get(tag)

    def list_releases(self, limit: int) -> List[Release]:
        self.events.append(f"list:{limit}")
        return [replace(r, assets=frozenset()) for r in list(self.releases.values())[:limit]]

    def upload_assets(self, tag: str, paths: Sequence[Path]) -> None:
        self.events.append(f"upload:{tag}")
        if self.fail_upload:
            raise HostingError("upload rejected")
        store = self.uploaded.setdefault(tag, {})
        for path in paths:
            store[path.name] = path.read_bytes()
        release = self.releases[tag]
        self.releases[tag] = replace(
            release, assets=release.assets | {path.name for path in paths}
        )

    def delete_asset(self, tag: str, name: str) -> None:
        self.events.append(f"delete-asset:{tag}:{name}")
        release = self.releases[tag]
        if name not in release.assets:
            raise HostingError(f"asset {name} not found on {tag}")
        self.releases[tag] = replace(release, assets=release.assets - {name})

    def delete_release(self, tag: str) -> None:
        self.events.append(f"delete-release:{tag}")
        self.deleted_releases.append(tag)
        del self.releases[tag]

    def set_prerelease(self, tag: str, prerelease: bool, *, latest: bool = False) -> None:
        self.events.append(f"edit:{tag}")
        self.releases[tag] = replace(self.releases[tag], is_prerelease=prerelease)


class FakeBuilder:
    def __init__(
        self,
        dist_dir: Path,
        prefix: str,
        *,
        archives: Sequence[str] = ("linux_amd64", "darwin_arm64"),
        events: Optional[List[str]] = None,
        fail: bool = False,
    ) -> None:
        self.dist_dir = dist_dir
        self.prefix = prefix
        self.archives = list(archives)
        self.events = events if events is not None else []
        self.fail = fail
        self.skip_validate: Optional[bool] = None

    def build(self, *, skip_validate: bool) -> None:
        self.events.append("build")
        self.skip_validate = skip_validate
        if self.fail:
            raise BuildError("goreleaser build failed: exit 1")
        self.dist_dir.mkdir(parents=True, exist_ok=True)
        for platform in self.archives:
            (self.dist_dir / f"{self.prefix}_{platform}.zip").write_bytes(
                f"archive {platform}".encode()
            )


class FakeSigner:
    def __init__(
        self,
        fingerprints: Sequence[str] = ("AAAA1111", "BBBB2222"),
        *,
        events: Optional[List[str]] = None,
        fail: bool = False,
    ) -> None:
        self.fingerprints = list(fingerprints)
        self.events = events if events is not None else []
        self.fail = fail
        self.imported: List[Tuple[str, Optional[str]]] = []
        self.signed_with: Optional[str] = None
        self.passphrase: Optional[str] = None

    def resolve_fingerprint(self, explicit: Optional[str] = None) -> str:
        if explicit:
            return explicit
        if not self.fingerprints:
            raise SigningError("no signing key available in the keyring")
        return self.fingerprints[-1]

    def import_key(self, armored: str, passphrase: Optional[str] = None) -> None:
        self.events.append("import")
        self.imported.append((armored, passphrase))

    def detach_sign(
        self,
        target: Path,
        fingerprint: str,
        *,
        output: Optional[Path] = None,
        passphrase: Optional[str] = None,
    ) -> Path:
        self.events.append("sign")
        if self.fail:
            raise SigningError("gpg could not sign: bad passphrase")
        self.signed_with = fingerprint
        self.passphrase = passphrase
        signature = output or target.with_name(target.name + ".sig")
        signature.write_bytes(b"SIG:" + target.read_bytes()[:16])
        return signature


class RecordingRunner:
    """Runner double that returns queued results and records every request."""

    def __init__(self, results: Sequence[ToolResult] = ()) -> None:
        self.results = list(results)
        self.requests: List[ToolRequest] = []

    def run(self, request: ToolRequest, *, check: bool = True) -> ToolResult:
        self.requests.append(request)
        result = self.results.pop(0) if self.results else ToolResult(0)
        if check and not result.ok:
            raise ToolError(request.argv, result.returncode, result.stdout, result.stderr)
        return result

    @property
    def argvs(self) -> List[Tuple[str, ...]]:
        return [request.argv for request in self.requests]
