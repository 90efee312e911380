"""SHA-256 checksum manifests in ``sha256sum`` format."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import List, Sequence, Tuple

ChecksumEntry = Tuple[str, str]


def sha256_file(path: Path) -> str:
    digest = hashlib.sha256()
    with path.open("rb") as handle:
        for chunk in iter(lambda: handle.read(1024 * 1024), b""):
            digest.update(chunk)
    return digest.hexdigest()


def render_manifest(entries: Sequence[ChecksumEntry]) -> str:
    return "".join(f"{digest}  {name}\n" for name, digest in entries)


class ChecksumClient:
    """Compute digests for a fixed, caller-ordered list of files."""

    def digest_files(self, files: Sequence[Path]) -> List[ChecksumEntry]:
        return [(path.name, sha256_file(path)) for path in files]

    def write_manifest(self, files: Sequence[Path], output: Path) -> List[ChecksumEntry]:
        entries = self.digest_files(files)
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(render_manifest(entries), encoding="utf-8")
        return entries
