"""Names and assembly of the per-release artifact bundle."""

from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List

from tools.release_publisher.checksums import ChecksumClient, ChecksumEntry
from tools.release_publisher.errors import BuildError


@dataclass(frozen=True)
class ArtifactBundle:
    """Files under ``dist_dir`` named ``{project}_{version}...``."""

    dist_dir: Path
    prefix: str

    @property
    def manifest_path(self) -> Path:
        return self.dist_dir / f"{self.prefix}_manifest.json"

    @property
    def checksum_path(self) -> Path:
        return self.dist_dir / f"{self.prefix}_SHA256SUMS"

    @property
    def signature_path(self) -> Path:
        return self.dist_dir / f"{self.prefix}_SHA256SUMS.sig"

    def archives(self) -> List[Path]:
        """Every zip archive in ``dist_dir``; goreleaser --clean leaves only this run's."""
        return sorted(
            (p for p in self.dist_dir.glob("*.zip") if p.is_file()),
            key=lambda p: p.name,
        )

    def upload_paths(self) -> List[Path]:
        return [self.manifest_path, self.checksum_path, self.signature_path, *self.archives()]

    def copy_manifest(self, template: Path) -> Path:
        if not template.is_file():
            raise BuildError(f"manifest template not found: {template}")
        try:
            self.dist_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(template, self.manifest_path)
        except OSError as exc:
            raise BuildError(f"could not place manifest {self.manifest_path.name}: {exc}") from exc
        return self.manifest_path

    def write_checksums(self, client: ChecksumClient) -> List[ChecksumEntry]:
        """Checksum the manifest plus every archive; zero archives is a build failure."""

        archives = self.archives()
        if not archives:
            raise BuildError(f"no *.zip archives found in {self.dist_dir}")
        if not self.manifest_path.is_file():
            raise BuildError(f"manifest missing at checksum time: {self.manifest_path}")
        try:
            return client.write_manifest([self.manifest_path, *archives], self.checksum_path)
        except OSError as exc:
            raise BuildError(f"could not write {self.checksum_path.name}: {exc}") from exc
