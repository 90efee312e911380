"""Pre-release lifecycle orchestration.

The flow is strictly linear: eligibility, build, manifest, checksums,
signature, upload/promotion, garbage collection. Every collaborator call that
fails raises a :class:`~tools.release_publisher.errors.PublishError` and the
run stops there.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence

from tools.release_publisher import reporting
from tools.release_publisher.artifacts import ArtifactBundle
from tools.release_publisher.checksums import ChecksumClient
from tools.release_publisher.config import PublishConfig
from tools.release_publisher.constants import GC_LISTING_LIMIT, LATEST_LISTING_LIMIT
from tools.release_publisher.errors import ConsistencyError
from tools.release_publisher.hosting import Release
from tools.release_publisher.time_utils import epoch_to_iso


class HostingClient(Protocol):
    def get_release(self, tag: str) -> Optional[Release]: ...

    def list_releases(self, limit: int) -> List[Release]: ...

    def upload_assets(self, tag: str, paths: Sequence[Path]) -> None: ...

    def delete_asset(self, tag: str, name: str) -> None: ...

    def delete_release(self, tag: str) -> None: ...

    def set_prerelease(self, tag: str, prerelease: bool, *, latest: bool = False) -> None: ...


class SigningClient(Protocol):
    def resolve_fingerprint(self, explicit: Optional[str] = None) -> str: ...

    def import_key(self, armored: str, passphrase: Optional[str] = None) -> None: ...

    def detach_sign(
        self,
        target: Path,
        fingerprint: str,
        *,
        output: Optional[Path] = None,
        passphrase: Optional[str] = None,
    ) -> Path: ...


class BuildClient(Protocol):
    def build(self, *, skip_validate: bool) -> None: ...


class Eligibility(enum.Enum):
    PROCEED = "proceed"
    ALREADY_PUBLISHED = "already-published"
    SKIPPED_LOCAL = "skipped-local"


@dataclass(frozen=True)
class EligibilityResult:
    status: Eligibility
    created_epoch: Optional[int] = None


@dataclass
class PublishOutcome:
    tag: str
    eligibility: Eligibility
    uploaded: List[str] = field(default_factory=list)
    latest: bool = False
    collected: List[str] = field(default_factory=list)

    @property
    def published(self) -> bool:
        return self.eligibility is not Eligibility.ALREADY_PUBLISHED


class ReleasePublisher:
    def __init__(
        self,
        config: PublishConfig,
        *,
        hosting: HostingClient,
        signer: SigningClient,
        builder: BuildClient,
        checksums: Optional[ChecksumClient] = None,
    ) -> None:
        self.config = config
        self.hosting = hosting
        self.signer = signer
        self.builder = builder
        self.checksums = checksums or ChecksumClient()
        self.bundle = ArtifactBundle(config.dist_dir, config.artifact_prefix)

    def check_eligibility(self) -> EligibilityResult:
        """Decide whether the tag should be published.

        Proceeds only for a flagged pre-release (pre-release flag set and the
        sentinel asset still attached). A release that is no longer a
        pre-release was already published and is a no-op; anything else means
        the hosting state moved underneath us.
        """

        tag = self.config.tag
        if not self.config.automated:
            reporting.info(f"local run; skipping eligibility check for {tag}")
            return EligibilityResult(Eligibility.SKIPPED_LOCAL)

        release = self.hosting.get_release(tag)
        if release is not None and release.is_flagged(self.config.sentinel_asset):
            epoch = release.created_epoch
            if epoch is None:
                raise ConsistencyError(f"release {tag} has no usable createdAt timestamp")
            return EligibilityResult(Eligibility.PROCEED, created_epoch=epoch)

        if release is not None and not release.is_prerelease:
            reporting.info(f"{tag} is already published; nothing to do")
            return EligibilityResult(Eligibility.ALREADY_PUBLISHED)

        if release is None:
            raise ConsistencyError(f"no release found for {tag}")
        raise ConsistencyError(
            f"{tag} is a pre-release without the {self.config.sentinel_asset!r} asset; "
            "it was published by another run or not created by the release automation"
        )

    def assemble(self) -> ArtifactBundle:
        """Build archives, place the versioned manifest, and write checksums."""

        self.builder.build(skip_validate=not self.config.automated)
        self.bundle.copy_manifest(self.config.manifest_template)
        entries = self.bundle.write_checksums(self.checksums)
        reporting.info(f"wrote {self.bundle.checksum_path.name} ({len(entries)} files)")
        return self.bundle

    def sign(self) -> Path:
        if self.config.signing_key:
            self.signer.import_key(self.config.signing_key, self.config.passphrase)
        fingerprint = self.signer.resolve_fingerprint(self.config.fingerprint)
        signature = self.signer.detach_sign(
            self.bundle.checksum_path,
            fingerprint,
            output=self.bundle.signature_path,
            passphrase=self.config.passphrase,
        )
        reporting.info(f"signed {self.bundle.checksum_path.name} with {fingerprint}")
        return signature

    def is_latest(self) -> bool:
        """True when the tag heads the host listing and is not a semver pre-release.

        Only the first listing entry is compared, so this relies on the host
        returning newest releases first.
        """

        tag = self.config.tag
        if "-" in tag:
            return False
        listing = self.hosting.list_releases(LATEST_LISTING_LIMIT)
        return bool(listing) and listing[0].tag_name == tag

    def upload_and_promote(self, eligibility: EligibilityResult) -> PublishOutcome:
        tag = self.config.tag
        paths = self.bundle.upload_paths()
        self.hosting.upload_assets(tag, paths)
        outcome = PublishOutcome(tag, eligibility.status, uploaded=[p.name for p in paths])

        outcome.latest = self.is_latest()
        if outcome.latest:
            # Promotion (set_prerelease(tag, False, latest=True)) stays disabled
            # until the release owners decide whether this flow should flip it.
            reporting.info(f"{tag} is the newest stable tag; promotion is disabled")

        self._clear_sentinel(eligibility)
        return outcome

    def _clear_sentinel(self, eligibility: EligibilityResult) -> None:
        tag = self.config.tag
        sentinel = self.config.sentinel_asset
        if eligibility.status is Eligibility.SKIPPED_LOCAL:
            release = self.hosting.get_release(tag)
            if release is None or sentinel not in release.assets:
                reporting.info(f"{tag} carries no {sentinel!r} asset; leaving it as is")
                return
        self.hosting.delete_asset(tag, sentinel)
        reporting.info(f"removed {sentinel!r} from {tag}")

    def collect_garbage(self, published_epoch: int) -> List[str]:
        """Delete flagged pre-releases created strictly before ``published_epoch``."""

        sentinel = self.config.sentinel_asset
        deleted: List[str] = []
        for candidate in self.hosting.list_releases(GC_LISTING_LIMIT):
            if candidate.tag_name == self.config.tag or not candidate.is_prerelease:
                continue
            created = candidate.created_epoch
            if created is None or created >= published_epoch:
                continue
            current = self.hosting.get_release(candidate.tag_name)
            if current is None or not current.is_flagged(sentinel):
                continue
            self.hosting.delete_release(candidate.tag_name)
            reporting.info(
                f"deleted abandoned pre-release {candidate.tag_name} "
                f"(created {epoch_to_iso(created)})"
            )
            deleted.append(candidate.tag_name)
        return deleted

    def run(self) -> PublishOutcome:
        eligibility = self.check_eligibility()
        if eligibility.status is Eligibility.ALREADY_PUBLISHED:
            return PublishOutcome(self.config.tag, eligibility.status)

        self.assemble()
        self.sign()
        outcome = self.upload_and_promote(eligibility)
        if eligibility.created_epoch is not None:
            outcome.collected = self.collect_garbage(eligibility.created_epoch)
        reporting.info(f"published {self.config.tag}")
        return outcome
