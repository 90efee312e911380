"""Immutable run configuration assembled from CLI options and the environment."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Optional

from tools.release_publisher.constants import (
    DEFAULT_DIST_DIR,
    DEFAULT_MANIFEST_TEMPLATE,
    SENTINEL_ASSET,
    TAG_PATTERN,
)
from tools.release_publisher.env_flags import env_value, is_automated
from tools.release_publisher.errors import ConfigurationError


@dataclass(frozen=True)
class PublishConfig:
    tag: str
    repo: str
    project: str
    automated: bool
    workdir: Path
    dist_dir: Path
    manifest_template: Path
    fingerprint: Optional[str] = None
    signing_key: Optional[str] = None
    passphrase: Optional[str] = None
    sentinel_asset: str = SENTINEL_ASSET

    @property
    def version(self) -> str:
        """Tag without its leading ``v``."""
        return self.tag[1:]

    @property
    def artifact_prefix(self) -> str:
        return f"{self.project}_{self.version}"


def tag_from_ref(ref: Optional[str]) -> Optional[str]:
    """``refs/tags/v1.2.3`` -> ``v1.2.3``."""

    if not ref:
        return None
    return ref.rstrip("/").rsplit("/", 1)[-1] or None


def validate_tag(tag: str) -> str:
    if not TAG_PATTERN.match(tag):
        raise ConfigurationError(
            f"tag {tag!r} does not look like vMAJOR.MINOR.PATCH[-PRERELEASE]"
        )
    return tag


def build_config(
    *,
    env: Mapping[str, str],
    tag: Optional[str] = None,
    repo: Optional[str] = None,
    project: Optional[str] = None,
    fingerprint: Optional[str] = None,
    automated: Optional[bool] = None,
    workdir: Optional[Path] = None,
    dist_dir: Optional[Path] = None,
    manifest_template: Optional[Path] = None,
    latest_tag: Optional[Callable[[], Optional[str]]] = None,
    repo_slug: Optional[Callable[[], Optional[str]]] = None,
) -> PublishConfig:
    """Resolve every setting once, failing fast on anything missing.

    Explicit arguments win over the environment. ``latest_tag`` and
    ``repo_slug`` are consulted only as local-mode fallbacks.
    """

    automated = is_automated(env) if automated is None else automated
    root = (workdir or Path.cwd()).resolve()

    resolved_tag = (
        tag
        or env_value("GIT_TAG", env)
        or tag_from_ref(env_value("GIT_REF", env))
    )
    if not resolved_tag and not automated and latest_tag is not None:
        resolved_tag = latest_tag()
    if not resolved_tag:
        raise ConfigurationError(
            "no release tag: pass --tag, set GIT_TAG/GIT_REF, or create a v* tag"
        )
    validate_tag(resolved_tag)

    resolved_repo = repo or env_value("GITHUB_REPOSITORY", env)
    if not resolved_repo and repo_slug is not None:
        resolved_repo = repo_slug()
    if not resolved_repo or "/" not in resolved_repo:
        raise ConfigurationError(
            "repository must be given as owner/name via --repo or GITHUB_REPOSITORY"
        )

    resolved_project = project or env_value("RELPUB_PROJECT", env) or resolved_repo.split("/", 1)[1]

    signing_key = env_value("GPG_SIGNING_KEY", env)
    passphrase = env_value("GPG_SIGNING_PASSWORD", env)
    if automated:
        missing = [
            name
            for name, value in (
                ("GPG_SIGNING_KEY", signing_key),
                ("GPG_SIGNING_PASSWORD", passphrase),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                f"missing signing credentials in automated mode: {', '.join(missing)}"
            )

    dist = dist_dir or Path(env_value("RELPUB_DIST_DIR", env) or DEFAULT_DIST_DIR)
    template = manifest_template or Path(DEFAULT_MANIFEST_TEMPLATE)

    return PublishConfig(
        tag=resolved_tag,
        repo=resolved_repo,
        project=resolved_project,
        automated=automated,
        workdir=root,
        dist_dir=dist if dist.is_absolute() else root / dist,
        manifest_template=template if template.is_absolute() else root / template,
        fingerprint=fingerprint or env_value("GPG_FINGERPRINT", env),
        signing_key=signing_key,
        passphrase=passphrase,
        sentinel_asset=env_value("RELPUB_SENTINEL_ASSET", env) or SENTINEL_ASSET,
    )
