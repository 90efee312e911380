"""``publish-release`` command line entry point."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import click

from tools.release_publisher import reporting
from tools.release_publisher.build import GoReleaserClient
from tools.release_publisher.config import PublishConfig, build_config
from tools.release_publisher.constants import EXIT_FAILURE, EXIT_OK
from tools.release_publisher.errors import PublishError
from tools.release_publisher.git import GitClient
from tools.release_publisher.hosting import GitHubReleaseClient
from tools.release_publisher.publisher import PublishOutcome, ReleasePublisher
from tools.release_publisher.runner import CommandRunner, Runner
from tools.release_publisher.signing import GpgClient


def make_publisher(config: PublishConfig, runner: Runner) -> ReleasePublisher:
    return ReleasePublisher(
        config,
        hosting=GitHubReleaseClient(runner, config.repo, cwd=config.workdir),
        signer=GpgClient(runner),
        builder=GoReleaserClient(runner, config.workdir),
    )


def _summarize(outcome: PublishOutcome) -> None:
    if not outcome.published:
        return
    for name in outcome.uploaded:
        click.echo(f" - {name}")
    if outcome.collected:
        reporting.info(f"garbage-collected: {', '.join(outcome.collected)}")


@click.command(name="publish-release")
@click.option("--tag", help="Release tag (default: GIT_TAG, GIT_REF, or latest v* tag locally).")
@click.option("--repo", help="owner/name of the hosting repository (default: GITHUB_REPOSITORY).")
@click.option("--project", help="Artifact name prefix (default: repository name).")
@click.option(
    "--fingerprint",
    help="Signing key fingerprint (default: GPG_FINGERPRINT or last listed key).",
)
@click.option(
    "--ci/--local",
    "automated",
    default=None,
    help="Force automated or local mode (default: detected from GITHUB_ACTIONS/CI).",
)
@click.option("--dist", "dist_dir", type=click.Path(path_type=Path), help="Build output directory.")
@click.option(
    "--manifest-template",
    type=click.Path(path_type=Path),
    help="Static manifest copied into the build output.",
)
@click.option(
    "--workdir",
    type=click.Path(path_type=Path, file_okay=False),
    help="Project checkout to build (default: current directory).",
)
def main(
    tag: Optional[str],
    repo: Optional[str],
    project: Optional[str],
    fingerprint: Optional[str],
    automated: Optional[bool],
    dist_dir: Optional[Path],
    manifest_template: Optional[Path],
    workdir: Optional[Path],
) -> None:
    """Build, sign and publish the artifacts for a tagged pre-release."""

    runner = CommandRunner()
    env = dict(os.environ)
    git = GitClient(runner, cwd=workdir)
    try:
        config = build_config(
            env=env,
            tag=tag,
            repo=repo,
            project=project,
            fingerprint=fingerprint,
            automated=automated,
            workdir=workdir,
            dist_dir=dist_dir,
            manifest_template=manifest_template,
            latest_tag=git.latest_tag,
            repo_slug=git.repo_slug,
        )
        reporting.register_secret(config.passphrase)
        reporting.register_secret(config.signing_key)
        mode = "automated" if config.automated else "local"
        reporting.info(f"publishing {config.tag} for {config.repo} ({mode})")
        outcome = make_publisher(config, runner).run()
    except PublishError as exc:
        reporting.error(str(exc))
        raise click.exceptions.Exit(EXIT_FAILURE)
    _summarize(outcome)
    raise click.exceptions.Exit(EXIT_OK)


if __name__ == "__main__":
    main()
