from __future__ import annotations

import pytest

from tools.release_publisher.artifacts import ArtifactBundle
from tools.release_publisher.checksums import ChecksumClient
from tools.release_publisher.errors import BuildError


def test_bundle_names(tmp_path):
    bundle = ArtifactBundle(tmp_path, "terraform-provider-sink_1.2.3")
    assert bundle.manifest_path.name == "terraform-provider-sink_1.2.3_manifest.json"
    assert bundle.checksum_path.name == "terraform-provider-sink_1.2.3_SHA256SUMS"
    assert bundle.signature_path.name == "terraform-provider-sink_1.2.3_SHA256SUMS.sig"


def test_archives_cover_every_zip_in_dist(tmp_path):
    bundle = ArtifactBundle(tmp_path, "proj_1.2.3")
    for name in (
        "proj_1.2.3_linux_amd64.zip",
        "proj_1.2.3_darwin_arm64.zip",
        "proj_1.2.3_checksums.txt",
        "other_1.2.3_linux_amd64.zip",
    ):
        (tmp_path / name).write_bytes(b"x")
    (tmp_path / "proj_1.2.3_dir.zip").mkdir()

    assert [p.name for p in bundle.archives()] == [
        "other_1.2.3_linux_amd64.zip",
        "proj_1.2.3_darwin_arm64.zip",
        "proj_1.2.3_linux_amd64.zip",
    ]


def test_copy_manifest(tmp_path):
    template = tmp_path / "terraform-registry-manifest.json"
    template.write_text('{"version": 1}')
    bundle = ArtifactBundle(tmp_path / "dist", "proj_1.2.3")

    path = bundle.copy_manifest(template)

    assert path.read_text() == '{"version": 1}'


def test_copy_manifest_missing_template(tmp_path):
    with pytest.raises(BuildError, match="template"):
        ArtifactBundle(tmp_path, "p_1").copy_manifest(tmp_path / "nope.json")


def test_write_checksums_requires_archives(tmp_path):
    bundle = ArtifactBundle(tmp_path, "proj_1.2.3")
    bundle.manifest_path.write_text("{}")

    with pytest.raises(BuildError, match=r"no \*\.zip archives"):
        bundle.write_checksums(ChecksumClient())
    assert not bundle.checksum_path.exists()


def test_write_checksums_requires_manifest(tmp_path):
    bundle = ArtifactBundle(tmp_path, "proj_1.2.3")
    (tmp_path / "proj_1.2.3_linux_amd64.zip").write_bytes(b"x")

    with pytest.raises(BuildError, match="manifest missing"):
        bundle.write_checksums(ChecksumClient())


def test_upload_paths_order(tmp_path):
    bundle = ArtifactBundle(tmp_path, "p_1")
    (tmp_path / "p_1_linux_amd64.zip").write_bytes(b"x")
    assert [p.name for p in bundle.upload_paths()] == [
        "p_1_manifest.json",
        "p_1_SHA256SUMS",
        "p_1_SHA256SUMS.sig",
        "p_1_linux_amd64.zip",
    ]


def test_write_checksums_includes_archives_named_by_goreleaser_project(tmp_path):
    # project_name in .goreleaser.yml can differ from the configured project.
    bundle = ArtifactBundle(tmp_path, "terraform-provider-sink_1.2.3")
    bundle.manifest_path.write_text("{}")
    (tmp_path / "sink_1.2.3_linux_amd64.zip").write_bytes(b"binary")

    entries = bundle.write_checksums(ChecksumClient())

    assert [name for name, _ in entries] == [
        "terraform-provider-sink_1.2.3_manifest.json",
        "sink_1.2.3_linux_amd64.zip",
    ]
    assert len(bundle.checksum_path.read_text().splitlines()) == 2
    assert bundle.upload_paths()[-1].name == "sink_1.2.3_linux_amd64.zip"


def test_copy_manifest_filesystem_error_is_build_error(tmp_path):
    template = tmp_path / "terraform-registry-manifest.json"
    template.write_text("{}")
    blocked = tmp_path / "dist"
    blocked.write_text("not a directory")

    with pytest.raises(BuildError, match="could not place manifest"):
        ArtifactBundle(blocked, "p_1").copy_manifest(template)


def test_write_checksums_filesystem_error_is_build_error(tmp_path):
    bundle = ArtifactBundle(tmp_path, "p_1")
    bundle.manifest_path.write_text("{}")
    (tmp_path / "p_1_linux_amd64.zip").write_bytes(b"x")
    bundle.checksum_path.mkdir()

    with pytest.raises(BuildError, match="could not write p_1_SHA256SUMS"):
        bundle.write_checksums(ChecksumClient())
