"""Shared constants for the release publisher."""

from __future__ import annotations

import re

EXIT_OK = 0
EXIT_FAILURE = 1

LOG_PREFIX = "publish-release"

# Placeholder asset attached by the upstream automation; removing it marks the
# release as fully published.
SENTINEL_ASSET = "publish-pending"

TAG_PATTERN = re.compile(r"^v(?P<version>\d+\.\d+\.\d+(?:-[0-9A-Za-z.-]+)?)$")
TAG_GLOB = "v*"

DEFAULT_DIST_DIR = "dist"
DEFAULT_MANIFEST_TEMPLATE = "terraform-registry-manifest.json"
GORELEASER_CONFIG = ".goreleaser.yml"

# Only the newest entry of the listing is compared when deciding "latest".
LATEST_LISTING_LIMIT = 1
# Upper bound on releases scanned during garbage collection.
GC_LISTING_LIMIT = 100

BUILD_OSES = ("darwin", "freebsd", "linux", "windows")
BUILD_ARCHES = ("386", "amd64", "arm", "arm64")
BUILD_IGNORED = (("darwin", "386"),)

RELEASE_VIEW_FIELDS = "tagName,isPrerelease,assets,createdAt"
RELEASE_LIST_FIELDS = "tagName,isPrerelease,createdAt"
