"""Cross-compilation adapter backed by goreleaser."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from tools.release_publisher import reporting
from tools.release_publisher.constants import (
    BUILD_ARCHES,
    BUILD_IGNORED,
    BUILD_OSES,
    GORELEASER_CONFIG,
)
from tools.release_publisher.errors import BuildError, ToolError
from tools.release_publisher.runner import Runner, ToolRequest
from tools.release_publisher.tempfiles import secure_temp_file


def render_config() -> Dict[str, Any]:
    """Goreleaser v2 config for the fixed OS/arch matrix with zip archives."""

    return {
        "version": 2,
        "before": {"hooks": ["go mod tidy"]},
        "builds": [
            {
                "env": ["CGO_ENABLED=0"],
                "mod_timestamp": "{{ .CommitTimestamp }}",
                "flags": ["-trimpath"],
                "ldflags": ["-s -w -X main.version={{.Version}} -X main.commit={{.Commit}}"],
                "goos": list(BUILD_OSES),
                "goarch": list(BUILD_ARCHES),
                "ignore": [{"goos": goos, "goarch": goarch} for goos, goarch in BUILD_IGNORED],
                "binary": "{{ .ProjectName }}_v{{ .Version }}",
            }
        ],
        "archives": [
            {
                "formats": ["zip"],
                "name_template": "{{ .ProjectName }}_{{ .Version }}_{{ .Os }}_{{ .Arch }}",
            }
        ],
        "checksum": {"disable": True},
    }


class GoReleaserClient:
    def __init__(self, runner: Runner, cwd: Path, *, binary: str = "goreleaser") -> None:
        self.runner = runner
        self.cwd = cwd
        self.binary = binary

    @property
    def project_config(self) -> Path:
        return self.cwd / GORELEASER_CONFIG

    def write_default_config(self) -> Path:
        """Render the default config to a private temp file outside the checkout."""

        path = secure_temp_file(prefix="relpub-goreleaser-", suffix=".yml")
        path.write_text(yaml.safe_dump(render_config(), sort_keys=False), encoding="utf-8")
        return path

    def build(self, *, skip_validate: bool) -> None:
        """Build and archive without publishing; publishing is done via the host API."""

        skips: List[str] = ["publish"]
        if skip_validate:
            skips.append("validate")
        argv: tuple[str, ...] = (self.binary, "release", "--clean", f"--skip={','.join(skips)}")
        generated: Optional[Path] = None
        if not self.project_config.exists():
            generated = self.write_default_config()
            reporting.info(f"no {GORELEASER_CONFIG} in {self.cwd}; using the default build matrix")
            argv += ("--config", str(generated))
        try:
            self.runner.run(ToolRequest(argv, cwd=self.cwd, capture=False))
        except ToolError as exc:
            raise BuildError(f"goreleaser build failed: {exc}") from exc
        finally:
            if generated is not None:
                generated.unlink(missing_ok=True)
