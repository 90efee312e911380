"""GPG signing adapter."""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

from tools.release_publisher.errors import SigningError, ToolError
from tools.release_publisher.runner import Runner, ToolRequest
from tools.release_publisher.tempfiles import secret_file


def parse_fingerprints(colons: str) -> List[str]:
    """Extract primary-key fingerprints from ``gpg --with-colons`` output.

    Only the ``fpr`` record that follows a ``pub``/``sec`` record is taken,
    so subkey fingerprints are skipped.
    """

    fingerprints: List[str] = []
    expect_primary = False
    for line in colons.splitlines():
        fields = line.split(":")
        record = fields[0]
        if record in {"pub", "sec"}:
            expect_primary = True
        elif record in {"sub", "ssb"}:
            expect_primary = False
        elif record == "fpr" and expect_primary:
            if len(fields) > 9 and fields[9]:
                fingerprints.append(fields[9])
            expect_primary = False
    return fingerprints


class GpgClient:
    def __init__(self, runner: Runner, *, gpg: str = "gpg", homedir: Optional[Path] = None) -> None:
        self.runner = runner
        self.gpg = gpg
        self.homedir = homedir

    def _base(self) -> tuple[str, ...]:
        argv: tuple[str, ...] = (self.gpg, "--batch")
        if self.homedir is not None:
            argv += ("--homedir", str(self.homedir))
        return argv

    def list_fingerprints(self) -> List[str]:
        try:
            result = self.runner.run(
                ToolRequest(self._base() + ("--list-keys", "--with-colons"))
            )
        except ToolError as exc:
            raise SigningError(f"could not list signing keys: {exc}") from exc
        return parse_fingerprints(result.stdout)

    def resolve_fingerprint(self, explicit: Optional[str] = None) -> str:
        """Use ``explicit`` if given, else the most recently listed public key."""

        if explicit:
            return explicit
        fingerprints = self.list_fingerprints()
        if not fingerprints:
            raise SigningError("no signing key available in the keyring")
        return fingerprints[-1]

    def import_key(self, armored: str, passphrase: Optional[str] = None) -> None:
        """Import a (possibly passphrase-protected) private key blob."""

        with secret_file(armored) as key_path:
            argv = self._base()
            input_text = None
            if passphrase:
                argv += ("--pinentry-mode", "loopback", "--passphrase-fd", "0")
                input_text = passphrase
            try:
                self.runner.run(
                    ToolRequest(argv + ("--import", str(key_path)), input_text=input_text)
                )
            except ToolError as exc:
                raise SigningError(f"could not import signing key: {exc}") from exc

    def detach_sign(
        self,
        target: Path,
        fingerprint: str,
        *,
        output: Optional[Path] = None,
        passphrase: Optional[str] = None,
    ) -> Path:
        """Write a binary detached signature for ``target`` and return its path."""

        signature = output or target.with_name(target.name + ".sig")
        argv = self._base() + ("--yes", "--local-user", fingerprint)
        input_text = None
        if passphrase:
            argv += ("--pinentry-mode", "loopback", "--passphrase-fd", "0")
            input_text = passphrase
        argv += ("--output", str(signature), "--detach-sign", str(target))
        try:
            self.runner.run(ToolRequest(argv, input_text=input_text))
        except ToolError as exc:
            raise SigningError(f"gpg could not sign {target.name}: {exc}") from exc
        if not signature.is_file():
            raise SigningError(f"gpg reported success but {signature.name} is missing")
        return signature
