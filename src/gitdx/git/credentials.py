"""Remote callbacks for pushes: credentials plus per-ref rejection capture."""

from __future__ import annotations

import subprocess
from typing import TYPE_CHECKING
from urllib.parse import urlparse

import pygit2

if TYPE_CHECKING:
    from pygit2.enums import CredentialType


class PushCallbacks(pygit2.RemoteCallbacks):
    """
    RemoteCallbacks used for every git-dx push.

    Credentials:
    - SSH via KeypairFromAgent (uses system SSH agent)
    - HTTPS via git-credential-manager or other configured helpers

    The remote reports per-ref status through ``push_update_reference``; a
    non-None status is a rejection and is recorded in ``rejections`` instead
    of being silently dropped.
    """

    def __init__(self) -> None:
        super().__init__()
        self.rejections: dict[str, str] = {}

    def credentials(  # type: ignore[override]
        self,
        url: str,
        username_from_url: str | None,
        allowed_types: CredentialType,
    ) -> pygit2.Username | pygit2.UserPass | pygit2.Keypair | None:
        if allowed_types & pygit2.enums.CredentialType.SSH_KEY:
            username = username_from_url or "git"
            return pygit2.KeypairFromAgent(username)

        if allowed_types & pygit2.enums.CredentialType.USERPASS_PLAINTEXT:
            creds = self._query_credential_helper(url)
            if creds:
                return pygit2.UserPass(creds["username"], creds["password"])

        return None

    def push_update_reference(self, refname: str, message: str | None) -> None:
        if message is not None:
            self.rejections[refname] = message

    def _query_credential_helper(self, url: str) -> dict[str, str] | None:
        """
        Query system git credential helper.

        Invokes: git credential fill
        See: https://git-scm.com/docs/git-credential
        """
        parsed = urlparse(url)
        host = parsed.hostname or parsed.netloc
        input_lines = [
            f"protocol={parsed.scheme}",
            f"host={host}",
        ]
        if parsed.port is not None:
            input_lines.append(f"port={parsed.port}")
        if parsed.path:
            input_lines.append(f"path={parsed.path.lstrip('/')}")
        input_lines.append("")
        input_data = "\n".join(input_lines)

        try:
            result = subprocess.run(
                ["git", "credential", "fill"],
                input=input_data,
                capture_output=True,
                text=True,
                timeout=30,
                check=False,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError, OSError):
            # No helper available; the push then fails with an authentication error
            return None
        if result.returncode != 0:
            return None

        creds: dict[str, str] = {}
        for line in result.stdout.strip().split("\n"):
            if "=" in line:
                key, value = line.split("=", 1)
                creds[key] = value

        if "username" in creds and "password" in creds:
            return creds
        return None


def get_default_callbacks() -> PushCallbacks:
    """Fresh callbacks for a single push."""
    return PushCallbacks()
