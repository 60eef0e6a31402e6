"""Manifest fingerprinting used to decide whether an installed layer can be reused"""

import hashlib
import secrets
from pathlib import Path
from typing import Protocol

from npminstall.exceptions import ManifestReadError

CHUNK_SIZE = 64 * 1024


class Summer(Protocol):
    """Anything able to fingerprint a manifest file."""

    def sum(self, path: Path) -> str: ...

    def sum_many(self, *paths: Path) -> str: ...


class SHA256Summer:
    """
    Computes SHA-256 hex digests over the full bytes of manifest files.

    The digest is only ever compared for equality with a previously stored one.
    """

    def sum(self, path: Path) -> str:
        """
        Fingerprint a single file.

        Raises:
            ManifestReadError: If the file is missing or unreadable
        """
        digest = hashlib.sha256()
        self._update(digest, Path(path))
        return digest.hexdigest()

    def sum_many(self, *paths: Path) -> str:
        """
        Fingerprint several files in order.

        Each file's name is mixed in ahead of its bytes, so the same bytes
        split differently across files give a different digest.
        """
        digest = hashlib.sha256()
        for path in paths:
            path = Path(path)
            digest.update(path.name.encode("utf-8") + b"\0")
            self._update(digest, path)
        return digest.hexdigest()

    def _update(self, digest, path: Path) -> None:
        try:
            with open(path, "rb") as f:
                for chunk in iter(lambda: f.read(CHUNK_SIZE), b""):
                    digest.update(chunk)
        except OSError as e:
            raise ManifestReadError(path, e) from e


def random_fingerprint() -> str:
    """A fresh token the width of a SHA-256 hex digest, for installs that cannot be reproduced."""
    return secrets.token_hex(32)
