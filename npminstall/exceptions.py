"""
Exception classes for the installation engine.
"""

from pathlib import Path
from typing import Optional


class InstallError(Exception):
    """Base exception for all installation errors."""

    pass


class ManifestReadError(InstallError):
    """Raised when a manifest file cannot be read for fingerprinting."""

    def __init__(self, path: Path, cause: Optional[BaseException] = None):
        self.path = Path(path)
        self.cause = cause
        if cause is not None:
            super().__init__(f"Failed to read manifest {self.path}: {cause}")
        else:
            super().__init__(f"Failed to read manifest {self.path}")


class PlacementError(InstallError):
    """Raised when node_modules cannot be created, moved or linked into the layer."""

    def __init__(self, path: Path, message: str):
        self.path = Path(path)
        super().__init__(f"Layer placement failed for {self.path}: {message}")


class InstallFailedError(InstallError):
    """Raised when the package manager exits unsuccessfully.

    The captured output is kept on the exception and appended to its text.
    """

    def __init__(self, command: str, cause: BaseException, output: str = ""):
        self.command = command
        self.cause = cause
        self.output = output
        self.reason = f"{command} failed: {cause}"
        if output:
            super().__init__(f"{self.reason}\n{output.rstrip()}")
        else:
            super().__init__(self.reason)


class ExecutionError(Exception):
    """Raised by an executable when the command does not exit cleanly."""

    def __init__(self, exit_code: Optional[int], message: str = ""):
        self.exit_code = exit_code
        if message:
            super().__init__(message)
        else:
            super().__init__(f"exit status {exit_code}")
