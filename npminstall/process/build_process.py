"""
The npm installation processes.

There is a fixed set of processes (see ProcessKind), all sharing one contract:

    should_run(working_dir, metadata) -> (run, fingerprint)
    run(layer_dir, cache_dir, working_dir)

BuildProcess dispatches on its kind instead of subclassing, so the complete
behaviour of every process is visible in this module.
"""

import io
import logging
import time
from pathlib import Path
from typing import Any, Mapping, Optional, Tuple

from npminstall.config import InstallSettings
from npminstall.constants import (
    CACHE_SHA_KEY,
    NODE_MODULES,
    PACKAGE_JSON,
    PACKAGE_LOCK,
    ProcessKind,
)
from npminstall.exceptions import ExecutionError, InstallFailedError, PlacementError
from npminstall.fingerprint import SHA256Summer, Summer, random_fingerprint
from npminstall.layer.placement import LayerPlacement
from npminstall.process.executor import Executable, Execution


def stored_fingerprint(metadata: Optional[Mapping[str, Any]]) -> Optional[str]:
    """The fingerprint recorded by the last successful build, if any."""
    if not metadata:
        return None
    value = metadata.get(CACHE_SHA_KEY)
    return value if isinstance(value, str) else None


class BuildProcess:
    """One installation process of the given kind."""

    def __init__(
        self,
        kind: ProcessKind,
        executable: Executable,
        summer: Optional[Summer] = None,
        settings: Optional[InstallSettings] = None,
        logger: Optional[logging.Logger] = None,
        placement: Optional[LayerPlacement] = None,
    ):
        self.kind = ProcessKind(kind)
        self.executable = executable
        self.summer = summer or SHA256Summer()
        self.settings = settings or InstallSettings()
        self.logger = logger or logging.getLogger("npminstall")
        self.placement = placement or LayerPlacement(self.logger)

    def __repr__(self):
        return f"BuildProcess({self.kind.value})"

    @property
    def name(self) -> str:
        return self.kind.label

    def args(self, cache_dir: Path) -> list[str]:
        """npm arguments for this process; empty for processes that run nothing."""
        if self.kind is ProcessKind.REUSE:
            return []
        args = [self.kind.value]
        if self.settings.unsafe_perm:
            args.append("--unsafe-perm")
        args.extend(["--cache", str(cache_dir)])
        return args

    def should_run(
        self, working_dir: Path, metadata: Optional[Mapping[str, Any]]
    ) -> Tuple[bool, str]:
        """
        Decide whether the layer needs rebuilding.

        Returns:
            Tuple of (run, fingerprint). The fingerprint is what the caller
            should record after a successful run.

        Raises:
            ManifestReadError: If the manifest this process depends on is unreadable
        """
        working_dir = Path(working_dir)
        previous = stored_fingerprint(metadata)

        if self.kind is ProcessKind.REUSE:
            if previous is not None:
                return False, previous
            manifests = [working_dir / PACKAGE_JSON]
            if (working_dir / PACKAGE_LOCK).is_file():
                manifests.append(working_dir / PACKAGE_LOCK)
            return True, self.summer.sum_many(*manifests)

        lockfile = working_dir / PACKAGE_LOCK
        if self.kind is ProcessKind.INSTALL and not lockfile.exists():
            # Nothing pins the versions, so no earlier install can match
            return True, random_fingerprint()

        current = self.summer.sum(lockfile)
        return current != previous, current

    def run(self, layer_dir: Path, cache_dir: Path, working_dir: Path) -> None:
        """
        Install node_modules into layer_dir.

        Raises:
            PlacementError: If node_modules cannot be placed into the layer
            InstallFailedError: If npm exits unsuccessfully
        """
        working_dir = Path(working_dir)

        if self.kind is ProcessKind.REUSE:
            modules = working_dir / NODE_MODULES
            if not modules.is_dir():
                raise PlacementError(modules, "vendored node_modules is not a directory")
            self.logger.info(f"Reusing vendored {NODE_MODULES}, skipping npm")
            self.placement.place(working_dir, layer_dir)
            return

        self.placement.place(working_dir, layer_dir)

        args = self.args(cache_dir)
        buffer = io.StringIO()
        command = f"{self.settings.executable} {' '.join(args)}"

        self.logger.info(f"Running '{command}'")
        start = time.monotonic()
        try:
            self.executable.execute(
                Execution(
                    args=args,
                    dir=working_dir,
                    env=self.settings.process_env(),
                    stdout=buffer,
                    stderr=buffer,
                )
            )
        except ExecutionError as e:
            output = buffer.getvalue()
            self.logger.error(output)
            raise InstallFailedError(
                f"{self.settings.executable} {self.kind.value}", e, output
            ) from e

        self.logger.info(f"  Completed in {_format_duration(time.monotonic() - start)}")


def _format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.3f}s"
    minutes, rest = divmod(seconds, 60)
    return f"{int(minutes)}m{rest:.3f}s"
