"""
Build orchestration: select a process, consult the cache, install.

The caller owns the layer directory and the persistence of its metadata; this
module only reads the previous metadata mapping and proposes the next one.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from npminstall.config import InstallSettings
from npminstall.constants import BUILT_AT_KEY, CACHE_SHA_KEY, NODE_MODULES, ProcessKind
from npminstall.fingerprint import SHA256Summer, Summer
from npminstall.process.build_process import BuildProcess
from npminstall.process.executor import Executable, SubprocessExecutable
from npminstall.process.resolver import ProcessResolver, Selection


@dataclass(frozen=True)
class BuildContext:
    """Paths and previous layer metadata handed over by the lifecycle caller."""

    working_dir: Path
    layer_dir: Path
    cache_dir: Path
    metadata: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class BuildResult:
    """Outcome of a build.

    ``metadata`` is what the caller should persist for the layer.
    """

    kind: ProcessKind
    ran: bool
    fingerprint: str
    metadata: Dict[str, Any]
    selection: Selection

    @property
    def reused(self) -> bool:
        return not self.ran


def path_entry(layer_dir: Path) -> Path:
    """Directory of installed executables, for the caller to append to PATH."""
    return Path(layer_dir) / NODE_MODULES / ".bin"


class Build:
    """Runs one build for one project, sequentially."""

    def __init__(
        self,
        executable: Optional[Executable] = None,
        summer: Optional[Summer] = None,
        settings: Optional[InstallSettings] = None,
        logger: Optional[logging.Logger] = None,
        resolver: Optional[ProcessResolver] = None,
    ):
        self.settings = settings or InstallSettings()
        self.logger = logger or logging.getLogger("npminstall")
        self.executable = executable or SubprocessExecutable(
            self.settings.executable, self.logger
        )
        self.summer = summer or SHA256Summer()
        self.resolver = resolver or ProcessResolver(self.logger)

    def process_for(self, kind: ProcessKind) -> BuildProcess:
        return BuildProcess(
            kind,
            self.executable,
            summer=self.summer,
            settings=self.settings,
            logger=self.logger,
        )

    def execute(self, context: BuildContext) -> BuildResult:
        """
        Run the build.

        Raises:
            InstallError: From fingerprinting, placement or npm. Nothing is retried.
        """
        selection = self.resolver.resolve(context.working_dir, context.cache_dir)
        process = self.process_for(selection.kind)

        run, fingerprint = process.should_run(context.working_dir, context.metadata)
        if not run:
            self.logger.info(
                f"Reusing cached layer {Path(context.layer_dir) / NODE_MODULES}"
            )
            return BuildResult(
                kind=selection.kind,
                ran=False,
                fingerprint=fingerprint,
                metadata=dict(context.metadata),
                selection=selection,
            )

        self.logger.info("Executing build process")
        process.run(context.layer_dir, context.cache_dir, context.working_dir)

        metadata = {
            CACHE_SHA_KEY: fingerprint,
            BUILT_AT_KEY: datetime.now(timezone.utc).isoformat(),
        }
        return BuildResult(
            kind=selection.kind,
            ran=True,
            fingerprint=fingerprint,
            metadata=metadata,
            selection=selection,
        )
