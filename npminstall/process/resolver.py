"""
Selection of the npm installation process.

The choice depends only on three facts about the project, read fresh from
disk on every build:

    node_modules       vendored tree in the working directory
    npm-cache          non-empty package cache directory
    package-lock.json  lockfile in the working directory

Rules, first match wins:

    1. lockfile, no node_modules, no cache  -> npm ci
    2. node_modules                         -> reuse vendored tree
    3. no lockfile                          -> npm install (not reproducible)
    4. anything else                        -> npm install
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from npminstall.constants import NODE_MODULES, NPM_CACHE, PACKAGE_LOCK, ProcessKind


@dataclass(frozen=True)
class BuildSignals:
    """Presence of the inputs that decide the installation process."""

    node_modules: bool
    npm_cache: bool
    package_lock: bool

    @classmethod
    def inspect(cls, working_dir: Path, cache_dir: Path) -> "BuildSignals":
        """
        Read the signals from disk.

        A node_modules symlink is not a vendored tree: it is what an earlier
        layer placement leaves behind.
        """
        working_dir = Path(working_dir)
        cache_dir = Path(cache_dir)
        modules_path = working_dir / NODE_MODULES

        node_modules = modules_path.is_dir() and not modules_path.is_symlink()
        npm_cache = cache_dir.is_dir() and any(cache_dir.iterdir())
        package_lock = (working_dir / PACKAGE_LOCK).is_file()

        return cls(node_modules=node_modules, npm_cache=npm_cache, package_lock=package_lock)


@dataclass(frozen=True)
class Selection:
    """The selected process together with the human-readable decision trace."""

    kind: ProcessKind
    reproducible: bool
    signals: BuildSignals
    trace: List[str] = field(default_factory=list)


def _found(present: bool) -> str:
    return '"Found"' if present else '"Not found"'


def select_process(signals: BuildSignals) -> Selection:
    """Pick exactly one process for the given signals."""
    if signals.package_lock and not signals.node_modules and not signals.npm_cache:
        kind, reproducible = ProcessKind.CI, True
    elif signals.node_modules:
        kind, reproducible = ProcessKind.REUSE, True
    elif not signals.package_lock:
        kind, reproducible = ProcessKind.INSTALL, False
    else:
        kind, reproducible = ProcessKind.INSTALL, True

    inputs = [
        (NODE_MODULES, signals.node_modules),
        (NPM_CACHE, signals.npm_cache),
        (PACKAGE_LOCK, signals.package_lock),
    ]
    width = max(len(name) for name, _ in inputs)

    trace = ["Process inputs:"]
    trace.extend(f"  {name:<{width}} -> {_found(present)}" for name, present in inputs)
    trace.append("")
    trace.append(f"Selected NPM build process: '{kind.label}'")
    if not reproducible:
        trace.append(
            f"  No {PACKAGE_LOCK} found: versions are resolved freely, "
            "this install is not reproducible"
        )

    return Selection(kind=kind, reproducible=reproducible, signals=signals, trace=trace)


class ProcessResolver:
    """Inspects a project and reports which installation process to run."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("npminstall")

    def resolve(self, working_dir: Path, cache_dir: Path) -> Selection:
        signals = BuildSignals.inspect(working_dir, cache_dir)
        selection = select_process(signals)

        self.logger.info("Resolving installation process")
        for line in selection.trace:
            self.logger.info(f"  {line}" if line else "")
        if not selection.reproducible:
            self.logger.warning(
                f"Installing without {PACKAGE_LOCK}; the layer will not be reused"
            )

        return selection
