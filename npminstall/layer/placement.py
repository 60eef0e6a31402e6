"""
Placement of node_modules into a durable layer directory.

The working tree keeps a single logical path, working_dir/node_modules, which
after placement is a symlink into the layer:

    {layer_dir}/
        node_modules/          # actual tree, survives across builds
    {working_dir}/
        node_modules -> {layer_dir}/node_modules

Moving and linking are two separate filesystem operations. A crash between
them leaves neither a directory nor a link in the working tree; the next
build then finds no node_modules and installs afresh.
"""

import logging
import os
import shutil
import uuid
from pathlib import Path
from typing import Optional

from npminstall.constants import NODE_MODULES
from npminstall.exceptions import PlacementError


class LayerPlacement:
    """Moves a working-tree node_modules into a layer and links it back."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger("npminstall")

    def place(self, working_dir: Path, layer_dir: Path) -> Path:
        """
        Relocate working_dir/node_modules into layer_dir and symlink it back.

        Safe to call again on an already placed tree.

        Args:
            working_dir: Project root
            layer_dir: Durable layer directory

        Returns:
            Path of the node_modules directory inside the layer

        Raises:
            PlacementError: If creating, moving or linking fails
        """
        # The link must not depend on the caller's current directory
        working_dir = Path(os.path.abspath(working_dir))
        layer_dir = Path(os.path.abspath(layer_dir))
        source = working_dir / NODE_MODULES
        target = layer_dir / NODE_MODULES

        try:
            if source.is_symlink():
                if source.resolve() == target.resolve() and target.is_dir():
                    self.logger.debug(f"{source} already linked to {target}")
                    return target
                source.unlink()

            source.mkdir(exist_ok=True)
            layer_dir.mkdir(parents=True, exist_ok=True)
            self._move(source, target)
            source.symlink_to(target, target_is_directory=True)
        except OSError as e:
            raise PlacementError(source, str(e)) from e

        self.logger.debug(f"Linked {source} -> {target}")
        return target

    def _move(self, source: Path, target: Path) -> None:
        # Stage next to the target so the final step is a same-directory rename
        token = uuid.uuid4().hex[:8]
        staging = target.with_name(f".{target.name}.staging-{token}")
        shutil.move(str(source), str(staging))

        if not target.exists() and not target.is_symlink():
            os.rename(staging, target)
            return

        stale = target.with_name(f".{target.name}.stale-{token}")
        os.rename(target, stale)
        os.rename(staging, target)
        if stale.is_dir() and not stale.is_symlink():
            shutil.rmtree(stale)
        else:
            stale.unlink()
