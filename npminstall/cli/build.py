"""cli commands running the installation engine against a project directory"""

import json
import sys
from pathlib import Path

import click

from npminstall.build import Build, BuildContext, path_entry
from npminstall.cli.utils.logging import logger
from npminstall.config import ConfigAccessor, InstallSettings
from npminstall.exceptions import InstallError
from npminstall.process.resolver import ProcessResolver

_working_dir_option = click.option(
    "-w",
    "--working-dir",
    type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path),
    default=".",
    show_default=True,
    help="Project root containing package.json.",
)
_cache_dir_option = click.option(
    "--cache-dir",
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    default=None,
    help="npm package cache directory. Defaults to <working-dir>/npm-cache.",
)


def _load_metadata(path: Path) -> dict:
    if not path.exists():
        return {}
    try:
        with open(path, "r") as fh:
            data = json.load(fh)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to read layer metadata {path}: {e}")
        sys.exit(1)
    if not isinstance(data, dict):
        logger.error(f"Layer metadata {path} must be a JSON object")
        sys.exit(1)
    return data


@click.command("build")
@_working_dir_option
@click.option(
    "-l",
    "--layer-dir",
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    required=True,
    help="Durable directory that will hold node_modules.",
)
@_cache_dir_option
@click.option(
    "-m",
    "--metadata",
    "metadata_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="JSON file with the layer metadata. Defaults to <layer-dir>.json.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file with an [npm] section.",
)
def build(working_dir, layer_dir, cache_dir, metadata_path, config_path):
    """Install node_modules into LAYER_DIR, reusing it when nothing changed.

    Example:

      npminstall build -w ./app -l /layers/modules
    """
    if cache_dir is None:
        cache_dir = working_dir / "npm-cache"
    if metadata_path is None:
        metadata_path = layer_dir.with_name(f"{layer_dir.name}.json")

    settings = InstallSettings.from_config(ConfigAccessor(config_path))
    context = BuildContext(
        working_dir=working_dir,
        layer_dir=layer_dir,
        cache_dir=cache_dir,
        metadata=_load_metadata(metadata_path),
    )

    try:
        result = Build(settings=settings, logger=logger).execute(context)
    except (InstallError, OSError) as e:
        logger.error(f"Build failed: {e}")
        sys.exit(1)

    if result.ran:
        metadata_path.parent.mkdir(parents=True, exist_ok=True)
        with open(metadata_path, "w") as fh:
            json.dump(result.metadata, fh, indent=2)

    logger.info("")
    logger.info("Configuring environment")
    for key, value in sorted(settings.fixed_env().items()):
        logger.info(f'  {key:<21} -> "{value}"')
    logger.info(f'  {"PATH":<21} -> "$PATH:{path_entry(layer_dir)}"')


@click.command("resolve")
@_working_dir_option
@_cache_dir_option
def resolve(working_dir, cache_dir):
    """Show which installation process would be selected, without running it."""
    if cache_dir is None:
        cache_dir = working_dir / "npm-cache"
    selection = ProcessResolver(logger).resolve(working_dir, cache_dir)
    click.echo(selection.kind.value)
