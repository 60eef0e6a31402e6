"""npminstall CLI"""

import click

from npminstall import __version__
from npminstall.cli.build import build, resolve

from .debug import debug_option


@click.group()
@click.version_option(__version__, prog_name="npminstall")
@debug_option
@click.pass_context
def cli(ctx):
    """
    Install node_modules for a project and cache them in a layer directory.
    """
    ctx.ensure_object(dict)


cli.add_command(debug_option(build))
cli.add_command(debug_option(resolve))

if __name__ == "__main__":
    cli(obj={})
