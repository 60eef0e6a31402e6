import click

from .utils.logging import configure_logging


def _set_debug(ctx, param, value: bool):
    """Configure logging once per invocation; a --debug anywhere wins."""
    root_ctx = ctx.find_root()
    root_ctx.ensure_object(dict)
    debug = bool(value) or root_ctx.obj.get("DEBUG", False)
    root_ctx.obj["DEBUG"] = debug
    configure_logging(debug)
    return debug


def debug_option(cmd):
    """Decorator adding --debug/--no-debug to a command or group"""
    return click.option(
        "--debug/--no-debug",
        is_eager=True,
        expose_value=False,
        callback=_set_debug,
        help="Enable debug mode",
    )(cmd)
