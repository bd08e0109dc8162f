"""Deployer context decorator for CLI commands"""

from functools import wraps
from typing import Callable

import click

from ..utils.output import console
from ...api.exceptions import DeployerError, InvalidRevisionError
from ...constants import EMOJI_ERROR, EMOJI_WARNING


def with_deployer(func: Callable) -> Callable:
    """Decorator that builds the deployer and maps its errors to exit codes

    The wrapped command receives the deployer as its first argument.
    Invalid revision input is reported as a warning, every other deployer
    error as an error; both exit with status 1.

    Args:
        func: Command function to decorate

    Returns:
        Decorated function
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        ctx = click.get_current_context()

        try:
            deployer = ctx.obj.create_deployer()
        except DeployerError as e:
            console.print(f"[red]{EMOJI_ERROR} {e}[/red]")
            ctx.exit(1)

        try:
            return func(deployer, *args, **kwargs)
        except InvalidRevisionError as e:
            console.print(f"[yellow]{EMOJI_WARNING} {e}[/yellow]")
            ctx.exit(1)
        except DeployerError as e:
            console.print(f"[red]{EMOJI_ERROR} {e}[/red]")
            if ctx.obj.debug:
                console.print_exception()
            ctx.exit(1)
        finally:
            deployer.close()

    return wrapper
