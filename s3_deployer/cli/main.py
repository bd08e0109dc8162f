# s3_deployer/cli/main.py
"""Main CLI entry point for s3-deployer"""

import sys
import logging
from pathlib import Path
from typing import Optional

import click
from rich.logging import RichHandler

from ..constants import APP_NAME, LOG_FORMAT
from ..__version__ import __version__
from ..api.deployer import S3Deployer
from ..models.config import DeployerConfig
from ..services.config_service import ConfigService
from .utils.output import console

# Import all commands
from .commands import deploy, revisions


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """Setup logging configuration

    Args:
        verbose: Enable verbose output (INFO level)
        debug: Enable debug output (DEBUG level)
    """
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    # Configure rich handler
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            RichHandler(
                console=console,
                show_time=debug,
                show_path=debug,
                rich_tracebacks=True,
                tracebacks_suppress=[click]
            )
        ]
    )

    # Adjust third-party loggers
    for name in ("botocore", "boto3", "urllib3", "asyncio"):
        logging.getLogger(name).setLevel(logging.WARNING)


class Context:
    """CLI context object with lazy configuration loading

    The configuration file is only read when a command asks for the
    deployer, so ``--help`` works outside a configured project.
    """

    def __init__(self):
        """Initialize CLI context"""
        self.config_path: Optional[Path] = None
        self.dist_dir: Optional[str] = None
        self.verbose: bool = False
        self.debug: bool = False
        self._config: Optional[DeployerConfig] = None

    @property
    def config(self) -> DeployerConfig:
        """Get deployer configuration (lazy loading)"""
        if self._config is None:
            service = ConfigService(config_path=self.config_path)
            self._config = service.load_config(overrides={"dist_dir": self.dist_dir})
            if self.debug:
                console.print(f"[dim]Configuration: {service.config_path}[/dim]")
                console.print(f"[dim]Target: {self._config.get_display_info()}[/dim]")
        return self._config

    def create_deployer(self) -> S3Deployer:
        """Build a deployer from the loaded configuration"""
        return S3Deployer(self.config)


@click.group(name=APP_NAME)
@click.version_option(__version__, prog_name=APP_NAME)
@click.option('-v', '--verbose', is_flag=True, help='Enable verbose output')
@click.option('-d', '--debug', is_flag=True, help='Enable debug output')
@click.option('-q', '--quiet', is_flag=True, help='Suppress all output except errors')
@click.option('-c', '--config', 'config_path', type=click.Path(dir_okay=False, path_type=Path),
              help='Configuration file (default: ./.s3-deployer.yaml)')
@click.option('--dist-dir', help='Directory of built assets, overrides the configuration')
@click.pass_context
def cli(ctx, verbose, debug, quiet, config_path, dist_dir):
    """S3 Deployer - Publish static builds under timestamped revisions

    Built assets are staged under <app_path>/revisions/<revision>/ and
    copied to the live prefix when switched to. Every staged revision
    remembers the commit it was built from, so it can be rolled back to
    by revision or by commit id.
    """
    # Setup logging
    if quiet:
        logging.disable(logging.CRITICAL)
    else:
        setup_logging(verbose=verbose, debug=debug)

    ctx.obj = Context()
    ctx.obj.config_path = config_path
    ctx.obj.dist_dir = dist_dir
    ctx.obj.verbose = verbose
    ctx.obj.debug = debug


# Register commands
cli.add_command(deploy.deploy)
cli.add_command(deploy.stage)
cli.add_command(deploy.switch)
cli.add_command(deploy.rollback)
cli.add_command(revisions.current)
cli.add_command(revisions.list_revisions)
cli.add_command(revisions.changes)


def main():
    """Main entry point for the CLI application

    This function handles:
    - Keyboard interrupts
    - Unexpected exceptions with proper error display
    """
    try:
        cli(prog_name=APP_NAME)

    except KeyboardInterrupt:
        console.print("\n[yellow]Operation cancelled by user[/yellow]")
        sys.exit(130)

    except Exception as e:
        console.print(f"[red]Unexpected error: {e}[/red]")
        if '--debug' in sys.argv or '-d' in sys.argv:
            console.print_exception()
        sys.exit(1)


if __name__ == "__main__":
    main()
