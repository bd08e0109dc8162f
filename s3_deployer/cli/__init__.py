"""Command line interface for s3-deployer"""

from .main import cli, main

__all__ = ["cli", "main"]
