# s3_deployer/cli/commands/__init__.py
"""CLI commands"""

from . import deploy
from . import revisions

__all__ = [
    "deploy",
    "revisions",
]
