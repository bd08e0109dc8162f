# s3_deployer/cli/decorators/__init__.py
"""CLI decorators"""

from .deployer import with_deployer

__all__ = [
    'with_deployer',
]
