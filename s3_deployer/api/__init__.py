# s3_deployer/api/__init__.py
"""API layer for s3-deployer"""

from .exceptions import (
    DeployerError,
    ConfigError,
    StorageError,
    ObjectNotFoundError,
    RetryExhaustedError,
    InvalidRevisionError,
    RevisionNotFoundError,
    HookError,
)
from .deployer import S3Deployer, deploy

__all__ = [
    # Main classes
    "S3Deployer",

    # Convenience functions
    "deploy",

    # Exceptions
    "DeployerError",
    "ConfigError",
    "StorageError",
    "ObjectNotFoundError",
    "RetryExhaustedError",
    "InvalidRevisionError",
    "RevisionNotFoundError",
    "HookError",
]
