"""S3 Deployer - publish static builds under timestamped revisions.

Stages a directory of built assets into an object storage bucket, switches
the live copy between staged revisions and keeps a ledger of the commit each
revision was built from.
"""

from .__version__ import __version__, __version_info__, __author__, __email__, __license__

# Exceptions
from .api.exceptions import (
    DeployerError,
    ConfigError,
    StorageError,
    ObjectNotFoundError,
    RetryExhaustedError,
    InvalidRevisionError,
    RevisionNotFoundError,
    HookError,
)

# Core API
from .api.deployer import S3Deployer, deploy

# Data models
from .models.config import DeployerConfig
from .models.result import RevisionInfo, StageResult, SwitchResult, DeployResult

# Collaborators
from .core.hooks import LifecycleHooks, ShellHook
from .core.source_control import SourceControl, GitSourceControl

__all__ = [
    # Version information
    "__version__",
    "__version_info__",
    "__author__",
    "__email__",
    "__license__",

    # Main classes
    "S3Deployer",
    "deploy",

    # Data models
    "DeployerConfig",
    "RevisionInfo",
    "StageResult",
    "SwitchResult",
    "DeployResult",

    # Collaborators
    "LifecycleHooks",
    "ShellHook",
    "SourceControl",
    "GitSourceControl",

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
