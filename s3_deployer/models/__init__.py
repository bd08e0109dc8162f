"""Data models for s3-deployer"""

from .config import DeployerConfig
from .result import RevisionInfo, StageResult, SwitchResult, DeployResult

__all__ = [
    "DeployerConfig",
    "RevisionInfo",
    "StageResult",
    "SwitchResult",
    "DeployResult",
]
