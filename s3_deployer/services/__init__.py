# s3_deployer/services/__init__.py
"""Business logic services for s3-deployer"""

from .config_service import ConfigService

__all__ = [
    "ConfigService",
]
