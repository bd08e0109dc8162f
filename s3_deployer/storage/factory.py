"""Storage backend factory"""

from typing import Dict, Type

from .base import StorageBackend
from .filesystem import FileSystemStorage
from .s3 import S3Storage
from ..api.exceptions import ConfigError
from ..constants import StorageType
from ..models.config import DeployerConfig


class StorageFactory:
    """Factory for creating storage backend instances"""

    # Registry of storage backends
    _backends: Dict[StorageType, Type[StorageBackend]] = {
        StorageType.S3: S3Storage,
        StorageType.FILESYSTEM: FileSystemStorage,
    }

    @classmethod
    def create_from_config(cls, config: DeployerConfig) -> StorageBackend:
        """Create storage backend from deployer configuration

        Args:
            config: Deployer configuration

        Returns:
            Storage backend instance

        Raises:
            ConfigError: If storage type is not supported
        """
        storage_type = config.storage

        if storage_type not in cls._backends:
            raise ConfigError(f"Unsupported storage type: {storage_type.value}")

        if storage_type == StorageType.S3:
            backend_config = {
                "bucket": config.bucket,
                "region": config.region,
                "endpoint_url": config.endpoint_url,
                "access_key_id": config.access_key_id,
                "secret_access_key": config.secret_access_key,
                "session_token": config.session_token,
                "max_workers": config.upload_workers,
                "name": f"s3://{config.bucket}",
            }
        elif storage_type == StorageType.FILESYSTEM:
            backend_config = {
                "bucket": config.bucket,
                "base_path": config.base_path,
                "name": f"file://{config.base_path}/{config.bucket}",
            }
        else:
            raise ConfigError(f"No configuration mapping for storage type: {storage_type.value}")

        backend_class = cls._backends[storage_type]
        return backend_class(backend_config)

