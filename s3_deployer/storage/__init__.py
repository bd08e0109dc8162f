# s3_deployer/storage/__init__.py
"""Storage backends for s3-deployer"""

from .base import StorageBackend, StoredObject, ListResult, split_listing
from .filesystem import FileSystemStorage
from .s3 import S3Storage
from .factory import StorageFactory

__all__ = [
    'StorageBackend',
    'StoredObject',
    'ListResult',
    'split_listing',
    'FileSystemStorage',
    'S3Storage',
    'StorageFactory',
]
