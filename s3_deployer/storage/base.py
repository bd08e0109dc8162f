# s3_deployer/storage/base.py
"""Storage backend abstract base class"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Any

from ..constants import PUBLIC_READ_ACL


@dataclass
class StoredObject:
    """Object body together with the metadata it was written with"""

    key: str
    body: bytes
    content_type: Optional[str] = None
    content_encoding: Optional[str] = None
    cache_control: Optional[str] = None
    acl: str = PUBLIC_READ_ACL


@dataclass
class ListResult:
    """Result of a listing: keys directly matched and rolled-up prefixes"""

    keys: List[str] = field(default_factory=list)
    prefixes: List[str] = field(default_factory=list)


def split_listing(keys: Iterable[str],
                  prefix: str,
                  delimiter: Optional[str] = None) -> ListResult:
    """
    Apply S3 prefix/delimiter semantics to a flat set of keys

    Args:
        keys: All keys in the bucket
        prefix: Only keys starting with this prefix are listed
        delimiter: Roll keys up to the first delimiter after the prefix

    Returns:
        ListResult with sorted keys and common prefixes
    """
    result_keys = set()
    prefixes = set()

    for key in keys:
        if not key.startswith(prefix):
            continue
        rest = key[len(prefix):]
        if delimiter and delimiter in rest:
            prefixes.add(prefix + rest.split(delimiter, 1)[0] + delimiter)
        else:
            result_keys.add(key)

    return ListResult(keys=sorted(result_keys), prefixes=sorted(prefixes))


class StorageBackend(ABC):
    """Abstract base class for all storage backends

    Backends only move bytes. Retry, compression and content-type policy
    live in :class:`s3_deployer.core.object_store.ObjectStore`.
    """

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize storage backend

        Args:
            config: Backend-specific configuration
        """
        self.config = config or {}
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize storage backend (e.g., establish connections)"""
        if not self._initialized:
            await self._do_initialize()
            self._initialized = True

    @abstractmethod
    async def _do_initialize(self) -> None:
        """Actual initialization logic to be implemented by subclasses"""
        pass

    @abstractmethod
    async def get_object(self, key: str) -> StoredObject:
        """
        Read an object

        Args:
            key: Object key

        Returns:
            Stored object as written

        Raises:
            ObjectNotFoundError: If the key does not exist
        """
        pass

    @abstractmethod
    async def put_object(self, obj: StoredObject) -> None:
        """
        Write an object, replacing any existing one

        Args:
            obj: Object body and metadata
        """
        pass

    @abstractmethod
    async def list_objects(self, prefix: str = "",
                           delimiter: Optional[str] = None) -> ListResult:
        """
        List objects

        Args:
            prefix: Key prefix to filter results
            delimiter: Group keys sharing the part up to this delimiter

        Returns:
            Keys and common prefixes
        """
        pass

    @property
    def name(self) -> str:
        """Human readable backend name used in log lines"""
        return self.config.get("name", self.__class__.__name__)

    async def close(self) -> None:
        """Close storage backend connections"""
        if self._initialized:
            await self._do_close()
            self._initialized = False

    async def _do_close(self) -> None:
        """Actual cleanup logic to be implemented by subclasses"""
        pass

    async def __aenter__(self):
        """Async context manager entry"""
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit"""
        await self.close()
