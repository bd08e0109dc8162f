# s3_deployer/core/object_store.py
"""Object store adapter: uniform retry, compression and content-type policy"""

import gzip
import logging
import mimetypes
import re
import zlib
from typing import Awaitable, Callable, Iterable, List, Optional, Sequence, Set, TypeVar, Union

from ..api.exceptions import ObjectNotFoundError, RetryExhaustedError
from ..constants import (
    DEFAULT_CONTENT_TYPE,
    DEFAULT_RETRY_DELAYS,
    GZIP_ENCODING,
    PUBLIC_READ_ACL,
)
from ..models.config import DeployerConfig
from ..storage.base import StorageBackend, StoredObject
from ..utils.async_utils import retry_with_schedule
from .path_resolver import KeyResolver

T = TypeVar('T')

logger = logging.getLogger(__name__)


def guess_content_type(key: str) -> str:
    """Guess content type from the key's extension"""
    content_type, _ = mimetypes.guess_type(key)
    return content_type or DEFAULT_CONTENT_TYPE


class ObjectStore:
    """Get/put/list against one bucket through a storage backend

    Every backend call runs through the retry schedule. A missing key on
    ``get`` is an answer, not a fault: it returns None without retrying.
    """

    def __init__(self,
                 backend: StorageBackend,
                 compression: Union[bool, Sequence[str]] = False,
                 cache_control: Optional[str] = None,
                 retry_delays: Sequence[float] = DEFAULT_RETRY_DELAYS,
                 never_compress: Iterable[str] = ()):
        """
        Initialize object store

        Args:
            backend: Storage backend doing the actual transfers
            compression: True to compress every key, or regexes selecting keys to compress
            cache_control: Cache-Control applied to every put unless overridden
            retry_delays: Seconds to sleep before each retry
            never_compress: Keys that are never compressed
        """
        self.backend = backend
        self.cache_control = cache_control
        self.retry_delays = tuple(retry_delays)
        self.never_compress: Set[str] = set(never_compress)

        self.compress_all = compression is True
        self.compress_patterns: List[re.Pattern] = []
        if not isinstance(compression, bool):
            self.compress_patterns = [re.compile(p) for p in compression]

    @classmethod
    def from_config(cls, config: DeployerConfig, backend: StorageBackend) -> 'ObjectStore':
        """Create object store applying the configured policy"""
        keys = KeyResolver(config.app_path, config.current_path)
        return cls(
            backend,
            compression=config.gzip,
            cache_control=config.cache_control,
            retry_delays=config.retry_delays,
            never_compress=[keys.current_revision_key],
        )

    @property
    def attempts(self) -> int:
        """Total attempts per operation, first one included"""
        return len(self.retry_delays) + 1

    def should_compress(self, key: str) -> bool:
        """Check if key is gzip-compressed before upload"""
        if key in self.never_compress:
            return False
        if self.compress_all:
            return True
        return any(pattern.search(key) for pattern in self.compress_patterns)

    async def get(self, key: str) -> Optional[bytes]:
        """
        Read an object

        Args:
            key: Object key

        Returns:
            Object bytes, decompressed if stored gzip-encoded, or None if
            the key does not exist
        """
        logger.info(f"Retrieving value {key} from {self.backend.name}")
        try:
            obj = await self._with_retry(
                "get", key,
                lambda: self.backend.get_object(key),
                no_retry=(ObjectNotFoundError,)
            )
        except ObjectNotFoundError:
            logger.info(f"{key} not found on {self.backend.name}")
            return None

        return self._decode(obj)

    async def put(self,
                  key: str,
                  body: Union[bytes, str],
                  content_type: Optional[str] = None,
                  cache_control: Optional[str] = None) -> None:
        """
        Write a publicly readable object

        Args:
            key: Object key
            body: Object content
            content_type: Overrides the content type guessed from the key
            cache_control: Overrides the configured Cache-Control
        """
        if isinstance(body, str):
            body = body.encode('utf-8')

        content_encoding = None
        if self.should_compress(key):
            body = gzip.compress(body, mtime=0)
            content_encoding = GZIP_ENCODING

        obj = StoredObject(
            key=key,
            body=body,
            content_type=content_type or guess_content_type(key),
            content_encoding=content_encoding,
            cache_control=cache_control or self.cache_control,
            acl=PUBLIC_READ_ACL,
        )

        logger.info(f"Storing value {key} to {self.backend.name}")
        await self._with_retry("put", key, lambda: self.backend.put_object(obj))

    async def list(self, prefix: str, delimiter: str = "/") -> Set[str]:
        """
        List child prefixes directly below a prefix

        Args:
            prefix: Parent prefix
            delimiter: Hierarchy delimiter

        Returns:
            Set of child prefixes
        """
        logger.debug(f"Listing prefixes under {prefix}")
        result = await self._with_retry(
            "list", prefix,
            lambda: self.backend.list_objects(prefix, delimiter)
        )
        return set(result.prefixes)

    async def list_keys(self, prefix: str) -> List[str]:
        """List every key under a prefix, sorted"""
        logger.debug(f"Listing keys under {prefix}")
        result = await self._with_retry(
            "list", prefix,
            lambda: self.backend.list_objects(prefix, None)
        )
        return sorted(result.keys)

    def _decode(self, obj: StoredObject) -> bytes:
        if (obj.content_encoding or "").lower() != GZIP_ENCODING:
            return obj.body
        try:
            return gzip.decompress(obj.body)
        except (OSError, EOFError, zlib.error) as e:
            logger.warning(f"Could not decompress {obj.key} ({e}), using raw bytes")
            return obj.body

    async def _with_retry(self,
                          operation: str,
                          key: str,
                          func: Callable[[], Awaitable[T]],
                          no_retry: tuple = ()) -> T:
        try:
            return await retry_with_schedule(
                func,
                self.retry_delays,
                description=f"{operation} {key}",
                no_retry=no_retry
            )
        except no_retry:
            raise
        except Exception as e:
            logger.error(f"Giving up on {operation} {key} after {self.attempts} attempts")
            raise RetryExhaustedError(operation, key, self.attempts, e) from e
