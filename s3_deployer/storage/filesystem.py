"""Filesystem storage backend implementation

Mirrors a bucket as a local directory tree, useful for previewing a
deployment or serving it from a plain web server. Object metadata
(content type, encoding, cache control) is kept in JSON sidecar files
under a hidden directory so reads see exactly what was written.
"""

import asyncio
import json
from pathlib import Path
from typing import Dict, Optional, Any

import aiofiles

from .base import ListResult, StorageBackend, StoredObject, split_listing
from ..api.exceptions import ObjectNotFoundError, StorageError
from ..constants import FILESYSTEM_META_DIR, PUBLIC_READ_ACL


class FileSystemStorage(StorageBackend):
    """Local filesystem storage implementation"""

    def __init__(self, config: Dict[str, Any] = None):
        """
        Initialize filesystem storage

        Args:
            config: Configuration including:
                - base_path: Root directory holding buckets
                - bucket: Bucket name, a directory under base_path
        """
        super().__init__(config)

        base_path = self.config.get('base_path')
        if not base_path:
            raise StorageError("Filesystem storage requires 'base_path'")

        self.root = Path(base_path) / self.config.get('bucket', '')
        self.meta_root = self.root / FILESYSTEM_META_DIR

    async def _do_initialize(self) -> None:
        """Ensure the bucket directory exists"""
        self.root.mkdir(parents=True, exist_ok=True)

    def _get_full_path(self, key: str) -> Path:
        parts = key.split('/')
        if any(part in ('..', '.') for part in parts) or parts[0] == FILESYSTEM_META_DIR:
            raise StorageError(f"Invalid key: {key}")
        return self.root.joinpath(*[p for p in parts if p])

    def _get_meta_path(self, key: str) -> Path:
        relative = self._get_full_path(key).relative_to(self.root)
        return self.meta_root / f"{relative}.json"

    async def get_object(self, key: str) -> StoredObject:
        """Read object from the bucket directory"""
        await self.initialize()

        full_path = self._get_full_path(key)
        if not full_path.is_file():
            raise ObjectNotFoundError(key)

        async with aiofiles.open(full_path, 'rb') as f:
            body = await f.read()

        meta = {}
        meta_path = self._get_meta_path(key)
        if meta_path.is_file():
            async with aiofiles.open(meta_path, 'r') as f:
                meta = json.loads(await f.read())

        return StoredObject(
            key=key,
            body=body,
            content_type=meta.get('content_type'),
            content_encoding=meta.get('content_encoding'),
            cache_control=meta.get('cache_control'),
            acl=meta.get('acl', PUBLIC_READ_ACL),
        )

    async def put_object(self, obj: StoredObject) -> None:
        """Write object and its metadata sidecar"""
        await self.initialize()

        full_path = self._get_full_path(obj.key)
        meta_path = self._get_meta_path(obj.key)
        full_path.parent.mkdir(parents=True, exist_ok=True)
        meta_path.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(full_path, 'wb') as f:
            await f.write(obj.body)

        meta = {
            'content_type': obj.content_type,
            'content_encoding': obj.content_encoding,
            'cache_control': obj.cache_control,
            'acl': obj.acl,
        }
        async with aiofiles.open(meta_path, 'w') as f:
            await f.write(json.dumps(meta))

    async def list_objects(self, prefix: str = "",
                           delimiter: Optional[str] = None) -> ListResult:
        """List objects under the bucket directory"""
        await self.initialize()

        def _walk():
            keys = []
            for path in self.root.rglob('*'):
                if not path.is_file():
                    continue
                relative = path.relative_to(self.root)
                if relative.parts[0] == FILESYSTEM_META_DIR:
                    continue
                keys.append(relative.as_posix())
            return keys

        keys = await asyncio.get_running_loop().run_in_executor(None, _walk)
        return split_listing(keys, prefix, delimiter)
