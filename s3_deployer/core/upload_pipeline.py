# s3_deployer/core/upload_pipeline.py
"""Upload pipeline: bounded-parallel fan-out of object writes"""

import logging
from pathlib import Path
from typing import List

import aiofiles

from ..api.exceptions import DeployerError
from ..constants import DEFAULT_UPLOAD_WORKERS, ErrorCode
from ..utils.async_utils import bounded_gather
from ..utils.formatting import pluralize
from .object_store import ObjectStore
from .path_resolver import KeyResolver, join_key

logger = logging.getLogger(__name__)


def scan_source_files(source_dir: Path) -> List[Path]:
    """
    Enumerate regular files below a directory

    Args:
        source_dir: Directory to scan

    Returns:
        Sorted file paths
    """
    return sorted(p for p in source_dir.rglob('*') if p.is_file())


class UploadPipeline:
    """Uploads a revision's files and copies revisions to the live prefix"""

    def __init__(self, store: ObjectStore, keys: KeyResolver,
                 workers: int = DEFAULT_UPLOAD_WORKERS):
        """
        Initialize upload pipeline

        Args:
            store: Object store used for every transfer
            keys: Key layout
            workers: Maximum concurrent transfers
        """
        self.store = store
        self.keys = keys
        self.workers = workers

    async def stage_files(self, revision: str, source_dir: Path) -> int:
        """
        Upload every file under source_dir to the revision's prefix

        A failed upload aborts the stage; objects already written stay in
        storage but the revision must not be considered complete.

        Args:
            revision: Revision identifier
            source_dir: Directory of built assets

        Returns:
            Number of files uploaded
        """
        source_dir = Path(source_dir)
        if not source_dir.is_dir():
            raise DeployerError(
                f"Source directory not found: {source_dir}",
                ErrorCode.SOURCE_NOT_FOUND
            )

        files = scan_source_files(source_dir)
        logger.info(
            f"Staging {pluralize(len(files), 'file')} from {source_dir} "
            f"to {self.keys.revision_prefix(revision)}"
        )

        async def upload(path: Path) -> None:
            relative = path.relative_to(source_dir).as_posix()
            async with aiofiles.open(path, 'rb') as f:
                body = await f.read()
            await self.store.put(self.keys.revision_key(revision, relative), body)

        await bounded_gather((upload(path) for path in files), self.workers)
        return len(files)

    async def copy_prefix(self, source_prefix: str, target_prefix: str) -> int:
        """
        Copy every object under one prefix to another

        Objects are read back decompressed and rewritten through the
        store, so the compression and content-type policy applies to the
        target keys as if they were uploaded fresh. Objects whose target
        would land on the pointer, the ledger or a staged revision are
        skipped.

        Args:
            source_prefix: Prefix to copy from
            target_prefix: Prefix to copy to

        Returns:
            Number of objects written to the target prefix
        """
        keys = await self.store.list_keys(source_prefix)
        logger.info(f"Copying {pluralize(len(keys), 'object')} from {source_prefix} to {target_prefix}")

        async def copy(key: str) -> bool:
            target = join_key(target_prefix, key[len(source_prefix):])
            if self.keys.is_reserved(target):
                logger.warning(f"Not copying {key}: {target} is reserved for revision bookkeeping")
                return False
            body = await self.store.get(key)
            if body is None:
                logger.warning(f"{key} disappeared before it could be copied")
                return False
            await self.store.put(target, body)
            return True

        copied = await bounded_gather((copy(key) for key in keys), self.workers)
        return sum(copied)
