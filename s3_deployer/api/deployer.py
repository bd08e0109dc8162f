"""Deployer API for stage, switch and rollback operations"""

import asyncio
import functools
import logging
import time
from typing import List, Optional

from ..constants import HookName
from ..core.hooks import LifecycleHooks
from ..core.ledger import RevisionLedger
from ..core.object_store import ObjectStore
from ..core.path_resolver import KeyResolver
from ..core.source_control import SourceControl, GitSourceControl
from ..core.upload_pipeline import UploadPipeline
from ..models.config import DeployerConfig
from ..models.result import RevisionInfo, StageResult, SwitchResult, DeployResult
from ..storage.base import StorageBackend
from ..storage.factory import StorageFactory
from ..utils.async_utils import run_async
from ..utils.formatting import format_duration, pluralize
from ..utils.revision_utils import generate_revision, is_valid_revision
from .exceptions import InvalidRevisionError, RevisionNotFoundError

logger = logging.getLogger(__name__)


class S3Deployer:
    """Publishes built assets under timestamped revisions and switches the live one"""

    def __init__(self,
                 config: DeployerConfig,
                 store: Optional[ObjectStore] = None,
                 backend: Optional[StorageBackend] = None,
                 source_control: Optional[SourceControl] = None,
                 hooks: Optional[LifecycleHooks] = None):
        """
        Initialize deployer

        Args:
            config: Deployer configuration
            store: Object store to use instead of one built from config
            backend: Storage backend to wrap instead of one built from config
            source_control: Commit lookup, defaults to git in the working directory
            hooks: Lifecycle callables, merged over hooks configured as shell commands
        """
        self.config = config
        self.keys = KeyResolver(config.app_path, config.current_path)

        if store is None:
            backend = backend or StorageFactory.create_from_config(config)
            store = ObjectStore.from_config(config, backend)
        self.store = store

        self.ledger = RevisionLedger(self.store, self.keys)
        self.pipeline = UploadPipeline(self.store, self.keys, config.upload_workers)
        self.source_control = source_control or GitSourceControl()

        configured = LifecycleHooks.from_commands(config.hooks)
        self.hooks = configured.merge(hooks) if hooks else configured

    # Synchronous API

    def stage(self, revision: Optional[str] = None) -> StageResult:
        """
        Upload the build directory under a revision without making it live

        Args:
            revision: Revision identifier, generated from the current time if None

        Returns:
            StageResult: Stage result

        Raises:
            InvalidRevisionError: If the given revision is not a valid identifier
            DeployerError: If the source directory is missing or an upload fails
        """
        return run_async(self.stage_async(revision))

    def switch(self, revision: Optional[str]) -> SwitchResult:
        """
        Make a staged revision live

        Args:
            revision: Revision identifier or commit id prefix

        Returns:
            SwitchResult: Switch result

        Raises:
            InvalidRevisionError: If revision is blank
            RevisionNotFoundError: If revision cannot be resolved or has no objects
        """
        return run_async(self.switch_async(revision))

    def deploy(self, revision: Optional[str] = None) -> DeployResult:
        """Stage then switch to the same revision"""
        return run_async(self.deploy_async(revision))

    def rollback(self, revision: Optional[str] = None) -> SwitchResult:
        """
        Switch back to an older revision

        Args:
            revision: Target revision or commit id prefix; the revision
                preceding the current one if None

        Returns:
            SwitchResult: Switch result
        """
        return run_async(self.rollback_async(revision))

    def current(self) -> Optional[RevisionInfo]:
        """Get the live revision, None if nothing was switched to yet"""
        return run_async(self.current_async())

    def list_revisions(self) -> List[RevisionInfo]:
        """Get every staged revision, oldest first"""
        return run_async(self.list_revisions_async())

    def changes(self, from_revision: str, to_revision: str) -> List[str]:
        """Get commit summaries between two revisions"""
        return run_async(self.changes_async(from_revision, to_revision))

    def close(self) -> None:
        """Release storage backend resources"""
        run_async(self.store.backend.close())

    # Async implementation

    async def stage_async(self, revision: Optional[str] = None) -> StageResult:
        """Async implementation of stage"""
        start_time = time.time()
        await self.store.backend.initialize()

        if revision is None:
            revision = generate_revision(self.config.time_zone)
        else:
            revision = revision.strip()
            if not is_valid_revision(revision):
                raise InvalidRevisionError(f"Invalid revision: {revision!r}")

        await self.hooks.fire(HookName.BEFORE_STAGE, revision)

        files = await self.pipeline.stage_files(revision, self.config.source_dir)

        sha = await self._source_control(self.source_control.current_commit_id)
        if sha:
            await self.ledger.record_sha(revision, sha)
        else:
            logger.warning(f"No commit id available, revision {revision} is not recorded in the ledger")

        await self.hooks.fire(HookName.AFTER_STAGE, revision)

        duration = time.time() - start_time
        logger.info(f"Staged {pluralize(files, 'file')} as {revision} in {format_duration(duration)}")
        return StageResult(revision=revision, files=files, sha=sha, duration=duration)

    async def switch_async(self, revision: Optional[str]) -> SwitchResult:
        """Async implementation of switch"""
        if revision is None or not revision.strip():
            raise InvalidRevisionError("You must specify the revision")

        start_time = time.time()
        await self.store.backend.initialize()

        target = await self.ledger.normalize(revision)
        if target is None:
            raise RevisionNotFoundError(revision.strip(), "no matching revision or commit id")

        current = await self.ledger.current_revision()
        await self.hooks.fire(HookName.BEFORE_SWITCH, current, target)

        logger.info(f"Switching {current or '(none)'} -> {target}")
        files = await self.pipeline.copy_prefix(
            self.keys.revision_prefix(target),
            self.keys.current_prefix
        )
        if files == 0:
            raise RevisionNotFoundError(target, "no staged objects")

        # Pointer goes last so readers never see it ahead of the copies
        await self.ledger.set_current_revision(target)

        await self.hooks.fire(HookName.AFTER_SWITCH, current, target)

        duration = time.time() - start_time
        logger.info(f"Switched to {target} ({pluralize(files, 'object')}) in {format_duration(duration)}")
        return SwitchResult(
            to_revision=target,
            from_revision=current,
            files=files,
            duration=duration
        )

    async def deploy_async(self, revision: Optional[str] = None) -> DeployResult:
        """Async implementation of deploy"""
        if revision is None:
            revision = generate_revision(self.config.time_zone)
        elif not is_valid_revision(revision.strip()):
            raise InvalidRevisionError(f"Invalid revision: {revision!r}")
        revision = revision.strip()

        await self.hooks.fire(HookName.BEFORE_DEPLOY, revision)
        stage_result = await self.stage_async(revision)
        switch_result = await self.switch_async(stage_result.revision)
        await self.hooks.fire(HookName.AFTER_DEPLOY, stage_result.revision)

        return DeployResult(stage=stage_result, switch=switch_result)

    async def rollback_async(self, revision: Optional[str] = None) -> SwitchResult:
        """Async implementation of rollback"""
        if revision is not None:
            return await self.switch_async(revision)

        await self.store.backend.initialize()
        current = await self.ledger.current_revision()
        revisions = await self.ledger.list_revisions()

        if current is None:
            raise RevisionNotFoundError("(previous)", "no current revision")

        older = [r for r in revisions if r < current]
        if not older:
            raise RevisionNotFoundError("(previous)", f"nothing staged before {current}")

        return await self.switch_async(older[-1])

    async def current_async(self) -> Optional[RevisionInfo]:
        """Async implementation of current"""
        await self.store.backend.initialize()
        revision = await self.ledger.current_revision()
        if revision is None:
            return None

        sha = await self.ledger.sha_of(revision)
        return RevisionInfo(
            revision=revision,
            sha=sha,
            summary=await self._summary(sha),
            is_current=True
        )

    async def list_revisions_async(self) -> List[RevisionInfo]:
        """Async implementation of list_revisions"""
        await self.store.backend.initialize()
        revisions = await self.ledger.list_revisions()
        shas = await self.ledger.read_shas()
        current = await self.ledger.current_revision()

        summaries = await asyncio.gather(*(self._summary(shas.get(r)) for r in revisions))
        return [
            RevisionInfo(
                revision=revision,
                sha=shas.get(revision),
                summary=summary,
                is_current=revision == current
            )
            for revision, summary in zip(revisions, summaries)
        ]

    async def changes_async(self, from_revision: str, to_revision: str) -> List[str]:
        """Async implementation of changes"""
        await self.store.backend.initialize()
        from_sha = await self._resolve_sha(from_revision)
        to_sha = await self._resolve_sha(to_revision)

        if not from_sha or not to_sha:
            logger.warning(f"No commit ids recorded for {from_revision} and {to_revision}")
            return []

        return await self._source_control(self.source_control.log_summaries, from_sha, to_sha)

    async def _resolve_sha(self, value: str) -> Optional[str]:
        revision = await self.ledger.normalize(value)
        if revision is None:
            return None
        return await self.ledger.sha_of(revision)

    async def _source_control(self, method, *args):
        # Source control shells out; keep it off the event loop
        return await asyncio.get_running_loop().run_in_executor(
            None, functools.partial(method, *args)
        )

    async def _summary(self, sha: Optional[str]) -> Optional[str]:
        if not sha:
            return None
        return await self._source_control(self.source_control.commit_summary, sha)

    async def __aenter__(self):
        await self.store.backend.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.store.backend.close()


def deploy(config: DeployerConfig, revision: Optional[str] = None) -> DeployResult:
    """
    Convenience function to stage and switch in one call

    Args:
        config: Deployer configuration
        revision: Revision identifier, generated if None

    Returns:
        DeployResult: Deployment result
    """
    deployer = S3Deployer(config)
    try:
        return deployer.deploy(revision)
    finally:
        deployer.close()
