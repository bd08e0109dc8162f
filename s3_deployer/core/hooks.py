"""Lifecycle hooks fired around deploy, stage and switch"""

import asyncio
import inspect
import logging
import os
from dataclasses import dataclass, fields
from typing import Any, Callable, Dict, Optional

from ..api.exceptions import HookError
from ..constants import (
    HookName,
    ENV_HOOK_NAME,
    ENV_HOOK_REVISION,
    ENV_HOOK_FROM_REVISION,
    ENV_HOOK_TO_REVISION,
)

logger = logging.getLogger(__name__)

HookCallable = Callable[..., Any]


class ShellHook:
    """Hook running a shell command

    Revisions are passed through the environment:
    ``S3_DEPLOYER_REVISION`` for deploy/stage hooks,
    ``S3_DEPLOYER_FROM_REVISION`` / ``S3_DEPLOYER_TO_REVISION`` for switch
    hooks. A non-zero exit status fails the operation.

    Example, posting the new revision to the application after a switch::

        hooks:
          after_switch: curl -fsS -X POST -d "revision=$S3_DEPLOYER_TO_REVISION" https://app.example.com/revision
    """

    def __init__(self, name: str, command: str, timeout: Optional[float] = 300):
        self.name = name
        self.command = command
        self.timeout = timeout

    def build_env(self, *revisions: Optional[str]) -> Dict[str, str]:
        env = os.environ.copy()
        env[ENV_HOOK_NAME] = self.name
        if len(revisions) == 1:
            env[ENV_HOOK_REVISION] = revisions[0] or ""
        elif len(revisions) == 2:
            env[ENV_HOOK_FROM_REVISION] = revisions[0] or ""
            env[ENV_HOOK_TO_REVISION] = revisions[1] or ""
        return env

    async def __call__(self, *revisions: Optional[str]) -> None:
        logger.info(f"Running {self.name} hook: {self.command}")
        process = await asyncio.create_subprocess_shell(
            self.command,
            env=self.build_env(*revisions),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE
        )

        try:
            stdout, stderr = await asyncio.wait_for(process.communicate(), timeout=self.timeout)
        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise HookError(self.name, f"timed out after {self.timeout}s")

        if stdout:
            logger.info(f"Hook output: {stdout.decode(errors='replace').strip()}")
        if stderr:
            logger.warning(f"Hook error: {stderr.decode(errors='replace').strip()}")

        if process.returncode != 0:
            raise HookError(self.name, f"exit status {process.returncode}")

    def __repr__(self) -> str:
        return f"ShellHook({self.name!r}, {self.command!r})"


@dataclass
class LifecycleHooks:
    """Optional callables invoked around each phase

    Deploy and stage hooks receive the revision, switch hooks receive the
    previous and the target revision. Callables may be plain functions or
    coroutine functions. A missing hook is a no-op.
    """

    before_deploy: Optional[HookCallable] = None
    after_deploy: Optional[HookCallable] = None
    before_stage: Optional[HookCallable] = None
    after_stage: Optional[HookCallable] = None
    before_switch: Optional[HookCallable] = None
    after_switch: Optional[HookCallable] = None

    @classmethod
    def from_commands(cls, commands: Dict[str, str]) -> 'LifecycleHooks':
        """Build hooks from a mapping of hook name to shell command"""
        valid = {h.value for h in HookName}
        hooks = {}
        for name, command in (commands or {}).items():
            if name not in valid:
                raise ValueError(f"Unknown hook: {name}")
            if command:
                hooks[name] = ShellHook(name, command)
        return cls(**hooks)

    def merge(self, other: 'LifecycleHooks') -> 'LifecycleHooks':
        """Combine with another set, hooks from ``other`` win"""
        values = {
            f.name: getattr(other, f.name) or getattr(self, f.name)
            for f in fields(self)
        }
        return LifecycleHooks(**values)

    async def fire(self, hook: HookName, *args: Optional[str]) -> None:
        """
        Invoke a hook if it is set

        Args:
            hook: Hook point
            *args: Revision arguments passed to the callable
        """
        callback = getattr(self, hook.value)
        if callback is None:
            return

        logger.debug(f"Firing {hook.value}{args}")
        result = callback(*args)
        if inspect.isawaitable(result):
            await result
