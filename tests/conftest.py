"""Shared fixtures for s3-deployer tests."""

import asyncio
from collections import Counter
from pathlib import Path
from typing import Dict, List, Optional

import pytest

from s3_deployer.api.exceptions import ObjectNotFoundError
from s3_deployer.core.object_store import ObjectStore
from s3_deployer.core.source_control import SourceControl
from s3_deployer.models.config import DeployerConfig
from s3_deployer.storage.base import ListResult, StorageBackend, StoredObject, split_listing

NO_DELAYS = (0, 0, 0)


class InMemoryStorage(StorageBackend):
    """Dict-backed storage that counts calls and can inject failures."""

    def __init__(self, config=None):
        super().__init__(config or {"name": "memory://assets"})
        self.objects: Dict[str, StoredObject] = {}
        self.calls: Counter = Counter()
        self.failures: Counter = Counter()
        self.fail_keys = set()
        self.put_order: List[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def _do_initialize(self) -> None:
        pass

    def fail_next(self, operation: str, times: int = 1) -> None:
        """Make the next ``times`` calls of an operation raise."""
        self.failures[operation] += times

    def _maybe_fail(self, operation: str, key: Optional[str] = None) -> None:
        self.calls[operation] += 1
        if key is not None and key in self.fail_keys:
            raise ConnectionError(f"injected {operation} failure for {key}")
        if self.failures[operation] > 0:
            self.failures[operation] -= 1
            raise ConnectionError(f"injected {operation} failure")

    async def get_object(self, key: str) -> StoredObject:
        self._maybe_fail("get", key)
        if key not in self.objects:
            raise ObjectNotFoundError(key)
        return self.objects[key]

    async def put_object(self, obj: StoredObject) -> None:
        self._maybe_fail("put", obj.key)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            self.objects[obj.key] = obj
            self.put_order.append(obj.key)
        finally:
            self.in_flight -= 1

    async def list_objects(self, prefix: str = "", delimiter: Optional[str] = None) -> ListResult:
        self._maybe_fail("list")
        return split_listing(list(self.objects), prefix, delimiter)

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


class FakeSourceControl(SourceControl):
    """Source control returning canned answers."""

    def __init__(self, sha: Optional[str] = "a1b2c3d4e5f6", summaries: Dict[str, str] = None):
        self.sha = sha
        self.summaries = summaries or {}
        self.log_calls = []

    def current_commit_id(self) -> Optional[str]:
        return self.sha

    def log_summaries(self, from_commit: str, to_commit: str) -> List[str]:
        self.log_calls.append((from_commit, to_commit))
        return [f"{to_commit[:7]} change after {from_commit[:7]}"]

    def commit_summary(self, commit: str) -> Optional[str]:
        return self.summaries.get(commit)


@pytest.fixture
def memory_backend() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture
def store(memory_backend) -> ObjectStore:
    return ObjectStore(memory_backend, retry_delays=NO_DELAYS)


@pytest.fixture
def dist_dir(tmp_path) -> Path:
    """A small build directory."""
    dist = tmp_path / "dist"
    (dist / "css").mkdir(parents=True)
    (dist / "js").mkdir()
    (dist / "index.html").write_text("<html>hello</html>")
    (dist / "css" / "app.css").write_text("body { color: red; }")
    (dist / "js" / "app.js").write_text("console.log('hi');")
    return dist


@pytest.fixture
def config(dist_dir) -> DeployerConfig:
    return DeployerConfig(
        bucket="assets",
        app_path="myapp",
        dist_dir=str(dist_dir),
        retry_delays=NO_DELAYS,
    )


@pytest.fixture
def source_control() -> FakeSourceControl:
    return FakeSourceControl()
