"""Scenario tests for the S3 deployer."""

import gzip
import threading
from dataclasses import replace

import pytest

from s3_deployer.api.deployer import S3Deployer
from s3_deployer.api.exceptions import InvalidRevisionError, RevisionNotFoundError
from s3_deployer.constants import GZIP_ENCODING
from s3_deployer.core.hooks import LifecycleHooks
from s3_deployer.utils.async_utils import run_async
from s3_deployer.utils.revision_utils import is_valid_revision
from tests.conftest import FakeSourceControl

REV_1 = "20240101000000"
REV_2 = "20240102000000"
REV_3 = "20240103000000"


@pytest.fixture
def deployer(config, memory_backend, source_control) -> S3Deployer:
    return S3Deployer(config, backend=memory_backend, source_control=source_control)


class TestStage:
    """Tests for staging."""

    def test_generates_revision(self, deployer, memory_backend) -> None:
        result = deployer.stage()

        assert is_valid_revision(result.revision)
        assert result.files == 3
        assert f"myapp/revisions/{result.revision}/index.html" in memory_backend.objects

    def test_records_commit_id(self, deployer) -> None:
        result = deployer.stage(REV_1)

        assert result.sha == "a1b2c3d4e5f6"
        assert run_sha(deployer, REV_1) == "a1b2c3d4e5f6"

    def test_does_not_touch_pointer_or_live_prefix(self, deployer, memory_backend) -> None:
        deployer.stage(REV_1)

        assert "myapp/CURRENT_REVISION" not in memory_backend.objects
        assert not any(k.startswith("myapp/current/") for k in memory_backend.objects)

    def test_missing_commit_id_skips_ledger(self, config, memory_backend) -> None:
        deployer = S3Deployer(config, backend=memory_backend, source_control=FakeSourceControl(sha=None))

        result = deployer.stage(REV_1)

        assert result.sha is None
        assert "myapp/SHAS" not in memory_backend.objects

    def test_invalid_explicit_revision(self, deployer, memory_backend) -> None:
        with pytest.raises(InvalidRevisionError):
            deployer.stage("v1.2.3")

        assert memory_backend.objects == {}

    def test_restage_overwrites(self, deployer, memory_backend, dist_dir) -> None:
        deployer.stage(REV_1)
        (dist_dir / "index.html").write_text("<html>v2</html>")

        deployer.stage(REV_1)

        assert memory_backend.objects[f"myapp/revisions/{REV_1}/index.html"].body == b"<html>v2</html>"

    def test_other_revisions_are_untouched(self, deployer, memory_backend) -> None:
        deployer.stage(REV_1)
        before = memory_backend.objects[f"myapp/revisions/{REV_1}/index.html"]

        deployer.stage(REV_2)

        assert memory_backend.objects[f"myapp/revisions/{REV_1}/index.html"] is before


class TestSwitch:
    """Tests for switching the live revision."""

    def test_copies_and_points(self, deployer, memory_backend) -> None:
        deployer.stage(REV_1)

        result = deployer.switch(REV_1)

        assert result.to_revision == REV_1
        assert result.from_revision is None
        assert result.files == 3
        assert memory_backend.objects["myapp/current/index.html"].body == b"<html>hello</html>"
        assert memory_backend.objects["myapp/current/js/app.js"].body == b"console.log('hi');"
        assert deployer.current().revision == REV_1

    def test_pointer_is_written_last(self, deployer, memory_backend) -> None:
        deployer.stage(REV_1)
        memory_backend.put_order.clear()

        deployer.switch(REV_1)

        assert memory_backend.put_order[-1] == "myapp/CURRENT_REVISION"
        assert len(memory_backend.put_order) == 4

    @pytest.mark.parametrize("value", [None, "", "   "])
    def test_blank_revision_never_touches_storage(self, deployer, memory_backend, value) -> None:
        with pytest.raises(InvalidRevisionError):
            deployer.switch(value)

        assert memory_backend.total_calls == 0

    def test_by_commit_prefix(self, config, memory_backend) -> None:
        source_control = FakeSourceControl(sha="abc1234567")
        deployer = S3Deployer(config, backend=memory_backend, source_control=source_control)
        deployer.stage(REV_1)
        source_control.sha = "def7654321"
        deployer.stage(REV_2)

        result = deployer.switch("abc12")

        assert result.to_revision == REV_1

    def test_unresolved_revision(self, deployer, memory_backend) -> None:
        deployer.stage(REV_1)
        deployer.switch(REV_1)

        with pytest.raises(RevisionNotFoundError):
            deployer.switch("nosuchsha")

        assert deployer.current().revision == REV_1

    def test_revision_without_objects(self, deployer, memory_backend) -> None:
        deployer.stage(REV_1)
        deployer.switch(REV_1)

        with pytest.raises(RevisionNotFoundError):
            deployer.switch(REV_3)

        assert memory_backend.objects["myapp/CURRENT_REVISION"].body == REV_1.encode()

    def test_reports_previous_revision(self, deployer) -> None:
        deployer.stage(REV_1)
        deployer.stage(REV_2)
        deployer.switch(REV_1)

        result = deployer.switch(REV_2)

        assert result.from_revision == REV_1
        assert result.to_revision == REV_2

    def test_empty_current_path_serves_from_app_path(self, config, memory_backend, source_control) -> None:
        deployer = S3Deployer(
            replace(config, current_path=""),
            backend=memory_backend,
            source_control=source_control
        )
        deployer.stage(REV_1)

        deployer.switch(REV_1)

        assert "myapp/index.html" in memory_backend.objects

    def test_empty_current_path_keeps_bookkeeping_intact(self, config, memory_backend, source_control,
                                                       dist_dir) -> None:
        (dist_dir / "SHAS").write_text("not a ledger")
        (dist_dir / "revisions" / "old").mkdir(parents=True)
        (dist_dir / "revisions" / "old" / "a.js").write_text("old();")
        deployer = S3Deployer(
            replace(config, current_path=""),
            backend=memory_backend,
            source_control=source_control
        )
        deployer.stage(REV_1)

        result = deployer.switch(REV_1)

        assert result.files == 3
        assert run_sha(deployer, REV_1) == "a1b2c3d4e5f6"
        assert [r.revision for r in deployer.list_revisions()] == [REV_1]
        assert "myapp/revisions/old/a.js" not in memory_backend.objects
        assert deployer.current().revision == REV_1


class TestDeploy:
    """Tests for deploy and rollback."""

    def test_deploy_stages_and_switches(self, deployer, memory_backend) -> None:
        result = deployer.deploy(REV_1)

        assert result.revision == REV_1
        assert result.stage.files == 3
        assert result.switch.to_revision == REV_1
        assert memory_backend.objects["myapp/CURRENT_REVISION"].body == REV_1.encode()
        assert "myapp/current/index.html" in memory_backend.objects

    def test_deploy_generates_revision(self, deployer) -> None:
        result = deployer.deploy()
        assert deployer.current().revision == result.revision

    def test_rollback_to_explicit_revision(self, deployer) -> None:
        deployer.deploy(REV_1)
        deployer.deploy(REV_2)

        result = deployer.rollback(REV_1)

        assert result.from_revision == REV_2
        assert deployer.current().revision == REV_1

    def test_rollback_to_previous(self, deployer, memory_backend, dist_dir) -> None:
        deployer.deploy(REV_1)
        (dist_dir / "index.html").write_text("<html>broken</html>")
        deployer.deploy(REV_2)

        result = deployer.rollback()

        assert result.to_revision == REV_1
        assert memory_backend.objects["myapp/current/index.html"].body == b"<html>hello</html>"

    def test_rollback_without_previous(self, deployer) -> None:
        deployer.deploy(REV_1)

        with pytest.raises(RevisionNotFoundError):
            deployer.rollback()

    def test_rollback_without_current(self, deployer) -> None:
        deployer.stage(REV_1)

        with pytest.raises(RevisionNotFoundError):
            deployer.rollback()

    def test_gzip_round_trip(self, config, memory_backend, source_control) -> None:
        deployer = S3Deployer(
            replace(config, gzip=True),
            backend=memory_backend,
            source_control=source_control
        )

        deployer.deploy(REV_1)

        live = memory_backend.objects["myapp/current/css/app.css"]
        assert live.content_encoding == GZIP_ENCODING
        assert gzip.decompress(live.body) == b"body { color: red; }"
        assert memory_backend.objects["myapp/CURRENT_REVISION"].content_encoding is None
        assert deployer.current().revision == REV_1

    def test_gzip_pattern_round_trip(self, config, memory_backend, source_control, tmp_path) -> None:
        dist = tmp_path / "site"
        (dist / "a").mkdir(parents=True)
        (dist / "index.html").write_text("<h>hi</h>")
        (dist / "a" / "b.css").write_text("body{}")
        deployer = S3Deployer(
            replace(config, dist_dir=str(dist), gzip=[r"\.css$"]),
            backend=memory_backend,
            source_control=source_control
        )

        deployer.deploy(REV_1)

        assert memory_backend.objects["myapp/current/a/b.css"].content_encoding == GZIP_ENCODING
        assert memory_backend.objects["myapp/current/index.html"].content_encoding is None
        assert run_async(deployer.store.get("myapp/current/a/b.css")) == b"body{}"
        assert run_async(deployer.store.get("myapp/current/index.html")) == b"<h>hi</h>"


class TestHooks:
    """Tests for lifecycle hook ordering."""

    def test_deploy_fires_hooks_in_order(self, config, memory_backend, source_control) -> None:
        events = []

        async def after_switch(from_revision, to_revision):
            events.append(("after_switch", from_revision, to_revision))

        hooks = LifecycleHooks(
            before_deploy=lambda rev: events.append(("before_deploy", rev)),
            after_deploy=lambda rev: events.append(("after_deploy", rev)),
            before_stage=lambda rev: events.append(("before_stage", rev)),
            after_stage=lambda rev: events.append(("after_stage", rev)),
            before_switch=lambda old, new: events.append(("before_switch", old, new)),
            after_switch=after_switch,
        )
        deployer = S3Deployer(config, backend=memory_backend, source_control=source_control, hooks=hooks)

        deployer.deploy(REV_1)

        assert events == [
            ("before_deploy", REV_1),
            ("before_stage", REV_1),
            ("after_stage", REV_1),
            ("before_switch", None, REV_1),
            ("after_switch", None, REV_1),
            ("after_deploy", REV_1),
        ]

    def test_failing_hook_aborts_before_pointer(self, config, memory_backend, source_control) -> None:
        def refuse(old, new):
            raise RuntimeError("not today")

        deployer = S3Deployer(
            config,
            backend=memory_backend,
            source_control=source_control,
            hooks=LifecycleHooks(before_switch=refuse)
        )
        deployer.stage(REV_1)

        with pytest.raises(RuntimeError):
            deployer.switch(REV_1)

        assert "myapp/CURRENT_REVISION" not in memory_backend.objects


class TestQueries:
    """Tests for current, list and changes."""

    def test_current_without_pointer(self, deployer) -> None:
        assert deployer.current() is None

    def test_current_info(self, config, memory_backend) -> None:
        source_control = FakeSourceControl(sha="abc123", summaries={"abc123": "abc123 Fix header"})
        deployer = S3Deployer(config, backend=memory_backend, source_control=source_control)
        deployer.deploy(REV_1)

        info = deployer.current()

        assert info.revision == REV_1
        assert info.sha == "abc123"
        assert info.summary == "abc123 Fix header"
        assert info.is_current
        assert info.timestamp.year == 2024

    def test_list_revisions(self, deployer) -> None:
        deployer.stage(REV_2)
        deployer.stage(REV_1)
        deployer.switch(REV_2)

        revisions = deployer.list_revisions()

        assert [r.revision for r in revisions] == [REV_1, REV_2]
        assert [r.is_current for r in revisions] == [False, True]
        assert all(r.sha == "a1b2c3d4e5f6" for r in revisions)

    def test_list_empty(self, deployer) -> None:
        assert deployer.list_revisions() == []

    def test_changes(self, config, memory_backend) -> None:
        source_control = FakeSourceControl(sha="aaaaaaa111")
        deployer = S3Deployer(config, backend=memory_backend, source_control=source_control)
        deployer.stage(REV_1)
        source_control.sha = "bbbbbbb222"
        deployer.stage(REV_2)

        summaries = deployer.changes(REV_1, "bbbb")

        assert source_control.log_calls == [("aaaaaaa111", "bbbbbbb222")]
        assert summaries == ["bbbbbbb change after aaaaaaa"]

    def test_changes_without_sha(self, config, memory_backend) -> None:
        source_control = FakeSourceControl(sha=None)
        deployer = S3Deployer(config, backend=memory_backend, source_control=source_control)
        deployer.stage(REV_1)
        deployer.stage(REV_2)

        assert deployer.changes(REV_1, REV_2) == []
        assert source_control.log_calls == []

    @pytest.mark.asyncio
    async def test_source_control_runs_off_the_event_loop(self, config, memory_backend) -> None:
        source_control = ThreadRecordingSourceControl(summaries={"a1b2c3d4e5f6": "a1b2c3d Fix header"})
        deployer = S3Deployer(config, backend=memory_backend, source_control=source_control)

        await deployer.stage_async(REV_1)
        await deployer.stage_async(REV_2)
        revisions = await deployer.list_revisions_async()
        await deployer.changes_async(REV_1, REV_2)

        assert [r.summary for r in revisions] == ["a1b2c3d Fix header"] * 2
        assert source_control.threads
        assert threading.get_ident() not in source_control.threads


class ThreadRecordingSourceControl(FakeSourceControl):
    """Source control remembering which threads called it."""

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self.threads = set()

    def current_commit_id(self):
        self.threads.add(threading.get_ident())
        return super().current_commit_id()

    def log_summaries(self, from_commit, to_commit):
        self.threads.add(threading.get_ident())
        return super().log_summaries(from_commit, to_commit)

    def commit_summary(self, commit):
        self.threads.add(threading.get_ident())
        return super().commit_summary(commit)


def run_sha(deployer: S3Deployer, revision: str):
    return run_async(deployer.ledger.sha_of(revision))
