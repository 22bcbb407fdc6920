"""
Unit tests for resources.

File and Concat run against a temporary directory with the local
transport; Service runs against a recording transport.
"""

import os

import pytest

from nginx_vhost.core import Action
from nginx_vhost.core.executor import Executor
from nginx_vhost.resources.concat import ABSENT, Concat, Fragment, merge_fragments
from nginx_vhost.resources.file import File
from nginx_vhost.resources.service import Service
from nginx_vhost.transport import NullTransport


def echo_renderer(template, context):
    """Renders a fragment as its template name plus newline."""
    return f"{template}\n"


@pytest.fixture
def executor(debian):
    return Executor(platform=debian)


class TestFileResource:
    """Unit tests for File resource."""

    def test_file_check_missing(self, executor, tmp_path):
        file_res = executor.add(File(str(tmp_path / "missing.txt"), content="test"))
        state = file_res.check(executor.platform)

        assert state["exists"] is False

    def test_file_plan_create_and_apply(self, executor, tmp_path):
        path = tmp_path / "nested" / "new.txt"
        file_res = executor.add(File(str(path), content="new content\n", mode=0o640))

        plan = file_res.plan(executor.platform)
        assert plan.action == Action.CREATE
        assert any(c.field == "content" for c in plan.changes)

        file_res.apply(plan, executor.platform)
        assert path.read_text() == "new content\n"
        assert oct(path.stat().st_mode & 0o777) == oct(0o640)

    def test_file_plan_update(self, executor, tmp_path):
        path = tmp_path / "existing.txt"
        path.write_text("old content")

        file_res = executor.add(File(str(path), content="new content"))
        plan = file_res.plan(executor.platform)

        assert plan.action == Action.UPDATE
        assert [c.field for c in plan.changes] == ["content"]

    def test_file_idempotency(self, executor, tmp_path):
        path = tmp_path / "same.txt"
        path.write_text("content")
        os.chmod(path, 0o644)

        file_res = executor.add(File(str(path), content="content", mode=0o644))
        assert not file_res.plan(executor.platform).has_changes()

    def test_absent_removes_file(self, executor, tmp_path):
        path = tmp_path / "gone.txt"
        path.write_text("bye")

        file_res = executor.add(File(str(path), ensure="absent"))
        plan = file_res.plan(executor.platform)
        assert plan.action == Action.DELETE

        file_res.apply(plan, executor.platform)
        assert not path.exists()

    def test_absent_already_missing(self, executor, tmp_path):
        file_res = executor.add(File(str(tmp_path / "never.txt"), ensure="absent"))
        assert file_res.plan(executor.platform).action == Action.NONE

    def test_directory_resource(self, executor, tmp_path):
        path = tmp_path / "www"
        dir_res = executor.add(File(str(path), ensure="directory", mode=0o755))

        plan = dir_res.plan(executor.platform)
        assert plan.action == Action.CREATE

        dir_res.apply(plan, executor.platform)
        assert path.is_dir()

    def test_link_create_and_retarget(self, executor, tmp_path):
        first = tmp_path / "first.conf"
        second = tmp_path / "second.conf"
        first.write_text("a")
        second.write_text("b")
        link = tmp_path / "enabled" / "site.conf"

        link_res = executor.add(File(str(link), ensure="link", target=str(first)))
        link_res.apply(link_res.plan(executor.platform), executor.platform)
        assert os.readlink(link) == str(first)

        retarget = Executor(platform=executor.platform).add(
            File(str(link), ensure="link", target=str(second))
        )
        plan = retarget.plan(executor.platform)
        assert plan.action == Action.UPDATE
        assert [c.field for c in plan.changes] == ["target"]

        retarget.apply(plan, executor.platform)
        assert os.readlink(link) == str(second)

    def test_regular_file_replaced_by_link(self, executor, tmp_path):
        target = tmp_path / "real.conf"
        target.write_text("real")
        path = tmp_path / "site.conf"
        path.write_text("stale copy")

        link_res = executor.add(File(str(path), ensure="link", target=str(target)))
        plan = link_res.plan(executor.platform)
        assert any(c.field == "type" for c in plan.changes)

        link_res.apply(plan, executor.platform)
        assert os.path.islink(path)

    def test_invalid_ensure(self):
        with pytest.raises(ValueError):
            File("/tmp/x", ensure="symlink")

    def test_link_requires_target(self):
        with pytest.raises(ValueError):
            File("/tmp/x", ensure="link")

    def test_unattached_resource_fails_loudly(self, debian):
        file_res = File("/tmp/x", content="x")
        assert isinstance(file_res._transport, NullTransport)

        with pytest.raises(RuntimeError, match="Transport not initialized"):
            file_res.check(debian)


class TestConcat:
    """Ordered fragment merge."""

    def _fragment(self, order, name, ensure="present", target="/tmp/site.conf"):
        return Fragment(order=order, name=name, target=target, template=name, ensure=ensure)

    def test_merge_orders_by_tag(self):
        fragments = [
            self._fragment("99", "ssl-footer"),
            self._fragment("01", "header"),
            self._fragment("70", "ssl-header"),
            self._fragment("00", "default"),
        ]

        text = merge_fragments(fragments, echo_renderer)

        assert text == "default\nheader\nssl-header\nssl-footer\n"

    def test_merge_skips_absent(self):
        fragments = [
            self._fragment("01", "header"),
            self._fragment("68", "fastcgi", ensure=ABSENT),
            self._fragment("69", "footer"),
        ]

        assert merge_fragments(fragments, echo_renderer) == "header\nfooter\n"

    def test_rejects_foreign_fragment(self):
        concat = Concat("/tmp/site.conf", renderer=echo_renderer)
        with pytest.raises(ValueError):
            concat.add_fragment(self._fragment("01", "header", target="/tmp/other.conf"))

    def test_rejects_duplicate_name(self):
        concat = Concat("/tmp/site.conf", fragments=[self._fragment("01", "header")],
                        renderer=echo_renderer)
        with pytest.raises(ValueError):
            concat.add_fragment(self._fragment("02", "header"))

    def test_desired_content_is_merge(self, executor, tmp_path):
        path = str(tmp_path / "site.conf")
        concat = executor.add(Concat(
            path,
            fragments=[
                self._fragment("69", "footer", target=path),
                self._fragment("01", "header", target=path),
            ],
            renderer=echo_renderer,
        ))

        plan = concat.plan(executor.platform)
        concat.apply(plan, executor.platform)

        assert concat.id == f"concat:{path}"
        assert (tmp_path / "site.conf").read_text() == "header\nfooter\n"

    def test_absent_concat(self, executor, tmp_path):
        path = tmp_path / "site.conf"
        path.write_text("old")

        concat = executor.add(Concat(str(path), ensure=ABSENT, renderer=echo_renderer))
        plan = concat.plan(executor.platform)
        assert plan.action == Action.DELETE


class TestServiceResource:
    """Service reload/restart via systemctl."""

    def _attach(self, service, transport):
        service._transport = transport
        return service

    def test_reload_runs_config_test_first(self, transport, debian):
        service = self._attach(Service("nginx", test_command=["nginx", "-t"]), transport)
        service.reload(debian)

        assert transport.commands == [["nginx", "-t"], ["systemctl", "reload", "nginx"]]

    def test_failed_config_test_blocks_reload(self, transport, debian):
        transport.codes = {("nginx", "-t"): 1}
        service = self._attach(Service("nginx", test_command=["nginx", "-t"]), transport)

        with pytest.raises(RuntimeError, match="Config test failed"):
            service.reload(debian)
        assert ["systemctl", "reload", "nginx"] not in transport.commands

    def test_failed_reload_raises(self, transport, debian):
        transport.codes = {("systemctl", "reload"): 1}
        service = self._attach(Service("nginx"), transport)

        with pytest.raises(RuntimeError, match="reload"):
            service.reload(debian)

    def test_triggers(self):
        conf = File("/etc/nginx/sites-available/a.conf", content="x")
        service = Service("nginx", reload_on=[conf], restart_on=["file:/usr/sbin/nginx"])

        assert service.should_reload([conf.id])
        assert not service.should_reload(["file:/other"])
        assert service.should_restart(["file:/usr/sbin/nginx"])

    def test_subscribe_is_idempotent(self):
        conf = File("/etc/nginx/sites-available/a.conf", content="x")
        service = Service("nginx")
        service.subscribe(conf)
        service.subscribe(conf)

        assert service.reload_on == [conf.id]

    def test_no_state_managed_by_default(self, transport, debian):
        service = self._attach(Service("nginx"), transport)

        assert not service.plan(debian).has_changes()
        assert transport.commands == []

    def test_running_started(self, transport, debian):
        transport.codes = {("systemctl", "is-active"): 3}
        service = self._attach(Service("nginx", running=True), transport)

        plan = service.plan(debian)
        assert plan.action == Action.UPDATE

        service.apply(plan, debian)
        assert ["systemctl", "start", "nginx"] in transport.commands
