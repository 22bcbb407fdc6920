"""
Unit tests for the nginx-vhost CLI.
"""

import textwrap

import pytest
from click.testing import CliRunner

from nginx_vhost import __version__
from nginx_vhost.cli.main import cli
from nginx_vhost.resources.service import Service


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    """Config file writing into a temporary nginx layout."""
    path = tmp_path / "sites.py"
    path.write_text(textwrap.dedent(f"""
        from nginx_vhost import Settings, VhostParams

        settings = Settings(
            vdir="{tmp_path}/sites-available",
            vdir_enable="{tmp_path}/sites-enabled",
            log_dir="{tmp_path}/log",
        )

        vhosts = [
            VhostParams("app.example.com", proxy="http://127.0.0.1:8000"),
            {{"name": "secure.example.com", "ssl": True, "ssl_only": True,
              "ssl_cert": "/etc/ssl/s.crt", "ssl_key": "/etc/ssl/s.key"}},
        ]
    """))
    return path


class TestCli:

    def test_version(self, runner):
        result = runner.invoke(cli, ["version"])

        assert result.exit_code == 0
        assert __version__ in result.output

    def test_render_all(self, runner, config_file):
        result = runner.invoke(cli, ["render", str(config_file)])

        assert result.exit_code == 0
        assert "proxy_pass http://127.0.0.1:8000;" in result.output
        assert "ssl_certificate /etc/ssl/s.crt;" in result.output

    def test_render_one(self, runner, config_file):
        result = runner.invoke(cli, ["render", str(config_file), "secure.example.com"])

        assert result.exit_code == 0
        assert "proxy_pass http://127.0.0.1:8000;" not in result.output
        assert "listen *:443 ssl;" in result.output

    def test_render_unknown_name(self, runner, config_file):
        result = runner.invoke(cli, ["render", str(config_file), "nope.example.com"])

        assert result.exit_code == 1
        assert "No vhost named nope.example.com" in result.output

    def test_configuration_error_exits(self, runner, tmp_path):
        path = tmp_path / "bad.py"
        path.write_text('vhosts = [{"name": "bad", "ssl": True}]\n')

        result = runner.invoke(cli, ["render", str(path)])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_broken_config_file(self, runner, tmp_path):
        path = tmp_path / "broken.py"
        path.write_text("vhosts = [\n")

        result = runner.invoke(cli, ["plan", str(path)])

        assert result.exit_code == 1
        assert "Error loading config" in result.output

    def test_plan_lists_changes(self, runner, config_file, tmp_path):
        result = runner.invoke(cli, ["plan", str(config_file)])

        assert result.exit_code == 0
        assert f"concat:{tmp_path}/sites-available/app.example.com.conf" in result.output
        assert "to change" in result.output
        # plan never writes
        assert not (tmp_path / "sites-available").exists()


@pytest.fixture
def apply_config(tmp_path, current_owner):
    """Config file owned by the test user, so apply works without root."""
    user, group = current_owner
    path = tmp_path / "apply.py"
    path.write_text(textwrap.dedent(f"""
        from nginx_vhost import Settings, VhostParams

        settings = Settings(
            daemon_user="{user}",
            daemon_group="{group}",
            vdir="{tmp_path}/sites-available",
            vdir_enable="{tmp_path}/sites-enabled",
            log_dir="{tmp_path}/log",
        )

        vhosts = [VhostParams("app.example.com", proxy="http://127.0.0.1:8000")]
    """))
    return path


class TestApplyCommand:

    def test_apply_writes_and_reloads(self, runner, apply_config, tmp_path, monkeypatch):
        reloads = []
        monkeypatch.setattr(Service, "reload", lambda self, platform: reloads.append(self.id))

        result = runner.invoke(cli, ["apply", str(apply_config), "--yes"])

        assert result.exit_code == 0, result.output
        assert "Apply complete!" in result.output
        assert "svc:nginx reloaded" in result.output
        assert reloads == ["svc:nginx"]
        config = tmp_path / "sites-available" / "app.example.com.conf"
        assert "proxy_pass http://127.0.0.1:8000;" in config.read_text()

    def test_second_apply_has_nothing_to_do(self, runner, apply_config, monkeypatch):
        monkeypatch.setattr(Service, "reload", lambda self, platform: None)
        runner.invoke(cli, ["apply", str(apply_config), "--yes"])

        result = runner.invoke(cli, ["apply", str(apply_config), "--yes"])

        assert result.exit_code == 0
        assert "No changes needed." in result.output

    def test_declined_confirmation_aborts(self, runner, apply_config, tmp_path):
        result = runner.invoke(cli, ["apply", str(apply_config)], input="n\n")

        assert result.exit_code == 0
        assert "Aborted." in result.output
        assert not (tmp_path / "sites-available").exists()

    def test_reload_failure_exits_nonzero(self, runner, apply_config, monkeypatch):
        def fail(self, platform):
            raise RuntimeError("Config test failed for nginx, not reloading")

        monkeypatch.setattr(Service, "reload", fail)

        result = runner.invoke(cli, ["apply", str(apply_config), "--yes"])

        assert result.exit_code == 1
        assert "Errors during apply:" in result.output
        assert "Config test failed" in result.output
