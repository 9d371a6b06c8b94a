"""Tests for the command line interface."""

import json

import pytest

from logflake import cli
from logflake.client import LogFlake
from logflake.models import Category

from conftest import ScriptedTransport


@pytest.fixture
def fake_transport(monkeypatch):
    """Route clients created by the CLI through a scripted transport."""
    scripted = ScriptedTransport()
    original = LogFlake.from_config.__func__

    def from_config(cls, config, transport=None):
        return original(cls, config, transport=scripted)

    monkeypatch.setattr(LogFlake, "from_config", classmethod(from_config))
    return scripted


class TestCli:
    def test_log(self, fake_transport, capsys):
        code = cli.main([
            "--app-id", "cli-app",
            "--endpoint", "https://logflake.test",
            "--hostname", "cli-host",
            "log", "deployed",
            "--level", "info",
            "--correlation", "rel-1",
            "--param", "version=1.4.2",
        ])

        assert code == 0
        document = fake_transport.record_attempts[0].document
        assert document == {
            "level": 1,
            "hostname": "cli-host",
            "content": "deployed",
            "correlation": "rel-1",
            "params": {"version": "1.4.2"},
        }
        stats = json.loads(capsys.readouterr().out)
        assert stats["state"] == "stopped"

    def test_perf(self, fake_transport):
        code = cli.main(["--app-id", "cli-app", "perf", "nightly-import", "5230"])

        assert code == 0
        (attempt,) = fake_transport.record_attempts
        assert attempt.category == Category.PERFORMANCE
        assert attempt.document == {"label": "nightly-import", "duration": 5230}

    def test_bad_endpoint(self, capsys):
        code = cli.main(["--app-id", "cli-app", "--endpoint", "not a uri", "log", "x"])

        assert code == 2
        assert "Configuration error" in capsys.readouterr().err

    def test_missing_app_id(self, monkeypatch, capsys):
        monkeypatch.delenv("LOGFLAKE_APP_ID", raising=False)

        assert cli.main(["log", "x"]) == 2

    def test_bad_param(self, fake_transport, capsys):
        code = cli.main(["--app-id", "cli-app", "log", "x", "--param", "novalue"])

        assert code == 2
        assert fake_transport.record_attempts == []

    def test_config_file(self, fake_transport, tmp_path):
        path = tmp_path / "logflake.yaml"
        path.write_text("app_id: file-app\nhostname: file-host\n")

        assert cli.main(["--config", str(path), "log", "from file"]) == 0
        assert fake_transport.record_attempts[0].document["hostname"] == "file-host"


class TestParseParams:
    def test_pairs(self):
        assert cli.parse_params(["a=1", "b=x=y"]) == {"a": "1", "b": "x=y"}


class TestDisabled:
    def test_disabled_config_sends_nothing(self, fake_transport, monkeypatch, capsys):
        monkeypatch.setenv("LOGFLAKE_ENABLED", "false")

        code = cli.main(["--app-id", "cli-app", "log", "x"])

        assert code == 0
        assert fake_transport.attempts == []
        assert json.loads(capsys.readouterr().out) == {"enabled": False, "sent": 0}

    def test_disabled_in_config_file(self, fake_transport, tmp_path):
        path = tmp_path / "logflake.yaml"
        path.write_text("app_id: file-app\nenabled: false\n")

        assert cli.main(["--config", str(path), "perf", "op", "1"]) == 0
        assert fake_transport.attempts == []
