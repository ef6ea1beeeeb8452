"""
CLI Tests
"""

import json

import pytest
from pydantic import ValidationError

from compatstatus import main as cli
from compatstatus.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Run from an empty directory so no stray .env is picked up."""
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestMainOnce:
    """Tests for ``compatstatus --once``."""

    def test_exports_object_graph(self, tmp_path):
        graph = tmp_path / "objects.json"
        graph.write_text(json.dumps({
            "hosts": [{"name": "h1", "groups": ["linux"]}],
            "services": [{
                "host_name": "h1", "alias": "ping", "state": 2, "state_type": 1,
                "check_interval": 300, "retry_interval": 60,
            }],
        }), encoding="utf-8")
        out = tmp_path / "out"

        code = cli.main(["--objects", str(graph), "--export-dir", str(out)])

        assert code == 0
        status = (out / "status.dat").read_text(encoding="utf-8")
        objects = (out / "objects.cache").read_text(encoding="utf-8")
        assert "\tcurrent_state=2\n" in status
        assert "\tmembers\th1\n" in objects

    def test_missing_graph_returns_error(self, tmp_path):
        code = cli.main([
            "--objects", str(tmp_path / "missing.json"),
            "--export-dir", str(tmp_path / "out"),
        ])

        assert code == 1
        assert not (tmp_path / "out" / "status.dat").exists()

    def test_env_configures_paths(self, tmp_path, monkeypatch):
        graph = tmp_path / "graph.json"
        graph.write_text(json.dumps({"hosts": [{"name": "solo"}]}), encoding="utf-8")
        monkeypatch.setenv("OBJECTS_FILE", str(graph))
        monkeypatch.setenv("EXPORT_DIR", str(tmp_path / "env-out"))
        monkeypatch.setenv("STATUS_FILENAME", "custom.dat")

        code = cli.main([])

        assert code == 0
        assert (tmp_path / "env-out" / "custom.dat").exists()
        assert (tmp_path / "env-out" / "objects.cache").exists()

    def test_parse_args_defaults(self):
        args = cli.parse_args([])

        assert args.once is True
        assert args.daemon is False
        assert args.interval is None


class TestIntervalOption:
    """``--interval`` must be a positive number of seconds."""

    @pytest.mark.parametrize("value", ["-5", "0", "abc"])
    def test_rejects_invalid_interval(self, value, monkeypatch):
        started = []
        monkeypatch.setattr(cli, "create_scheduler", lambda *a, **kw: started.append(1))

        with pytest.raises(SystemExit) as exc_info:
            cli.main(["--daemon", "--interval", value])

        assert exc_info.value.code == 2
        assert started == []

    def test_accepts_positive_interval(self):
        assert cli.parse_args(["--interval", "1"]).interval == 1

    def test_interval_passed_to_scheduler(self, tmp_path, monkeypatch):
        captured = {}

        class FakeScheduler:
            def start(self):
                pass

            def shutdown(self, wait=True):
                pass

        def fake_create_scheduler(exporter, interval_seconds, timezone_name):
            captured["interval"] = interval_seconds
            return FakeScheduler()

        monkeypatch.setattr(cli, "create_scheduler", fake_create_scheduler)
        monkeypatch.setattr(cli.signal, "signal", lambda *a: None)

        code = cli.main(["--daemon", "--interval", "7", "--export-dir", str(tmp_path)])

        assert code == 0
        assert captured["interval"] == 7

    def test_invalid_env_interval_rejected(self, monkeypatch):
        monkeypatch.setenv("EXPORT_INTERVAL_SECONDS", "-5")

        with pytest.raises(ValidationError):
            cli.main(["--once"])
