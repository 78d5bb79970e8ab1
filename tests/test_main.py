"""
Tests for the wmbrowse entry point — argument handling end to end
"""

import io
import sys

import orjson
import pytest

from wmbrowse import __version__
from wmbrowse.cli import main
from wmbrowse.config import ConfigManager


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """No user config, no WMBROWSE_* environment, logs under tmp_path."""
    for key in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setattr(ConfigManager, "USER_CONFIG_FILE", tmp_path / "absent.yaml")
    monkeypatch.setenv("WMBROWSE_LOG_DIR", str(tmp_path / "logs"))
    return monkeypatch


@pytest.fixture
def seed_file(tmp_path):
    path = tmp_path / "world.json"
    path.write_bytes(orjson.dumps({"identifiers": {
        "room.101": [{"name": "temperature", "type": "double", "value": "21.5", "created": 1000}],
    }}))
    return path


class TestMain:
    """Tests for main()."""

    def test_show_config(self, isolated, capsys):
        assert main(["--show-config", "wm.example.org", "operator", "abc"]) == 0

        out = capsys.readouterr().out
        assert f"World Model Browser version {__version__}" in out
        assert "Unable to parse abc as a solver port number." in out
        assert "Host: wm.example.org" in out
        assert "Solver port: 7009" in out
        assert "Origin: operator" in out

    def test_port_overrides(self, isolated, capsys):
        assert main(["--show-config", "wm", "op", "7100", "7200"]) == 0
        out = capsys.readouterr().out
        assert "Solver port: 7100" in out
        assert "Client port: 7200" in out

    def test_session_over_memory_backend(self, isolated, seed_file, capsys):
        isolated.setattr(sys, "stdin", io.StringIO("search room.*\nquit\n"))

        assert main(["--seed", str(seed_file), "localhost", "operator"]) == 0

        out = capsys.readouterr().out
        assert "+ room.101" in out
        assert out.rstrip().endswith("--Disconnected--")

    def test_read_only_without_origin(self, isolated, capsys):
        isolated.setattr(sys, "stdin", io.StringIO("touch a\nquit\n"))

        assert main(["localhost"]) == 0

        out = capsys.readouterr().out
        assert "No origin given: starting a read-only session." in out
        assert "Error: Read-only session" in out

    def test_bad_backend(self, isolated, capsys):
        assert main(["--backend", "nowhere", "localhost", "op"]) == 2
        assert "Unable to set up backend" in capsys.readouterr().err

    def test_bad_seed(self, isolated, tmp_path, capsys):
        assert main(["--seed", str(tmp_path / "absent.json"), "localhost", "op"]) == 2
        assert "Cannot read seed file" in capsys.readouterr().err

    def test_invalid_environment_value(self, isolated, capsys):
        isolated.setenv("WMBROWSE_SOLVER_PORT", "many")
        assert main(["localhost", "op"]) == 2
        assert "Invalid configuration" in capsys.readouterr().err

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["--version"])
        assert exc.value.code == 0
        assert __version__ in capsys.readouterr().out
