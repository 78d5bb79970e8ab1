"""
Tests for Config — layered configuration

These tests validate:
- Config hierarchy (command line > env > explicit file > user file > defaults)
- Section validation
- Port override parsing
"""

import pytest
import yaml

from wmbrowse.config import Config, ConfigManager, ConnectionConfig, SessionConfig, parse_port


@pytest.fixture
def clean_env(monkeypatch):
    for key in ConfigManager.ENV_OVERRIDES:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


def write_yaml(path, data):
    path.write_text(yaml.safe_dump(data))
    return path


class TestDefaults:
    """Default values and validation."""

    def test_connection_defaults(self):
        config = ConnectionConfig()
        assert config.solver_port == 7009
        assert config.client_port == 7010
        assert config.poll_interval_ms == 500
        assert config.poll_attempts == 20
        assert config.backend == "memory"

    def test_session_defaults(self):
        config = SessionConfig()
        assert config.origin is None
        assert config.idle_sleep_ms == 10
        assert config.type_attempts == 3

    def test_defaults_are_valid(self):
        assert Config().validate() is None

    def test_port_out_of_range(self):
        config = Config()
        config.connection.solver_port = 70000
        assert "solver_port" in config.validate()

    def test_empty_host(self):
        config = Config()
        config.connection.host = ""
        assert config.validate() == "Missing world model hostname/IP address."

    def test_unknown_attribute_type(self):
        config = Config(attribute_types={"speed": "decimal"})
        assert "Unknown value type 'decimal'" in config.validate()

    def test_bad_log_level(self):
        config = Config()
        config.logging.level = "LOUD"
        assert "Unknown log level" in config.validate()

    def test_dict_round_trip(self):
        config = Config(attribute_types={"x": "double"})
        config.session.origin = "operator"
        restored = Config.from_dict(config.to_dict())
        assert restored == config


class TestConfigManager:
    """Layer precedence."""

    def test_user_file(self, tmp_path, clean_env):
        user = write_yaml(tmp_path / "user.yaml", {"connection": {"host": "wm.user"}})
        config = ConfigManager(user_config_path=user).load()
        assert config.connection.host == "wm.user"

    def test_explicit_file_beats_user_file(self, tmp_path, clean_env):
        user = write_yaml(tmp_path / "user.yaml", {"connection": {"host": "wm.user", "solver_port": 8000}})
        explicit = write_yaml(tmp_path / "explicit.yaml", {"connection": {"host": "wm.explicit"}})

        config = ConfigManager(explicit, user_config_path=user).load()

        assert config.connection.host == "wm.explicit"
        assert config.connection.solver_port == 8000

    def test_environment_beats_files(self, tmp_path, clean_env):
        user = write_yaml(tmp_path / "user.yaml", {"connection": {"host": "wm.user"}})
        clean_env.setenv("WMBROWSE_HOST", "wm.env")
        clean_env.setenv("WMBROWSE_CLIENT_PORT", "7100")

        config = ConfigManager(user_config_path=user).load()

        assert config.connection.host == "wm.env"
        assert config.connection.client_port == 7100

    def test_overrides_beat_environment(self, tmp_path, clean_env):
        clean_env.setenv("WMBROWSE_ORIGIN", "env-origin")
        manager = ConfigManager(user_config_path=tmp_path / "absent.yaml")
        config = manager.load({"session": {"origin": "cli-origin"}})
        assert config.session.origin == "cli-origin"

    def test_attribute_types_from_file(self, tmp_path, clean_env):
        user = write_yaml(tmp_path / "user.yaml", {"attribute_types": {"location.x": "double"}})
        config = ConfigManager(user_config_path=user).load()
        assert config.attribute_types == {"location.x": "double"}

    def test_malformed_yaml_is_ignored(self, tmp_path, clean_env):
        user = tmp_path / "user.yaml"
        user.write_text("connection: [unclosed")
        config = ConfigManager(user_config_path=user).load()
        assert config.connection.host == "localhost"

    def test_display_read_only(self, tmp_path, clean_env):
        manager = ConfigManager(user_config_path=tmp_path / "absent.yaml")
        text = manager.display()
        assert "Origin: (none - read-only)" in text
        assert "Solver port: 7009" in text


class TestParsePort:
    """Tests for parse_port()."""

    def test_valid(self):
        assert parse_port("7100") == 7100

    def test_bounds(self):
        assert parse_port("0") == 0
        assert parse_port("65535") == 65535

    def test_non_numeric(self, capsys):
        assert parse_port("abc", "solver port") is None
        assert "Unable to parse abc as a solver port number." in capsys.readouterr().out

    def test_out_of_range(self, capsys):
        assert parse_port("65536") is None
        assert "Port number must be in the range [0,65535]" in capsys.readouterr().out
