"""
Configuration — Centralized settings management

Config hierarchy (highest to lowest priority):
  1. Command-line arguments
  2. Environment variables (WMBROWSE_*)
  3. Explicit config file (--config PATH)
  4. User config (~/.wmbrowse/config.yaml)
  5. Defaults

Example config.yaml:
    connection:
      host: wm.example.org
      solver_port: 7009
      client_port: 7010
    session:
      origin: operator.alice
    attribute_types:
      location.xoffset: double
      display name: string
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .core.values import get_value_type, value_type_names
from .services.links import DEFAULT_CLIENT_PORT, DEFAULT_SOLVER_PORT


MIN_PORT = 0
MAX_PORT = 65535


@dataclass
class ConnectionConfig:
    """World model endpoints and link lifecycle budget."""
    host: str = "localhost"
    solver_port: int = DEFAULT_SOLVER_PORT
    client_port: int = DEFAULT_CLIENT_PORT
    connect_timeout_ms: int = 10000
    poll_interval_ms: int = 500
    poll_attempts: int = 20
    backend: str = "memory"   # "memory" | "package.module:factory"
    seed: Optional[str] = None  # JSON seed for the memory backend

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if not self.host:
            return "Missing world model hostname/IP address."
        for name in ("solver_port", "client_port"):
            port = getattr(self, name)
            if not MIN_PORT <= port <= MAX_PORT:
                return f"{name} must be in the range [{MIN_PORT},{MAX_PORT}], got {port}"
        if self.connect_timeout_ms <= 0:
            return "connect_timeout_ms must be > 0"
        if self.poll_interval_ms <= 0:
            return "poll_interval_ms must be > 0"
        if self.poll_attempts < 1:
            return "poll_attempts must be >= 1"
        return None


@dataclass
class SessionConfig:
    """Console session preferences."""
    origin: Optional[str] = None  # None = read-only session
    prompt: str = ">"
    idle_sleep_ms: int = 10
    type_attempts: int = 3

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        if self.idle_sleep_ms < 0:
            return "idle_sleep_ms must be >= 0"
        if self.type_attempts < 1:
            return "type_attempts must be >= 1"
        return None


@dataclass
class LoggingConfig:
    """Diagnostic log file settings (loguru)."""
    dir: str = str(Path.home() / ".wmbrowse" / "logs")
    level: str = "INFO"
    rotation: str = "1 day"
    retention: str = "30 days"

    def validate(self) -> Optional[str]:
        """Validate config. Returns error message or None if valid."""
        valid_levels = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")
        if self.level.upper() not in valid_levels:
            return f"Unknown log level '{self.level}'. Valid: {', '.join(valid_levels)}"
        return None


@dataclass
class Config:
    """Application configuration."""
    connection: ConnectionConfig = field(default_factory=ConnectionConfig)
    session: SessionConfig = field(default_factory=SessionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    attribute_types: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> Optional[str]:
        """First validation error across all sections, or None."""
        for section in (self.connection, self.session, self.logging):
            error = section.validate()
            if error:
                return error
        for attribute, type_name in self.attribute_types.items():
            if get_value_type(type_name) is None:
                return (f"Unknown value type '{type_name}' for attribute '{attribute}'. "
                        f"Valid: {', '.join(value_type_names())}")
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "connection": {
                "host": self.connection.host,
                "solver_port": self.connection.solver_port,
                "client_port": self.connection.client_port,
                "connect_timeout_ms": self.connection.connect_timeout_ms,
                "poll_interval_ms": self.connection.poll_interval_ms,
                "poll_attempts": self.connection.poll_attempts,
                "backend": self.connection.backend,
                "seed": self.connection.seed,
            },
            "session": {
                "origin": self.session.origin,
                "prompt": self.session.prompt,
                "idle_sleep_ms": self.session.idle_sleep_ms,
                "type_attempts": self.session.type_attempts,
            },
            "logging": {
                "dir": self.logging.dir,
                "level": self.logging.level,
                "rotation": self.logging.rotation,
                "retention": self.logging.retention,
            },
            "attribute_types": dict(self.attribute_types),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Create from dictionary."""
        conn_data = data.get("connection") or {}
        session_data = data.get("session") or {}
        logging_data = data.get("logging") or {}
        defaults = cls()

        return cls(
            connection=ConnectionConfig(
                host=conn_data.get("host", defaults.connection.host),
                solver_port=int(conn_data.get("solver_port", defaults.connection.solver_port)),
                client_port=int(conn_data.get("client_port", defaults.connection.client_port)),
                connect_timeout_ms=int(conn_data.get("connect_timeout_ms", defaults.connection.connect_timeout_ms)),
                poll_interval_ms=int(conn_data.get("poll_interval_ms", defaults.connection.poll_interval_ms)),
                poll_attempts=int(conn_data.get("poll_attempts", defaults.connection.poll_attempts)),
                backend=conn_data.get("backend", defaults.connection.backend),
                seed=conn_data.get("seed"),
            ),
            session=SessionConfig(
                origin=session_data.get("origin"),
                prompt=session_data.get("prompt", defaults.session.prompt),
                idle_sleep_ms=int(session_data.get("idle_sleep_ms", defaults.session.idle_sleep_ms)),
                type_attempts=int(session_data.get("type_attempts", defaults.session.type_attempts)),
            ),
            logging=LoggingConfig(
                dir=logging_data.get("dir", defaults.logging.dir),
                level=str(logging_data.get("level", defaults.logging.level)).upper(),
                rotation=logging_data.get("rotation", defaults.logging.rotation),
                retention=logging_data.get("retention", defaults.logging.retention),
            ),
            attribute_types={str(k): str(v) for k, v in (data.get("attribute_types") or {}).items()},
        )


def parse_port(text: str, label: str = "port") -> Optional[int]:
    """
    Parse a port override.

    Non-numeric text or a value outside [0,65535] is rejected with a
    printed notice; the caller keeps the default port.
    """
    try:
        port = int(text)
    except (TypeError, ValueError):
        print(f"Unable to parse {text} as a {label} number.")
        return None
    if not MIN_PORT <= port <= MAX_PORT:
        print(f"Port number must be in the range [{MIN_PORT},{MAX_PORT}]")
        return None
    return port


class ConfigManager:
    """
    Manages configuration loading.

    Hierarchy:
      1. Overrides (command line)
      2. Environment
      3. Explicit file
      4. User config (~/.wmbrowse/config.yaml)
      5. Defaults
    """

    USER_CONFIG_DIR = Path.home() / ".wmbrowse"
    USER_CONFIG_FILE = USER_CONFIG_DIR / "config.yaml"

    ENV_OVERRIDES = {
        "WMBROWSE_HOST": ("connection", "host"),
        "WMBROWSE_SOLVER_PORT": ("connection", "solver_port"),
        "WMBROWSE_CLIENT_PORT": ("connection", "client_port"),
        "WMBROWSE_BACKEND": ("connection", "backend"),
        "WMBROWSE_SEED": ("connection", "seed"),
        "WMBROWSE_ORIGIN": ("session", "origin"),
        "WMBROWSE_LOG_LEVEL": ("logging", "level"),
        "WMBROWSE_LOG_DIR": ("logging", "dir"),
    }

    def __init__(self, config_path: Optional[Path] = None, user_config_path: Optional[Path] = None):
        self.config_path = Path(config_path) if config_path else None
        self._user_config_path = Path(user_config_path) if user_config_path else self.USER_CONFIG_FILE
        self._config: Optional[Config] = None

    @property
    def user_config_path(self) -> Path:
        return self._user_config_path

    def load(self, overrides: Optional[Dict[str, Any]] = None) -> Config:
        """Load configuration from all sources."""
        if self._config is not None and not overrides:
            return self._config

        config_data: Dict[str, Any] = {}

        # Layer 1: User config
        config_data = self._merge(config_data, self._read_yaml(self.user_config_path))

        # Layer 2: Explicit file (higher priority)
        if self.config_path is not None:
            config_data = self._merge(config_data, self._read_yaml(self.config_path))

        # Layer 3: Environment overrides
        for env_key, (section, setting) in self.ENV_OVERRIDES.items():
            if os.environ.get(env_key):
                config_data.setdefault(section, {})[setting] = os.environ[env_key]

        # Layer 4: Command-line overrides
        if overrides:
            config_data = self._merge(config_data, overrides)

        self._config = Config.from_dict(config_data)
        return self._config

    @staticmethod
    def _read_yaml(path: Path) -> Dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return {}  # Ignore malformed config
        return data if isinstance(data, dict) else {}

    def _merge(self, base: Dict, override: Dict) -> Dict:
        """Deep merge two dicts, override wins."""
        result = base.copy()
        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge(result[key], value)
            else:
                result[key] = value
        return result

    def display(self) -> str:
        """Format config for display."""
        config = self.load()
        origin = config.session.origin or "(none - read-only)"
        lines = [
            "Configuration:",
            "",
            "Connection:",
            f"  Host: {config.connection.host}",
            f"  Solver port: {config.connection.solver_port}",
            f"  Client port: {config.connection.client_port}",
            f"  Backend: {config.connection.backend}",
            f"  Connect timeout: {config.connection.connect_timeout_ms} ms",
            f"  Readiness polls: {config.connection.poll_attempts} x {config.connection.poll_interval_ms} ms",
            "",
            "Session:",
            f"  Origin: {origin}",
            f"  Type prompt attempts: {config.session.type_attempts}",
            "",
            "Logging:",
            f"  Directory: {config.logging.dir}",
            f"  Level: {config.logging.level}",
        ]
        if config.attribute_types:
            lines.extend(["", "Attribute types:"])
            for attribute, type_name in sorted(config.attribute_types.items()):
                lines.append(f"  {attribute}: {type_name}")
        lines.extend([
            "",
            "Config files:",
            f"  User: {self.user_config_path}",
            f"  Explicit: {self.config_path or '(none)'}",
        ])
        return "\n".join(lines)
