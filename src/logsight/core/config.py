"""
Configuration Management for LogSight

Settings come from, highest precedence first:
1. Explicit arguments (CLI options, function parameters)
2. Environment variables (LOGSIGHT_*)
3. A config file (YAML, TOML or JSON)
4. Dataclass defaults
"""

import json
import logging
import os
import tomllib
from collections.abc import Callable
from dataclasses import asdict, dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml

from logsight.core.constants import DEFAULT_MAP_NAME, TEAM_A_FALLBACK, TEAM_B_FALLBACK

logger = logging.getLogger(__name__)


# ============================================================================
# Configuration Dataclasses
# ============================================================================


@dataclass
class ParserConfig:
    """Configuration for reading log files."""

    encoding: str = "utf-8"
    # Codec error handling passed to open(); "replace" keeps bad bytes from aborting a read
    errors: str = "replace"


@dataclass
class MatchConfig:
    """Fallbacks used by the match reconstructor."""

    # Placeholder used when Match_Start carries no map name
    default_map_name: str = DEFAULT_MAP_NAME
    team_a_fallback: str = TEAM_A_FALLBACK
    team_b_fallback: str = TEAM_B_FALLBACK


@dataclass
class ExportConfig:
    """Configuration for data export."""

    # Used when the output path has no extension
    default_format: str = "json"
    json_indent: int = 2
    csv_delimiter: str = ","


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ServerConfig:
    """Configuration for the HTTP API."""

    log_path: str = "data/match.log"
    host: str = "0.0.0.0"
    port: int = 3001
    max_upload_mb: int = 50


@dataclass
class LogSightConfig:
    """Main configuration container."""

    parser: ParserConfig = field(default_factory=ParserConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    # Version of the config format
    config_version: str = "1.0"


# Environment variable -> (section, key)
ENV_VARS: dict[str, tuple[str, str]] = {
    "LOGSIGHT_LOG_LEVEL": ("logging", "level"),
    "LOGSIGHT_LOG_ENCODING": ("parser", "encoding"),
    "LOGSIGHT_DEFAULT_MAP": ("match", "default_map_name"),
    "LOGSIGHT_TEAM_A_FALLBACK": ("match", "team_a_fallback"),
    "LOGSIGHT_TEAM_B_FALLBACK": ("match", "team_b_fallback"),
    "LOGSIGHT_EXPORT_FORMAT": ("export", "default_format"),
    "LOGSIGHT_MATCH_LOG": ("server", "log_path"),
    "LOGSIGHT_HOST": ("server", "host"),
    "LOGSIGHT_PORT": ("server", "port"),
    "LOGSIGHT_MAX_UPLOAD_MB": ("server", "max_upload_mb"),
}

CONFIG_FILENAMES = ("logsight.yaml", "logsight.toml", "logsight.json", ".logsight.yaml")


# ============================================================================
# Configuration Loading
# ============================================================================


def config_search_paths() -> list[Path]:
    """Candidate config files, first match wins: working directory, then user config dirs."""
    home = Path.home()
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", str(home / ".config")))

    paths = [Path.cwd() / name for name in CONFIG_FILENAMES]
    paths += [
        home / ".config" / "logsight" / "config.yaml",
        home / ".config" / "logsight" / "config.toml",
        home / ".logsight.yaml",
        xdg_config / "logsight" / "config.yaml",
    ]
    return paths


def _read_yaml(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _read_toml(path: Path) -> dict[str, Any]:
    with open(path, "rb") as f:
        return tomllib.load(f)


def _read_json(path: Path) -> dict[str, Any]:
    with open(path, encoding="utf-8") as f:
        return json.load(f)


CONFIG_READERS: dict[str, Callable[[Path], dict[str, Any]]] = {
    ".yaml": _read_yaml,
    ".yml": _read_yaml,
    ".toml": _read_toml,
    ".json": _read_json,
}


def read_config_file(path: Path) -> dict[str, Any]:
    """Read a config file by extension; a missing file or unknown extension yields {}."""
    if not path.exists():
        return {}

    reader = CONFIG_READERS.get(path.suffix.lower())
    if reader is None:
        logger.warning(f"Unknown config file format: {path.suffix}")
        return {}
    return reader(path)


def _field_type(section: str, key: str) -> type:
    """Type of a setting, taken from its default value."""
    defaults = getattr(LogSightConfig(), section)
    return type(getattr(defaults, key))


def env_overrides() -> dict[str, Any]:
    """
    Settings from LOGSIGHT_* environment variables.

    Values are converted to the type of the setting they override, so a team
    name of "9" stays a string. An integer setting with a non-integer value is
    skipped with a warning.
    """
    overrides: dict[str, dict[str, Any]] = {}

    for env_var, (section, key) in ENV_VARS.items():
        raw = os.environ.get(env_var)
        if raw is None:
            continue

        value: Any = raw
        if _field_type(section, key) is int:
            try:
                value = int(raw)
            except ValueError:
                logger.warning(f"Ignoring {env_var}={raw!r}: expected an integer")
                continue

        overrides.setdefault(section, {})[key] = value

    return overrides


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge override into base section by section; neither input is modified."""
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        merged[key] = deep_merge(current, value) if isinstance(current, dict) and isinstance(value, dict) else value
    return merged


def config_from_dict(data: dict[str, Any]) -> LogSightConfig:
    """Build a LogSightConfig from nested sections; unknown keys are logged and dropped."""
    config = LogSightConfig()

    for section_name, values in data.items():
        section = getattr(config, section_name, None)
        if not is_dataclass(section):
            if section_name != "config_version":
                logger.warning(f"Ignoring unknown config section: {section_name}")
            continue
        known = {f.name for f in fields(section)}
        for key, value in (values or {}).items():
            if key in known:
                setattr(section, key, value)
            else:
                logger.warning(f"Ignoring unknown config key: {section_name}.{key}")

    return config


def load_config(config_file: Path | None = None, include_env: bool = True) -> LogSightConfig:
    """
    Load configuration from all sources.

    Args:
        config_file: Explicit path to a config file; otherwise the search paths are tried
        include_env: Whether LOGSIGHT_* variables override the file

    Returns:
        Merged LogSightConfig
    """
    source = config_file or next((p for p in config_search_paths() if p.exists()), None)

    data: dict[str, Any] = {}
    if source is not None:
        data = read_config_file(source)
        logger.info(f"Loaded config from: {source}")

    if include_env:
        data = deep_merge(data, env_overrides())

    return config_from_dict(data)


# ============================================================================
# Configuration Saving
# ============================================================================


def _write_yaml(data: dict[str, Any], path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)


def _write_json(data: dict[str, Any], path: Path) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


CONFIG_WRITERS: dict[str, Callable[[dict[str, Any], Path], None]] = {
    ".yaml": _write_yaml,
    ".yml": _write_yaml,
    ".json": _write_json,
}


def save_config(config: LogSightConfig, path: Path) -> None:
    """
    Save configuration to a .yaml, .yml or .json file.

    Raises:
        ValueError: For any other extension
    """
    writer = CONFIG_WRITERS.get(path.suffix.lower())
    if writer is None:
        raise ValueError(f"Unknown config format: {path.suffix.lower()}")

    writer(asdict(config), path)
    logger.info(f"Saved config to: {path}")


# ============================================================================
# Global Configuration
# ============================================================================

_global_config: LogSightConfig | None = None


def get_config() -> LogSightConfig:
    """Get the global configuration, loading it if necessary."""
    global _global_config

    if _global_config is None:
        _global_config = load_config()

    return _global_config


def set_config(config: LogSightConfig) -> None:
    """Set the global configuration."""
    global _global_config
    _global_config = config


def reset_config() -> None:
    """Forget the global configuration; the next get_config() reloads it."""
    global _global_config
    _global_config = None


# ============================================================================
# Configuration Templates
# ============================================================================

DEFAULT_CONFIG_YAML = """# LogSight Configuration

# Log reading
parser:
  encoding: utf-8
  errors: replace

# Reconstruction fallbacks
match:
  default_map_name: Nuke
  team_a_fallback: Team A
  team_b_fallback: Team B

# Export settings (default_format applies when -o has no extension)
export:
  default_format: json
  json_indent: 2
  csv_delimiter: ","

# Logging settings
logging:
  level: INFO

# HTTP API
server:
  log_path: data/match.log
  host: 0.0.0.0
  port: 3001
  max_upload_mb: 50
"""


def generate_default_config(path: Path) -> None:
    """Write a commented YAML template, or a plain dump for .json."""
    if path.suffix.lower() in (".yaml", ".yml"):
        path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    else:
        save_config(LogSightConfig(), path)

    logger.info(f"Generated default config at: {path}")
