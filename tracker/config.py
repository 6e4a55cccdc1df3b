# =============================================================================
# POLYMARKET WINDOW TRACKER
# Module: tracker/config.py
# Purpose: Operator configuration
# =============================================================================
#
# PRECEDENCE (lowest to highest):
#   built-in defaults < config/tracker.yaml < environment (.env) < CLI flags
#
# USAGE:
#   from tracker.config import load_config
#
#   config = load_config(overrides={"refresh_seconds": 2})
#
# =============================================================================

import logging
import os
from dataclasses import dataclass, fields, asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv

from collector.discovery import DEFAULT_QUERY_TEMPLATE
from shared.enums import OutputMode
from tracker.errors import ConfigError

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).parent.parent
CONFIG_PATH = BASE_DIR / "config" / "tracker.yaml"
ENV_PATH = BASE_DIR / ".env"

MIN_REFRESH_SECONDS = 1
MAX_SEARCH_LIMIT = 500

# config key -> environment variable
ENV_VARS = {
    "refresh_seconds": "TRACKER_REFRESH_SECONDS",
    "scan_seconds": "TRACKER_SCAN_SECONDS",
    "output_mode": "TRACKER_OUTPUT_MODE",
    "asset": "TRACKER_ASSET",
    "query_template": "TRACKER_QUERY_TEMPLATE",
    "search_limit": "TRACKER_SEARCH_LIMIT",
    "timezone": "TRACKER_TIMEZONE",
    "cli_binary": "POLYMARKET_CLI",
    "cli_timeout_seconds": "TRACKER_CLI_TIMEOUT",
    "drop_stale_market": "TRACKER_DROP_STALE",
}


@dataclass
class TrackerConfig:
    """Validated tracker settings."""
    refresh_seconds: float = 5
    scan_seconds: float = 60
    output_mode: OutputMode = OutputMode.FULL
    asset: str = "Bitcoin"
    query_template: str = DEFAULT_QUERY_TEMPLATE
    search_limit: int = 50
    timezone: str = "America/New_York"
    cli_binary: str = "polymarket"
    cli_timeout_seconds: float = 20
    drop_stale_market: bool = False

    def __post_init__(self):
        """Validate config on creation."""
        errors = self.validate()
        if errors:
            raise ConfigError(f"Invalid configuration: {'; '.join(errors)}")

    def validate(self) -> list:
        """Validate all fields. Returns list of errors."""
        errors = []

        if self.refresh_seconds < MIN_REFRESH_SECONDS:
            errors.append(f"refresh_seconds must be >= {MIN_REFRESH_SECONDS}, got {self.refresh_seconds}")

        if self.scan_seconds < self.refresh_seconds:
            errors.append(
                f"scan_seconds ({self.scan_seconds}) must be >= refresh_seconds ({self.refresh_seconds})"
            )

        if not 1 <= self.search_limit <= MAX_SEARCH_LIMIT:
            errors.append(f"search_limit must be between 1 and {MAX_SEARCH_LIMIT}, got {self.search_limit}")

        if self.cli_timeout_seconds <= 0:
            errors.append(f"cli_timeout_seconds must be positive, got {self.cli_timeout_seconds}")

        if not self.asset.strip():
            errors.append("asset is required")

        if not self.cli_binary.strip():
            errors.append("cli_binary is required")

        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            errors.append(f"unknown timezone: {self.timezone}")

        return errors

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["output_mode"] = self.output_mode.value
        return data


# =============================================================================
# COERCION
# =============================================================================

def _coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("1", "true", "yes", "y", "on")


def _coerce_output_mode(value: Any) -> OutputMode:
    if isinstance(value, OutputMode):
        return value
    try:
        return OutputMode(str(value).strip().lower())
    except ValueError:
        valid = ", ".join(m.value for m in OutputMode)
        raise ConfigError(f"output_mode must be one of {valid}, got {value!r}")


_COERCERS = {
    "refresh_seconds": float,
    "scan_seconds": float,
    "cli_timeout_seconds": float,
    "search_limit": int,
    "drop_stale_market": _coerce_bool,
    "output_mode": _coerce_output_mode,
}


def _coerce(key: str, value: Any) -> Any:
    coercer = _COERCERS.get(key, str)
    try:
        return coercer(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"Invalid value for {key}: {value!r} ({e})")


# =============================================================================
# LOADING
# =============================================================================

def load_yaml_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the tracker section of the YAML config file.

    A missing file is not an error; a malformed one is.
    """
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.exists():
        logger.info(f"Config file not found, using defaults: {config_path}")
        return {}

    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Cannot parse {config_path}: {e}")

    if not isinstance(data, dict):
        raise ConfigError(f"{config_path} must contain a mapping")

    section = data.get("tracker", data)
    if not isinstance(section, dict):
        raise ConfigError(f"{config_path}: 'tracker' must be a mapping")
    return section


def load_env_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """Collect settings from environment variables."""
    env = os.environ if environ is None else environ
    values = {}
    for key, var in ENV_VARS.items():
        raw = env.get(var)
        if raw is not None and raw.strip() != "":
            values[key] = raw.strip()
    return values


def load_config(
    config_path: Optional[Path] = None,
    overrides: Optional[Dict[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
    use_dotenv: bool = True,
) -> TrackerConfig:
    """
    Build the effective configuration.

    Args:
        config_path: YAML file (default: config/tracker.yaml)
        overrides: Values from CLI flags; None entries are ignored
        environ: Environment mapping (default: os.environ)
        use_dotenv: Load .env into os.environ first

    Raises:
        ConfigError: On unknown keys or invalid values
    """
    if use_dotenv and environ is None:
        load_dotenv(ENV_PATH, override=False)

    known = {f.name for f in fields(TrackerConfig)}
    merged: Dict[str, Any] = {}

    for source_name, source in (
        ("file", load_yaml_config(config_path)),
        ("env", load_env_config(environ)),
        ("cli", overrides or {}),
    ):
        for key, value in source.items():
            if value is None:
                continue
            if key not in known:
                raise ConfigError(f"Unknown config key from {source_name}: {key}")
            merged[key] = _coerce(key, value)

    config = TrackerConfig(**merged)
    logger.info(f"Configuration: {config.to_dict()}")
    return config
