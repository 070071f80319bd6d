"""Configuration management for Clear."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

CLEAR_HOME = Path(os.environ.get("CLEAR_HOME", Path.home() / "clear"))
CONFIG_FILE = CLEAR_HOME / "config" / "clear.conf"
DATA_DIR = CLEAR_HOME / "data"

EXTRACTORS = ("claude", "gemini", "lines")


@dataclass
class Config:
    """Clear configuration."""

    database_path: Path = field(default_factory=lambda: DATA_DIR / "clear.sqlite3")
    timezone: str = "UTC"
    extractor: str = "claude"
    claude_timeout: int = 120
    gemini_api_key: str = ""
    gemini_model: str = "gemini-1.5-flash"
    intake_interval_minutes: int = 10
    focus_time: str = "00:00"


def _strip_value(value: str) -> str:
    """Remove quotes, or an inline comment from an unquoted value."""
    # Handle quoted values with inline comments: "value" # comment
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        return int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default


def load_config(path: Path | None = None) -> Config:
    """Load configuration from clear.conf file."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _strip_value(value.strip())

        match key:
            case "database_path":
                config.database_path = Path(value).expanduser()
            case "timezone":
                config.timezone = value
            case "extractor":
                if value.lower() in EXTRACTORS:
                    config.extractor = value.lower()
                else:
                    logger.warning(f"Unknown EXTRACTOR {value!r}, using {config.extractor}")
            case "claude_timeout":
                config.claude_timeout = _parse_int(key, value, config.claude_timeout)
            case "gemini_api_key":
                config.gemini_api_key = value
            case "gemini_model":
                config.gemini_model = value
            case "intake_interval_minutes":
                config.intake_interval_minutes = _parse_int(key, value, config.intake_interval_minutes)
            case "focus_time":
                config.focus_time = value

    return config
