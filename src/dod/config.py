# src/dod/config.py
"""
Settings resolution.

Sources, highest priority first:
1) explicit overrides passed by the caller
2) environment variables (.env is loaded by the entry points via python-dotenv)
3) .dodrc.json, searched from the start directory up to the filesystem root
4) defaults

Gateway credentials (API_KEY, BASE_URL) are read by dod.llm straight from the
environment and never stored here.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from dod.schema import TICKET_TYPES

logger = logging.getLogger("dod.config")

CONFIG_FILENAME = ".dodrc.json"
DEFAULT_MODEL = "azure-oai-gpt-4.1"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off", ""}


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class Settings:
    fixtures_dir: Path
    fixtures_strict: bool = False
    model: str = DEFAULT_MODEL
    default_ticket_type: Optional[str] = None
    log_level: str = "WARNING"
    log_file: Optional[Path] = None


def _parse_flag(value: Any, source: str) -> bool:
    # JSON bools pass through; strings follow the same words as the env vars.
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUTHY:
            return True
        if word in _FALSY:
            return False
    raise ConfigError(f"{source} must be a boolean (got {value!r})")


def _ticket_type(value: Any) -> str:
    return str(value).strip().lower()


def find_config_file(start_dir: Path) -> Optional[Path]:
    current = start_dir.resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
        if current.parent == current:
            return None
        current = current.parent


def load_config_file(start_dir: Path) -> Dict[str, Any]:
    """
    Read the nearest .dodrc.json into a flat settings dict.
    Relative paths inside the file are resolved against the file's directory.
    """
    path = find_config_file(start_dir)
    if path is None:
        return {}

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Failed to parse config file at {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file at {path} must contain a JSON object.")

    logger.debug("config_file path=%s", path)

    out: Dict[str, Any] = {}
    if raw.get("fixtures_dir"):
        out["fixtures_dir"] = (path.parent / str(raw["fixtures_dir"])).resolve()
    if "fixtures_strict" in raw:
        out["fixtures_strict"] = _parse_flag(raw["fixtures_strict"], f"fixtures_strict in {path}")
    if raw.get("model"):
        out["model"] = str(raw["model"])
    defaults = raw.get("defaults") or {}
    if isinstance(defaults, dict) and defaults.get("ticketType"):
        out["default_ticket_type"] = _ticket_type(defaults["ticketType"])
    if raw.get("log_level"):
        out["log_level"] = str(raw["log_level"])
    if raw.get("log_file"):
        out["log_file"] = (path.parent / str(raw["log_file"])).resolve()
    return out


def load_env_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    out: Dict[str, Any] = {}
    if env.get("DOD_FIXTURES_DIR"):
        out["fixtures_dir"] = Path(env["DOD_FIXTURES_DIR"]).expanduser()
    if env.get("DOD_FIXTURES_STRICT"):
        out["fixtures_strict"] = _parse_flag(env["DOD_FIXTURES_STRICT"], "DOD_FIXTURES_STRICT")
    if env.get("DOD_MODEL"):
        out["model"] = env["DOD_MODEL"]
    if env.get("DOD_DEFAULT_TICKET_TYPE"):
        out["default_ticket_type"] = _ticket_type(env["DOD_DEFAULT_TICKET_TYPE"])
    if env.get("LOG_LEVEL"):
        out["log_level"] = env["LOG_LEVEL"]
    if env.get("LOG_FILE"):
        out["log_file"] = Path(env["LOG_FILE"]).expanduser()
    return out


def load_settings(
    start_dir: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> Settings:
    start = Path.cwd() if start_dir is None else start_dir
    settings = Settings(fixtures_dir=start / "fixtures")

    settings = replace(settings, **load_config_file(start))
    settings = replace(settings, **load_env_config(environ))
    settings = replace(settings, **{k: v for k, v in overrides.items() if v is not None})

    if settings.default_ticket_type is not None and settings.default_ticket_type not in TICKET_TYPES:
        raise ConfigError(
            f"default ticket type must be one of: {', '.join(TICKET_TYPES)} "
            f"(got {settings.default_ticket_type!r})"
        )
    return settings
