from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONF_ENV = "VCARD_PARSER_CONF"

DEFAULT_CONF = """# vcard-parser local config (TOML)
collapse = false
log_level = "WARNING"
"""


@dataclass
class Settings:
    collapse: bool = False
    log_level: str = "WARNING"


def load_settings(conf_path: Path | None = None) -> Settings:
    """Read settings from a TOML file; missing or malformed files give defaults."""
    if conf_path is None:
        env = os.environ.get(CONF_ENV)
        conf_path = Path(env) if env else None

    settings = Settings()
    if conf_path is None or not conf_path.is_file():
        return settings

    try:
        data = tomllib.loads(conf_path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as exc:
        logger.warning("Ignoring config %s: %s", conf_path, exc)
        return settings

    settings.collapse = bool(data.get("collapse", settings.collapse))
    settings.log_level = str(data.get("log_level", settings.log_level)).upper()
    return settings


def write_default_config(conf_path: Path) -> bool:
    """Create a config file with defaults unless one exists. Returns True if written."""
    conf_path = Path(conf_path)
    if conf_path.exists():
        return False
    conf_path.parent.mkdir(parents=True, exist_ok=True)
    conf_path.write_text(DEFAULT_CONF, encoding="utf-8")
    return True
