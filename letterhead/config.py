import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from letterhead.errors import ConfigError
from letterhead.formatting import FormattingSpec
from letterhead.log import get_logger
from letterhead.pipeline.merge import PAGE_SIZE

logger = get_logger("letterhead.config")

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config", "formatting.json")


@dataclass(frozen=True)
class Settings:
    formatting: FormattingSpec = field(default_factory=FormattingSpec)
    page_size: int = PAGE_SIZE
    log_level: str = "INFO"


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as cfg_file:
            data = json.load(cfg_file) or {}
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Config file is not valid JSON: {path}: {exc}") from exc
    except OSError as exc:
        raise ConfigError(f"Config file could not be read: {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file must contain a JSON object: {path}")
    return data


def load_settings(path: Optional[str] = None) -> Settings:
    """Load settings from config/formatting.json (or ``path``).

    A missing file yields defaults; anything unreadable or invalid raises
    ConfigError.

    Doxygen:
    - @param path: Optional explicit config path.
    - @return: Settings with formatting spec, page size and log level.
    - @throws ConfigError: If the file is malformed or values are invalid.
    """
    cfg_path = path or CONFIG_PATH
    if not os.path.exists(cfg_path):
        if path:
            raise ConfigError(f"Config file not found: {cfg_path}")
        logger.warning("Config not found at %s, using default formatting", cfg_path)
        return Settings()

    data = _load_json(cfg_path)
    try:
        formatting = FormattingSpec.from_dict(data.get("formatting") or {})
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid formatting in {cfg_path}: {exc}") from exc

    page_size = data.get("page_size", PAGE_SIZE)
    if not isinstance(page_size, int) or isinstance(page_size, bool) or page_size < 1:
        raise ConfigError(f"'page_size' must be a positive integer in {cfg_path}")

    log_level = str(data.get("log_level", "INFO")).upper()
    return Settings(formatting=formatting, page_size=page_size, log_level=log_level)
