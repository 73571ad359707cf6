"""Client configuration and application paths."""
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

APP_DIR = Path.home() / ".local_share" / "sunday"
CONFIG_PATH = APP_DIR / "config.json"
PREFERENCES_PATH = APP_DIR / "preferences.json"
LOG_PATH = APP_DIR / "sunday.log"

DEFAULT_BASE_URL = "https://tools.a-1chimney.com"
API_VERSION = "1.0"
CLIENT_PLATFORM = "desktop"


class ConfigError(ValueError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ClientConfig:
    base_url: str = DEFAULT_BASE_URL
    username: str = ""
    role: str = ""
    timeout: float = 15.0

    @property
    def api_base(self) -> str:
        return f"{self.base_url.rstrip('/')}/api"

    @property
    def sunday_base(self) -> str:
        return f"{self.api_base}/sunday"

    @property
    def user_management_url(self) -> str:
        return f"{self.api_base}/user_management.php"

    def default_headers(self) -> Dict[str, str]:
        return {
            "X-API-Version": API_VERSION,
            "Accept-Version": API_VERSION,
            "X-Client-Platform": CLIENT_PLATFORM,
        }


def load_config(
    path: Path = CONFIG_PATH, environ: Optional[Dict[str, str]] = None
) -> ClientConfig:
    """Read the config file (if any) and apply environment overrides."""

    environ = os.environ if environ is None else environ
    data: Dict = {}
    if path.exists():
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise ConfigError(f"Malformed config file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a JSON object")
    try:
        timeout = float(data.get("timeout", 15.0))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Config file {path}: timeout must be a number") from exc
    config = ClientConfig(
        base_url=str(data.get("base_url") or DEFAULT_BASE_URL),
        username=str(data.get("username", "")),
        role=str(data.get("role", "")),
        timeout=timeout,
    )
    if environ.get("SUNDAY_BASE_URL"):
        config.base_url = environ["SUNDAY_BASE_URL"]
    if environ.get("SUNDAY_USERNAME"):
        config.username = environ["SUNDAY_USERNAME"]
    return config
