"""
Configuration loading for Canasta.

Settings live in ``config/config.json`` at the project root.  A different
file can be selected with the ``CANASTA_CONFIG`` environment variable.
Every key is optional; missing values fall back to the defaults below.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

CONFIG_ENV_VAR = "CANASTA_CONFIG"
CONFIG_DIRNAME = "config"
CONFIG_FILENAME = "config.json"


def _default_config_path() -> Path:
    # src/canasta/config.py -> project root
    return Path(__file__).resolve().parents[2] / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Read the raw configuration dictionary.

    An explicitly requested file (argument or environment variable) must
    exist.  The bundled default is allowed to be missing, in which case an
    empty dictionary is returned and every setting takes its default.
    """
    if path is None and os.environ.get(CONFIG_ENV_VAR):
        path = Path(os.environ[CONFIG_ENV_VAR])
    if path is None:
        path = _default_config_path()
        if not path.exists():
            return {}
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@dataclass
class Settings:
    database_url: str = "sqlite+aiosqlite:///canasta.db"
    database_echo: bool = False
    team_save_quiet_period: float = 1.0
    date_locale: str = "es-ES"
    session_cookie: str = "canasta_session"
    code_ttl_seconds: int = 300
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    @classmethod
    def from_config(cls, cfg: Dict[str, Any]) -> "Settings":
        db_cfg = cfg.get("database", {})
        team_cfg = cfg.get("team", {})
        games_cfg = cfg.get("games", {})
        auth_cfg = cfg.get("auth", {})
        log_cfg = cfg.get("logging", {})
        server_cfg = cfg.get("server", {})
        return cls(
            database_url=str(db_cfg.get("url", cls.database_url)),
            database_echo=bool(db_cfg.get("echo", cls.database_echo)),
            team_save_quiet_period=float(team_cfg.get("save_quiet_period", cls.team_save_quiet_period)),
            date_locale=str(games_cfg.get("date_locale", cls.date_locale)),
            session_cookie=str(auth_cfg.get("session_cookie", cls.session_cookie)),
            code_ttl_seconds=int(auth_cfg.get("code_ttl_seconds", cls.code_ttl_seconds)),
            log_level=str(log_cfg.get("level", cls.log_level)).upper(),
            host=str(server_cfg.get("host", cls.host)),
            port=int(server_cfg.get("port", cls.port)),
        )


def load_settings(path: Optional[Path] = None) -> Settings:
    """Load the config file and build a :class:`Settings` from it."""
    return Settings.from_config(load_config(path))
