from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    env: str = "dev"
    host: str = "127.0.0.1"
    port: int = 8765
    log_level: str = "info"
    debug: bool = False
    log_dir: str = "./logs"
    app_name: str = "taskdesk"
    app_dir: str | None = None
    data_dir: str | None = None
    config_filename: str = "config.json"
    strict_path_switch: bool = False
    cors_allow_origins: list[str] = ["http://localhost:1420"]


def _flag(value: str) -> bool:
    return value in ("1", "true", "True")


@lru_cache
def get_settings() -> Settings:
    load_dotenv()
    return Settings(
        env=os.getenv("TASKDESK_ENV", "dev"),
        host=os.getenv("TASKDESK_HOST", "127.0.0.1"),
        port=int(os.getenv("TASKDESK_PORT", "8765")),
        log_level=os.getenv("TASKDESK_LOG_LEVEL", "info"),
        debug=_flag(os.getenv("TASKDESK_DEBUG", "0")),
        log_dir=os.getenv("TASKDESK_LOG_DIR", "./logs"),
        app_name=os.getenv("TASKDESK_APP_NAME", "taskdesk"),
        app_dir=os.getenv("TASKDESK_APP_DIR") or None,
        data_dir=os.getenv("TASKDESK_DATA_DIR") or None,
        config_filename=os.getenv("TASKDESK_CONFIG_FILE", "config.json"),
        strict_path_switch=_flag(os.getenv("TASKDESK_STRICT_PATH_SWITCH", "0")),
        cors_allow_origins=[
            origin.strip()
            for origin in os.getenv(
                "TASKDESK_CORS_ORIGINS", "http://localhost:1420"
            ).split(",")
            if origin.strip()
        ],
    )


def resolve_path(path: str) -> Path:
    base = Path(__file__).resolve().parents[2]
    return (base / path).resolve()
