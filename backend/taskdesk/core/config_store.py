from __future__ import annotations

import sys
from pathlib import Path

from platformdirs import user_config_dir
from pydantic import ValidationError

from taskdesk.common.exceptions import ConfigFormatError, StorageIOError
from taskdesk.common.logger import get_logger
from taskdesk.common.schemas import AppConfig
from taskdesk.config import Settings, get_settings, resolve_path

logger = get_logger("taskdesk.core.config_store")

DEFAULT_THEME = "light"


def app_dir(settings: Settings) -> Path:
    """Directory the configuration record lives in.

    An explicit ``app_dir`` setting wins. A bundled build keeps its config
    beside the executable. A source checkout keeps it at the project root,
    an installed package in the per-user config directory.
    """
    if settings.app_dir:
        return resolve_path(settings.app_dir)
    if getattr(sys, "frozen", False):
        if not sys.executable:
            raise StorageIOError("Failed to get executable directory")
        return Path(sys.executable).resolve().parent
    checkout = resolve_path(".")
    if (checkout / "pyproject.toml").exists():
        return checkout
    path = Path(user_config_dir(settings.app_name, appauthor=False))
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageIOError(str(e), original_error=e) from e
    return path


class ConfigStore:
    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def config_path(self) -> Path:
        return app_dir(self.settings) / self.settings.config_filename

    def load(self) -> AppConfig:
        path = self.config_path
        if not path.exists():
            config = AppConfig()
            self.save(config)
            logger.info(f"Created default configuration at {path}")
            return config

        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise StorageIOError(str(e), original_error=e) from e

        try:
            return AppConfig.model_validate_json(raw)
        except ValidationError as e:
            raise ConfigFormatError(str(e), original_error=e) from e

    def save(self, config: AppConfig) -> None:
        path = self.config_path
        # Whole record in one write, never a partial update
        payload = config.model_dump_json()
        try:
            path.write_text(payload, encoding="utf-8")
        except OSError as e:
            raise StorageIOError(str(e), original_error=e) from e
        logger.debug(f"Saved configuration to {path}")

    def get_theme(self) -> str:
        theme = self.load().theme
        return theme if theme is not None else DEFAULT_THEME

    def set_theme(self, theme: str) -> None:
        config = self.load()
        config.theme = theme
        self.save(config)
        logger.info(f"Theme set to {theme}")
