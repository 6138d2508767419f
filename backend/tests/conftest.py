import os
import tempfile

# Loggers are built at import time, keep their files out of the working tree
os.environ.setdefault("TASKDESK_LOG_DIR", tempfile.mkdtemp(prefix="taskdesk-logs-"))

import pytest

from taskdesk.config import Settings, get_settings
from taskdesk.core.collections import CollectionStore
from taskdesk.core.config_store import ConfigStore


@pytest.fixture
def settings(tmp_path):
    app_dir = tmp_path / "app"
    app_dir.mkdir()
    return Settings(
        app_dir=str(app_dir),
        data_dir=str(tmp_path / "data"),
        log_dir=str(tmp_path / "logs"),
    )


@pytest.fixture
def config_store(settings):
    return ConfigStore(settings)


@pytest.fixture
def store(config_store):
    return CollectionStore.from_config(config_store)


@pytest.fixture(autouse=True)
def _fresh_settings():
    yield
    get_settings.cache_clear()
