import json
import sys

import pytest

from taskdesk.common.exceptions import ConfigFormatError, StorageIOError
from taskdesk.common.schemas import AppConfig
from taskdesk.config import Settings
from taskdesk.core.config_store import ConfigStore, app_dir


def test_load_creates_default_record(config_store):
    assert not config_store.config_path.exists()

    config = config_store.load()

    assert config == AppConfig(storage_path="", theme=None)
    assert json.loads(config_store.config_path.read_text(encoding="utf-8")) == {
        "storage_path": "",
        "theme": None,
    }


def test_load_reads_existing_record(config_store):
    config_store.config_path.write_text(
        json.dumps({"storage_path": "/srv/todos", "theme": "dark"}), encoding="utf-8"
    )

    config = config_store.load()

    assert config.storage_path == "/srv/todos"
    assert config.theme == "dark"


@pytest.mark.parametrize("payload", ["{not json", "[1, 2]", '{"storage_path": 5}'])
def test_malformed_record_raises_format_error(config_store, payload):
    config_store.config_path.write_text(payload, encoding="utf-8")

    with pytest.raises(ConfigFormatError):
        config_store.load()


def test_unreadable_record_raises_io_error(config_store):
    config_store.config_path.mkdir()

    with pytest.raises(StorageIOError):
        config_store.load()


def test_save_fails_when_app_dir_is_missing(tmp_path):
    store = ConfigStore(Settings(app_dir=str(tmp_path / "missing")))

    with pytest.raises(StorageIOError):
        store.save(AppConfig())


def test_theme_defaults_to_light(config_store):
    assert config_store.get_theme() == "light"


def test_set_theme_persists_across_reload(settings, config_store):
    config_store.set_theme("dark")

    assert config_store.get_theme() == "dark"
    assert ConfigStore(settings).load().theme == "dark"


def test_set_theme_rewrites_whole_record(config_store):
    config_store.save(AppConfig(storage_path="/srv/todos"))

    config_store.set_theme("dark")

    saved = json.loads(config_store.config_path.read_text(encoding="utf-8"))
    assert saved == {"storage_path": "/srv/todos", "theme": "dark"}


def test_frozen_build_uses_executable_directory(monkeypatch, tmp_path):
    executable = tmp_path / "bin" / "taskdesk"
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", str(executable))

    assert app_dir(Settings()) == executable.parent.resolve()


def test_frozen_build_without_executable_raises(monkeypatch):
    monkeypatch.setattr(sys, "frozen", True, raising=False)
    monkeypatch.setattr(sys, "executable", "")

    with pytest.raises(StorageIOError, match="executable directory"):
        app_dir(Settings())


def test_empty_theme_is_kept(config_store):
    config_store.set_theme("")

    assert config_store.get_theme() == ""


def test_checkout_keeps_config_at_project_root(monkeypatch, tmp_path):
    checkout = tmp_path / "repo"
    checkout.mkdir()
    (checkout / "pyproject.toml").write_text("", encoding="utf-8")
    monkeypatch.setattr("taskdesk.core.config_store.resolve_path", lambda path: checkout)

    assert app_dir(Settings()) == checkout


def test_installed_package_uses_user_config_dir(monkeypatch, tmp_path):
    config_dir = tmp_path / "config" / "taskdesk"
    monkeypatch.setattr("taskdesk.core.config_store.resolve_path", lambda path: tmp_path / "lib")
    monkeypatch.setattr(
        "taskdesk.core.config_store.user_config_dir", lambda *args, **kwargs: str(config_dir)
    )

    assert app_dir(Settings()) == config_dir
    assert config_dir.is_dir()
