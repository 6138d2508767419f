from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class AppConfig(BaseModel):
    """Persisted configuration record, stored beside the application."""

    model_config = ConfigDict(extra="ignore")

    storage_path: str = ""
    theme: str | None = None


class StoragePathRequest(BaseModel):
    path: str = ""


class StoragePathResponse(BaseModel):
    path: str


class ThemeRequest(BaseModel):
    theme: str


class ThemeResponse(BaseModel):
    theme: str


class HasTodosResponse(BaseModel):
    list_id: str
    has_todos: bool
