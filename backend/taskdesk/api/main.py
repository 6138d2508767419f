from __future__ import annotations

import time
import uuid

from fastapi import Depends, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from taskdesk.common.exceptions import DocumentParseError, ErrorHandler, TaskDeskError
from taskdesk.common.logger import get_logger, request_id_ctx, source_ctx
from taskdesk.common.schemas import (
    HasTodosResponse,
    StoragePathRequest,
    StoragePathResponse,
    ThemeRequest,
    ThemeResponse,
)
from taskdesk.config import Settings, get_settings
from taskdesk.core.collections import Collection, CollectionStore
from taskdesk.core.config_store import ConfigStore

logger = get_logger("taskdesk.api")


def get_store(request: Request) -> CollectionStore:
    return request.app.state.collection_store


async def _raw_body(request: Request) -> str:
    body = await request.body()
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DocumentParseError(f"document is not valid UTF-8: {e}", original_error=e) from e


def _document(content: str) -> Response:
    return Response(content=content, media_type="application/json")


def create_app(
    collection_store: CollectionStore | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    if collection_store is None:
        collection_store = CollectionStore.from_config(ConfigStore(settings))

    app = FastAPI(title="TaskDesk Storage")
    app.state.collection_store = collection_store

    @app.middleware("http")
    async def log_middleware(request: Request, call_next):
        request_id_ctx.set(str(uuid.uuid4()))
        token = source_ctx.set({
            "module": "taskdesk.api",
            "endpoint": request.url.path,
            "method": request.method
        })

        start_time = time.time()
        logger.info(f"Incoming Request: {request.method} {request.url.path}")
        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"Outgoing Response: {response.status_code} "
                f"Duration={process_time:.2f}ms"
            )
            return response
        finally:
            source_ctx.reset(token)

    @app.exception_handler(TaskDeskError)
    async def storage_error_handler(request: Request, exc: TaskDeskError):
        return JSONResponse(
            status_code=ErrorHandler.status_code(exc),
            content=ErrorHandler.format_error(exc),
        )

    @app.exception_handler(OSError)
    async def os_error_handler(request: Request, exc: OSError):
        return JSONResponse(status_code=500, content=ErrorHandler.format_error(exc))

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    def health():
        logger.debug("health check")
        return {"status": "ok"}

    @app.put("/api/storage-path", status_code=204)
    def set_storage_path(req: StoragePathRequest, store: CollectionStore = Depends(get_store)):
        store.set_storage_path(req.path)
        return Response(status_code=204)

    @app.get("/api/storage-path", response_model=StoragePathResponse)
    def load_storage_path(store: CollectionStore = Depends(get_store)):
        return StoragePathResponse(path=store.get_storage_path())

    @app.get("/api/todos")
    def load_todos(store: CollectionStore = Depends(get_store)):
        return _document(store.load(Collection.TODOS))

    @app.put("/api/todos", status_code=204)
    async def save_todos(request: Request, store: CollectionStore = Depends(get_store)):
        document = await _raw_body(request)
        await run_in_threadpool(store.save, Collection.TODOS, document)
        return Response(status_code=204)

    @app.get("/api/lists")
    def load_lists(store: CollectionStore = Depends(get_store)):
        return _document(store.load(Collection.LISTS))

    @app.put("/api/lists", status_code=204)
    async def save_lists(request: Request, store: CollectionStore = Depends(get_store)):
        document = await _raw_body(request)
        await run_in_threadpool(store.save, Collection.LISTS, document)
        return Response(status_code=204)

    @app.get("/api/lists/{list_id}/has-todos", response_model=HasTodosResponse)
    def list_has_todos(list_id: str, store: CollectionStore = Depends(get_store)):
        return HasTodosResponse(list_id=list_id, has_todos=store.list_has_todos(list_id))

    @app.get("/api/theme", response_model=ThemeResponse)
    def get_theme(store: CollectionStore = Depends(get_store)):
        return ThemeResponse(theme=store.config_store.get_theme())

    @app.put("/api/theme", status_code=204)
    def set_theme(req: ThemeRequest, store: CollectionStore = Depends(get_store)):
        store.config_store.set_theme(req.theme)
        return Response(status_code=204)

    return app
