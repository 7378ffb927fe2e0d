from __future__ import annotations

import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from miniature_tracker.core.config import Settings
from miniature_tracker.core.db import create_db_engine, db_health, init_schema
from miniature_tracker.core.errors import AppError, DatabaseError, InternalServerError, error_envelope
from miniature_tracker.core.observability import emit, setup_logging
from miniature_tracker.core.storage.registry import get_storage
from miniature_tracker.modules.miniatures.router import router as miniatures_router
from miniature_tracker.modules.photos.router import router as photos_router
from miniature_tracker.modules.projects.router import router as projects_router
from miniature_tracker.modules.recipe_links.router import router as recipe_links_router
from miniature_tracker.modules.recipes.router import router as recipes_router

SERVICE_NAME = "miniature-painting-tracker"


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        engine = create_db_engine(settings)
        if settings.auto_create_schema:
            init_schema(engine)
        app.state.engine = engine
        app.state.storage = get_storage(settings)
        try:
            yield
        finally:
            engine.dispose()

    app = FastAPI(title="Miniature Painting Tracker API", version=settings.app_version, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-Id"],
    )

    # X-Request-Id in/out: missing -> generated, always echoed back
    @app.middleware("http")
    async def _request_id_mw(request: Request, call_next):
        rid = request.headers.get("X-Request-Id") or uuid.uuid4().hex.upper()
        request.state.request_id = rid
        emit("info", "http.request.start", f"{request.method} {request.url.path}", rid, __name__)
        try:
            resp = await call_next(request)
        except Exception as e:
            emit("error", "http.request.exception", str(e), rid, __name__)
            raise
        resp.headers["X-Request-Id"] = rid
        emit(
            "info",
            "http.request.end",
            f"{request.method} {request.url.path} -> {getattr(resp, 'status_code', None)}",
            rid,
            __name__,
        )
        return resp

    @app.exception_handler(AppError)
    async def _app_exc_handler(request: Request, exc: AppError):
        rid = getattr(request.state, "request_id", None)
        return error_envelope(exc.error_type, exc.message, exc.status_code, exc.details, rid)

    @app.exception_handler(RequestValidationError)
    async def _validation_exc_handler(request: Request, exc: RequestValidationError):
        rid = getattr(request.state, "request_id", None)
        return error_envelope("validation_error", "Request validation failed", 400, jsonable_encoder(exc.errors()), rid)

    @app.exception_handler(StarletteHTTPException)
    async def _http_exc_handler(request: Request, exc: StarletteHTTPException):
        rid = getattr(request.state, "request_id", None)
        error_type = "not_found" if exc.status_code == 404 else "http_error"
        return error_envelope(error_type, str(exc.detail), exc.status_code, {"status_code": exc.status_code}, rid)

    @app.exception_handler(SQLAlchemyError)
    async def _db_exc_handler(request: Request, exc: SQLAlchemyError):
        rid = getattr(request.state, "request_id", None)
        emit("error", "error.database", str(exc), rid, __name__, type=type(exc).__name__)
        err = DatabaseError()
        return error_envelope(err.error_type, err.message, err.status_code, None, rid)

    @app.exception_handler(Exception)
    async def _unhandled_exc_handler(request: Request, exc: Exception):
        rid = getattr(request.state, "request_id", None)
        emit("error", "error.internal", str(exc), rid, __name__, type=type(exc).__name__)
        err = InternalServerError()
        return error_envelope(err.error_type, err.message, err.status_code, {"type": type(exc).__name__}, rid)

    @app.get("/")
    @app.get("/health")
    def health(request: Request):
        db = db_health(request.app.state.engine)
        if db["status"] != "ok":
            emit("error", "health.database", db.get("error", ""), getattr(request.state, "request_id", None), __name__)
            return JSONResponse(
                status_code=503,
                content={"status": "unhealthy", "service": SERVICE_NAME, "database": "disconnected"},
            )
        return {"status": "healthy", "service": SERVICE_NAME, "database": "connected"}

    app.include_router(projects_router)
    app.include_router(miniatures_router)
    app.include_router(photos_router)
    app.include_router(recipes_router)
    app.include_router(recipe_links_router)

    if settings.storage_type == "local":
        app.mount("/uploads", StaticFiles(directory=settings.local_storage_path, check_dir=False), name="uploads")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=app.state.settings.port)
