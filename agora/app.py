from __future__ import annotations

from contextlib import asynccontextmanager
import logging
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from agora.core.config import Settings, get_settings
from agora.core.errors import AgoraError
from agora.core.log import configure_logging
from agora.core.utils import now_iso
from agora.domain.seeds import VERSION, seed_document
from agora.repositories.json_storage import JsonStorage
from agora.routers import discussions as discussions_router
from agora.routers import insights as insights_router
from agora.routers import members as members_router
from agora.routers import posts as posts_router
from agora.routers import projects as projects_router
from agora.services.analytics_service import AnalyticsService
from agora.services.discussion_service import DiscussionService
from agora.services.member_service import MemberService
from agora.services.post_service import PostService
from agora.services.project_service import ProjectService
from agora.services.session_service import SessionService

log = logging.getLogger("agora.http")

BLOG_ENDPOINTS = ["/api/posts", "/api/stats"]
RESEARCH_ENDPOINTS = [
    "/api/projects",
    "/api/discussions",
    "/api/analytics",
    "/api/search",
    "/api/login",
    "/api/user",
    "/api/members",
]


class RequestLogMiddleware(BaseHTTPMiddleware):
    """One log line per request with status and duration."""

    async def dispatch(self, request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - started) * 1000
        log.info("%s %s -> %s (%.1f ms)", request.method, request.url.path, response.status_code, elapsed)
        return response


def _error_response(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def _install_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AgoraError)
    async def agora_error(request: Request, exc: AgoraError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return _error_response(exc.message, exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_error(request: Request, exc: RequestValidationError):
        return _error_response(_validation_message(exc), 400)

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        if exc.status_code == 404 and message == "Not Found":
            message = "Endpoint not found"
        return _error_response(message, exc.status_code)

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error_response(str(exc) or exc.__class__.__name__, 500)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the API for ``settings`` (environment by default)."""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    storage = JsonStorage(
        settings.data_file,
        seed=lambda: seed_document(settings.preset),
        atomic_writes=settings.atomic_writes,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Only seed here; a malformed file fails its requests, not startup.
        if not storage.exists():
            storage.reset()
        log.info("Agora (%s preset) using %s", settings.preset, storage.path)
        yield

    app = FastAPI(title="Agora API", version=VERSION, lifespan=lifespan)

    sessions = SessionService(storage, settings)
    app.state.settings = settings
    app.state.storage = storage
    app.state.session_service = sessions
    app.state.post_service = PostService(storage)
    app.state.project_service = ProjectService(storage)
    app.state.discussion_service = DiscussionService(storage)
    app.state.member_service = MemberService(storage, sessions)
    app.state.analytics_service = AnalyticsService(storage)

    if settings.cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=sorted(settings.cors_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
            allow_headers=["*"],
        )
    app.add_middleware(RequestLogMiddleware)
    _install_error_handlers(app)

    endpoints = ["/health"]
    if settings.blog_enabled:
        app.include_router(posts_router.router)
        endpoints += BLOG_ENDPOINTS
    if settings.research_enabled:
        app.include_router(projects_router.router)
        app.include_router(discussions_router.router)
        app.include_router(members_router.router)
        app.include_router(insights_router.router)
        endpoints += RESEARCH_ENDPOINTS
    if settings.debug_enabled:
        endpoints.append("/api/debug")

        @app.get("/api/debug", tags=["meta"])
        def debug():
            return {"success": True, **app.state.analytics_service.debug_info()}

    @app.get("/health", tags=["meta"])
    def health():
        return {
            "status": "healthy",
            "timestamp": now_iso(),
            "version": VERSION,
            "preset": settings.preset,
            "endpoints": endpoints,
        }

    return app


app = create_app()
