"""
Music Vote Manager - Main Application

Single-process FastAPI application that serves:
- HTML pages via Jinja2 templates
- Static files (CSS)
- Form handlers for adding, editing, deleting and voting on music
- Public JSON debug endpoints (health, data status, demo reset)
- Simple session-based authentication

All users and music live in process memory; restarting the server (or
hitting /reset-demo) brings back the demo data.
"""

import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from musicvote import store
from musicvote.auth import auth_required
from musicvote.config import (
    APP_ENV,
    APP_HOST,
    APP_NAME,
    APP_PORT,
    APP_VERSION,
    DEBUG,
    LOG_LEVEL,
    STATIC_DIR,
    TEMPLATES_DIR,
)
from musicvote.routes.api import router as api_router
from musicvote.routes.pages import render_page
from musicvote.routes.pages import router as pages_router

# ---------------------------------------------------------------------------
# Logging setup — stdout only
# ---------------------------------------------------------------------------
logger.remove()

logger.add(
    sys.stdout,
    level="DEBUG" if DEBUG else LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True,
)


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log the startup banner and the shutdown line."""
    logger.info("🚀 Starting {} v{}", APP_NAME, APP_VERSION)
    logger.info("📋 Environment: {} | Debug: {}", APP_ENV, DEBUG)
    logger.info("🌐 Access URL: http://{}:{}", APP_HOST, APP_PORT)
    logger.info(
        "👤 Demo accounts: {} (password: password123)",
        ", ".join(store.list_usernames()),
    )
    logger.info("🛠️  Debug routes: /health, /check-data, /reset-demo")
    logger.success("✅ Application ready — listening on {}:{}", APP_HOST, APP_PORT)

    yield

    logger.info("🛑 Shutting down {} …", APP_NAME)


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title=APP_NAME,
        description="Add, edit, delete and vote for music pieces, kept in memory.",
        version=APP_VERSION,
        lifespan=lifespan,
        docs_url="/docs" if DEBUG else None,
        redoc_url="/redoc" if DEBUG else None,
    )

    # ------------------------------------------------------------------
    # Jinja2 templates
    # ------------------------------------------------------------------
    templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
    app.state.templates = templates

    # ------------------------------------------------------------------
    # Static files
    # ------------------------------------------------------------------
    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")

    # ------------------------------------------------------------------
    # Authentication middleware
    # ------------------------------------------------------------------
    @app.middleware("http")
    async def auth_middleware(request: Request, call_next):
        """Redirect unauthenticated requests to the login page."""
        if auth_required(request):
            return RedirectResponse(url="/login", status_code=302)

        response = await call_next(request)
        return response

    # ------------------------------------------------------------------
    # Request logging middleware
    # ------------------------------------------------------------------
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every incoming HTTP request with timing information."""
        start = time.time()
        try:
            response = await call_next(request)
        except Exception as exc:
            duration = round(time.time() - start, 3)
            logger.debug(
                "❌ {method} {path} — unhandled error after {duration}s: {exc}",
                method=request.method,
                path=request.url.path,
                duration=duration,
                exc=exc,
            )
            raise

        duration = round(time.time() - start, 3)
        status = response.status_code

        if status >= 500:
            logger.error(
                "📤 {method} {path} — {status} [{duration}s]",
                method=request.method,
                path=request.url.path,
                status=status,
                duration=duration,
            )
        elif status >= 400:
            logger.warning(
                "📤 {method} {path} — {status} [{duration}s]",
                method=request.method,
                path=request.url.path,
                status=status,
                duration=duration,
            )
        elif not request.url.path.startswith("/static"):
            logger.info(
                "📤 {method} {path} — {status} [{duration}s]",
                method=request.method,
                path=request.url.path,
                status=status,
                duration=duration,
            )

        return response

    # ------------------------------------------------------------------
    # Error handlers
    # ------------------------------------------------------------------
    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        """Render the 404 page; any other HTTP error keeps the default JSON body."""
        if exc.status_code == 404:
            return render_page(request, "404.html", status_code=404, page_title="Not Found")
        return await http_exception_handler(request, exc)

    @app.exception_handler(Exception)
    async def server_error_handler(request: Request, exc: Exception):
        logger.opt(exception=exc).error(
            "❌ Unhandled error on {} {}", request.method, request.url.path
        )
        return PlainTextResponse("Something broke!", status_code=500)

    # ------------------------------------------------------------------
    # Register routers
    # ------------------------------------------------------------------
    app.include_router(api_router)  # debug JSON endpoints
    app.include_router(pages_router)  # HTML pages and form handlers

    return app


# ---------------------------------------------------------------------------
# Create the app instance (used by Uvicorn)
# ---------------------------------------------------------------------------
app = create_app()


# ---------------------------------------------------------------------------
# Direct execution (development)
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "musicvote.main:app",
        host=APP_HOST,
        port=APP_PORT,
        reload=DEBUG,
        log_level="debug" if DEBUG else "info",
    )
