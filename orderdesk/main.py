from __future__ import annotations

import logging
import os
import time
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest

from orderdesk.api import analysis_routes, order_routes
from orderdesk.core.config import Settings, settings
from orderdesk.core.database import Database
from orderdesk.core.log import access_log_middleware, setup_logging

# --- Logging ---
setup_logging()
logger = logging.getLogger(__name__)

# --- Prometheus ---
REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request latency", ["method", "path"]
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Startup ---
    database: Database = app.state.database
    try:
        database.ping()
        logger.info("database connection OK")
        database.init_db()
    except Exception:
        logger.exception("database connectivity check failed")

    yield  # Application runs here

    # --- Shutdown ---
    database.dispose()
    logger.info("database engine disposed")


async def metrics_middleware(request: Request, call_next):
    start = time.time()
    response: Response = await call_next(request)
    duration = time.time() - start

    # Route template (/api/orders/{order_id}) when a route matched
    route = request.scope.get("route")
    path = getattr(route, "path", request.url.path)

    REQUEST_COUNT.labels(request.method, path, str(response.status_code)).inc()
    REQUEST_LATENCY.labels(request.method, path).observe(duration)
    return response


def _split(value: str) -> list:
    return ["*"] if value == "*" else [v.strip() for v in value.split(",") if v.strip()]


def create_app(
    database: Optional[Database] = None,
    app_settings: Optional[Settings] = None,
) -> FastAPI:
    """Builds the application around an explicitly owned storage handle."""
    cfg = app_settings or settings

    app = FastAPI(
        title=cfg.APP_TITLE,
        description=cfg.APP_DESCRIPTION,
        version=cfg.APP_VERSION,
        lifespan=lifespan,
        root_path=os.getenv("ROOT_PATH", ""),
        docs_url="/docs" if cfg.ENV != "prod" else None,
        redoc_url="/redoc" if cfg.ENV != "prod" else None,
        openapi_url="/openapi.json" if cfg.ENV != "prod" else None,
    )
    app.state.settings = cfg
    app.state.database = database or Database(str(cfg.DATABASE_URL), echo=cfg.DB_ECHO)

    # --- Middlewares ---
    app.middleware("http")(access_log_middleware)
    app.middleware("http")(metrics_middleware)

    # --- CORS ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.CORS_ALLOW_ORIGINS,
        allow_credentials=cfg.CORS_ALLOW_CREDENTIALS,
        allow_methods=_split(cfg.CORS_ALLOW_METHODS),
        allow_headers=_split(cfg.CORS_ALLOW_HEADERS),
    )

    # --- Tech endpoints ---
    @app.get("/metrics", include_in_schema=False)
    def metrics():
        return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get("/health", tags=["health"])
    def health():
        return {"status": "ok"}

    # --- Routes ---
    app.include_router(order_routes.router)
    app.include_router(analysis_routes.router)
    return app


app = create_app()


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run("orderdesk.main:app", host=settings.HOST, port=settings.PORT)
