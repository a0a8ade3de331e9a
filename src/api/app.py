# This file builds the FastAPI application and registers all API routers.
# It exists so startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, and optional request logging for operations visibility.
# On startup the blog tables are created when schema auto-creation is enabled.

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint

from src.api.api_config import get_api_config
from src.api.dependencies import get_blog_store, get_database_client
from src.api.error_handlers import register_error_handlers
from src.api.routers.authors import router as authors_router
from src.api.routers.health import router as health_router
from src.api.routers.posts import router as posts_router
from src.blog.errors import StoreError
from src.common.logging import configure_logging

LOGGER = logging.getLogger("api.requests")

API_HTTP_REQUESTS_TOTAL = Counter(
    "api_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "api_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "api_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method"],
)
UNMATCHED_ROUTE_LABEL = "unmatched"


def route_label(request: Request) -> str:
    """Return the matched route template so resource ids never become label values."""

    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE_LABEL


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        db = get_database_client()
        app.state.db_connected_at_startup = db.can_connect()
        if config.auto_create_schema and app.state.db_connected_at_startup:
            try:
                get_blog_store().create_schema()
            except StoreError:
                LOGGER.exception("Blog schema creation failed at startup")
        yield

    app = FastAPI(
        lifespan=lifespan,
        title=config.api_name,
        description=(
            "Authors and blog posts with resolved author names, allow-listed partial updates, "
            "unique user names, and cascading author deletion."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "authors", "description": "Authors and their cascading deletion."},
            {"name": "posts", "description": "Blog posts with resolved author names."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"

            if config.enable_request_logging:
                LOGGER.info(
                    "request_id=%s method=%s path=%s status=%s duration_ms=%.2f",
                    request_id,
                    method_label,
                    request.url.path,
                    status_code,
                    duration_ms,
                )

            return response
        finally:
            duration_s = time.perf_counter() - started
            path_label = route_label(request)
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(authors_router, prefix=config.api_version_path)
    app.include_router(posts_router, prefix=config.api_version_path)

    return app


app = create_app()
