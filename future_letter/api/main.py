"""FastAPI application factory"""

from typing import Optional
from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from future_letter.api.errors import register_exception_handlers
from future_letter.api.middleware import RequestIDMiddleware, MetricsMiddleware
from future_letter.api.v1 import letter
from future_letter.config import Settings, settings
from future_letter.infrastructure.observability.logging import setup_logging
from future_letter.infrastructure.stores.memory import InMemoryStore
from future_letter.infrastructure.stores.rate_limit import SlidingWindowRateLimiter
from future_letter.services.letter_composer import LetterComposer

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app_settings = app_settings or settings
    app = FastAPI(
        title="Future Letter",
        description="Letter from ten years ahead with a ten-year savings projection",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Process-local stores, shared by all requests of this app
    app.state.rate_limiter = SlidingWindowRateLimiter(
        limit=app_settings.rate_limit_requests,
        window_seconds=app_settings.rate_limit_window_seconds,
        store=InMemoryStore(
            ttl_seconds=app_settings.rate_limit_window_seconds,
            max_entries=app_settings.rate_limit_max_clients,
        ),
    )
    app.state.letter_composer = LetterComposer(
        cache=InMemoryStore(
            ttl_seconds=app_settings.polish_cache_ttl_seconds,
            max_entries=app_settings.polish_cache_max_entries,
        ),
        polish_timeout_seconds=app_settings.polish_timeout_seconds,
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    register_exception_handlers(app)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": app_settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(letter.router, prefix="/v1", tags=["letters"])

    return app


app = create_app()
