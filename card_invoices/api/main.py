"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from card_invoices.api.middleware import RequestIDMiddleware, MetricsMiddleware
from card_invoices.api.v1 import cards, categories, invoices, purchases
from card_invoices.infrastructure.observability.logging import setup_logging
from card_invoices.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Card Invoices",
        description="Credit card purchase tracker with installment billing by invoice month",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters: last added = first executed)
    app.add_middleware(MetricsMiddleware)
    app.add_middleware(RequestIDMiddleware)

    # Health check endpoint
    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": settings.service_name}

    # Prometheus metrics endpoint
    @app.get("/metrics")
    def metrics():
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # Register API routers
    app.include_router(cards.router, prefix="/api", tags=["cards"])
    app.include_router(purchases.router, prefix="/api", tags=["purchases"])
    app.include_router(invoices.router, prefix="/api", tags=["invoices"])
    app.include_router(categories.router, prefix="/api", tags=["categories"])

    return app


app = create_app()
