"""FastAPI application factory"""

from fastapi import FastAPI
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from inala_ledger.api.middleware import RequestIDMiddleware, MetricsMiddleware
from inala_ledger.api.v1 import creditors, customers, payments, reports, sales, sync
from inala_ledger.infrastructure.observability.logging import setup_logging
from inala_ledger.config import settings

# Setup structured logging
setup_logging(settings.log_level)


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Inala Ledger",
        description="Credit ledger, payment capture and period reports for Inala Holdings",
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
    app.include_router(creditors.router, prefix="/v1", tags=["creditors"])
    app.include_router(payments.router, prefix="/v1", tags=["payments"])
    app.include_router(sales.router, prefix="/v1", tags=["sales"])
    app.include_router(customers.router, prefix="/v1", tags=["customers"])
    app.include_router(reports.router, prefix="/v1", tags=["reports"])
    app.include_router(sync.router, prefix="/v1", tags=["sync"])

    return app


app = create_app()
