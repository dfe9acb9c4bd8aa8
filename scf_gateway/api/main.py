"""FastAPI application factory"""

from typing import Optional

from fastapi import FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from scf_gateway.api.middleware import MetricsMiddleware, RequestIDMiddleware
from scf_gateway.api.v1 import inventory, invoices, participants, portfolio, purchase_orders
from scf_gateway.config import settings
from scf_gateway.domain.sample_data import load_sample_portfolio
from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.infrastructure.database.repositories import build_repositories
from scf_gateway.infrastructure.database.session import build_session_factory
from scf_gateway.infrastructure.observability.logging import setup_logging

# Setup structured logging
setup_logging(settings.log_level, settings.service_name)


def build_service() -> SupplyChainFinancingService:
    """Construct the financing service over the configured storage backend"""
    repositories = {}
    if settings.storage_backend == "database":
        repositories = build_repositories(build_session_factory(settings.database_url))

    service = SupplyChainFinancingService(
        default_currency=settings.default_currency,
        top_categories_limit=settings.top_categories_limit,
        **repositories,
    )
    if settings.seed_sample_data and not service.registry.list():
        load_sample_portfolio(service)
    return service


def create_app(service: Optional[SupplyChainFinancingService] = None) -> FastAPI:
    """Create and configure FastAPI application"""
    app = FastAPI(
        title="Supply Chain Financing Gateway",
        description="Invoice factoring, purchase order and inventory-backed financing service",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.service = service or build_service()

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
    app.include_router(participants.router, prefix="/v1", tags=["participants"])
    app.include_router(invoices.router, prefix="/v1", tags=["invoices"])
    app.include_router(purchase_orders.router, prefix="/v1", tags=["purchase-orders"])
    app.include_router(inventory.router, prefix="/v1", tags=["inventory-financing"])
    app.include_router(portfolio.router, prefix="/v1", tags=["portfolio"])

    return app


app = create_app()
