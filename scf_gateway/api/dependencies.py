"""Dependency injection for FastAPI endpoints"""

from fastapi import Request

from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.infrastructure.clients.settlement import SettlementClient


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def get_service(request: Request) -> SupplyChainFinancingService:
    """The single service instance built by create_app"""
    return request.app.state.service


def get_settlement_client() -> SettlementClient:
    """Provide settlement webhook client instance"""
    return SettlementClient()
