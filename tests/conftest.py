"""Pytest fixtures for testing"""

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from scf_gateway.api.main import create_app
from scf_gateway.domain.models import Participant, ParticipantCategory, VerificationStatus
from scf_gateway.domain.service import SupplyChainFinancingService

# Fixed "today" so approval dates and schedules are deterministic
TODAY = date(2025, 1, 15)


def make_participant(
    name: str,
    category: ParticipantCategory,
    credit_rating: int,
    on_time_payment_rate: str = "95",
    payment_terms_days: int = 30,
    business_license: str | None = None,
) -> Participant:
    return Participant(
        name=name,
        category=category,
        credit_rating=credit_rating,
        verification_status=VerificationStatus.VERIFIED,
        monthly_volume=Decimal("100000"),
        payment_terms_days=payment_terms_days,
        on_time_payment_rate=Decimal(on_time_payment_rate),
        business_license=business_license,
    )


@pytest.fixture
def participant_factory():
    """Build unregistered participants: participant_factory(name, category, rating, ...)"""
    return make_participant


@pytest.fixture
def service() -> SupplyChainFinancingService:
    """In-memory service with a fixed clock"""
    return SupplyChainFinancingService(clock=lambda: TODAY)


@pytest.fixture
def supplier_id(service: SupplyChainFinancingService) -> str:
    """Supplier with credit rating 8"""
    return service.registry.register(
        make_participant("Green Valley Farm Supplies", ParticipantCategory.SUPPLIER, 8, "95", 30, "BL-001")
    )


@pytest.fixture
def buyer_id(service: SupplyChainFinancingService) -> str:
    """Manufacturer with credit rating 9"""
    return service.registry.register(
        make_participant("East Africa Processors Ltd", ParticipantCategory.MANUFACTURER, 9, "98", 45, "BL-002")
    )


@pytest.fixture
def client(service: SupplyChainFinancingService) -> TestClient:
    """Create FastAPI test client around the test service"""
    app = create_app(service)
    return TestClient(app)
