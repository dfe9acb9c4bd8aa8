"""Participant registry endpoints"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request

from scf_gateway.api.dependencies import get_request_id, get_service
from scf_gateway.api.errors import to_http_exception
from scf_gateway.api.v1.schemas import ParticipantCreate, ParticipantResponse
from scf_gateway.domain.exceptions import DomainException
from scf_gateway.domain.models import Participant, ParticipantCategory
from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.infrastructure.observability.metrics import record_operation

router = APIRouter()


@router.post("/participants", response_model=ParticipantResponse, status_code=201)
def register_participant(
    body: ParticipantCreate,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Onboard a supply chain participant"""
    try:
        participant_id = service.registry.register(Participant(**body.model_dump()))
    except DomainException as e:
        raise to_http_exception(e, "register_participant", get_request_id(request))

    record_operation("register_participant", ok=True)
    return ParticipantResponse.model_validate(service.registry.get(participant_id))


@router.get("/participants", response_model=List[ParticipantResponse])
def list_participants(
    category: Optional[ParticipantCategory] = Query(None, description="Filter by participant category"),
    service: SupplyChainFinancingService = Depends(get_service),
):
    return [ParticipantResponse.model_validate(p) for p in service.registry.list(category)]


@router.get("/participants/{participant_id}", response_model=ParticipantResponse)
def get_participant(
    participant_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        participant = service.registry.get(participant_id)
    except DomainException as e:
        raise to_http_exception(e, "get_participant", get_request_id(request))
    return ParticipantResponse.model_validate(participant)
