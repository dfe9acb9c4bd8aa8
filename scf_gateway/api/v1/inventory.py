"""Inventory-backed financing endpoints"""

import time
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from scf_gateway.api.dependencies import get_request_id, get_service, get_settlement_client
from scf_gateway.api.errors import to_http_exception
from scf_gateway.api.v1.schemas import (
    InventoryFinancingApplication,
    InventoryFinancingResponse,
    PaymentRequest,
)
from scf_gateway.domain.exceptions import DomainException
from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.infrastructure.clients.settlement import SettlementClient, dispatch_settlement
from scf_gateway.infrastructure.observability.logging import log_operation
from scf_gateway.infrastructure.observability.metrics import record_financed_volume, record_operation

router = APIRouter()


@router.post("/inventory-financing", response_model=InventoryFinancingResponse, status_code=201)
def apply_for_financing(
    body: InventoryFinancingApplication,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Apply for a loan against declared inventory (requested amount <= inventory value)"""
    try:
        financing_id = service.inventory.apply(
            participant_id=body.participant_id,
            inventory_value=body.inventory_value,
            requested_amount=body.requested_amount,
            collateral_items=[item.to_domain() for item in body.collateral_items],
        )
    except DomainException as e:
        raise to_http_exception(e, "apply_inventory_financing", get_request_id(request))

    record_operation("apply_inventory_financing", ok=True)
    return InventoryFinancingResponse.model_validate(service.inventory.get_financing(financing_id))


@router.get("/inventory-financing", response_model=List[InventoryFinancingResponse])
def list_financings(service: SupplyChainFinancingService = Depends(get_service)):
    return [InventoryFinancingResponse.model_validate(f) for f in service.inventory.list_financings()]


@router.get("/inventory-financing/{financing_id}", response_model=InventoryFinancingResponse)
def get_financing(
    financing_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """
    Retrieve a financing agreement with its repayment schedule.

    Returns:
        Agreement details with one installment per month of the term
    """
    try:
        financing = service.inventory.get_financing(financing_id)
    except DomainException as e:
        raise to_http_exception(e, "get_inventory_financing", get_request_id(request))
    return InventoryFinancingResponse.model_validate(financing)


@router.post("/inventory-financing/{financing_id}/approve", response_model=InventoryFinancingResponse)
def approve_financing(
    financing_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Price the loan from the borrower's credit rating and generate the 6-month schedule"""
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        financing = service.inventory.approve(financing_id)
    except DomainException as e:
        raise to_http_exception(e, "approve_inventory_financing", request_id)

    record_operation("approve_inventory_financing", ok=True)
    log_operation(request_id, "approve_inventory_financing", financing.id, "ok", (time.time() - start_time) * 1000)
    return InventoryFinancingResponse.model_validate(financing)


@router.post("/inventory-financing/{financing_id}/activate", response_model=InventoryFinancingResponse)
def activate_financing(
    financing_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
    settlement_client: SettlementClient = Depends(get_settlement_client),
):
    """Draw down an approved loan; settlement moves the principal to the borrower"""
    request_id = get_request_id(request)
    try:
        financing = service.inventory.activate(financing_id)
    except DomainException as e:
        raise to_http_exception(e, "activate_inventory_financing", request_id)

    background_tasks.add_task(
        dispatch_settlement,
        settlement_client,
        {
            "event": "INVENTORY_FINANCING_ACTIVATED",
            "financing_id": financing.id,
            "participant_id": financing.participant_id,
            "amount": str(financing.financing_amount),
            "rate": str(financing.interest_rate),
        },
    )

    record_operation("activate_inventory_financing", ok=True)
    record_financed_volume("inventory", financing.financing_amount)
    return InventoryFinancingResponse.model_validate(financing)


@router.post("/inventory-financing/{financing_id}/payments", response_model=InventoryFinancingResponse)
def record_payment(
    financing_id: str,
    body: PaymentRequest,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Settlement callback: installment received"""
    try:
        financing = service.inventory.record_payment(financing_id, body.installment_index)
    except DomainException as e:
        raise to_http_exception(e, "record_payment", get_request_id(request))
    record_operation("record_payment", ok=True)
    return InventoryFinancingResponse.model_validate(financing)


@router.post("/inventory-financing/{financing_id}/overdue", response_model=InventoryFinancingResponse)
def mark_installment_overdue(
    financing_id: str,
    body: PaymentRequest,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Settlement callback: installment missed"""
    try:
        financing = service.inventory.mark_installment_overdue(financing_id, body.installment_index)
    except DomainException as e:
        raise to_http_exception(e, "mark_installment_overdue", get_request_id(request))
    record_operation("mark_installment_overdue", ok=True)
    return InventoryFinancingResponse.model_validate(financing)


@router.post("/inventory-financing/{financing_id}/default", response_model=InventoryFinancingResponse)
def mark_defaulted(
    financing_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        financing = service.inventory.mark_defaulted(financing_id)
    except DomainException as e:
        raise to_http_exception(e, "mark_defaulted", get_request_id(request))
    record_operation("mark_defaulted", ok=True)
    return InventoryFinancingResponse.model_validate(financing)
