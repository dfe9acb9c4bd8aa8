"""Purchase order financing endpoints"""

import time
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from scf_gateway.api.dependencies import get_request_id, get_service, get_settlement_client
from scf_gateway.api.errors import to_http_exception
from scf_gateway.api.v1.schemas import FinancingRequest, PurchaseOrderCreate, PurchaseOrderResponse
from scf_gateway.domain.exceptions import DomainException
from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.infrastructure.clients.settlement import SettlementClient, dispatch_settlement
from scf_gateway.infrastructure.observability.logging import log_operation
from scf_gateway.infrastructure.observability.metrics import record_financed_volume, record_operation

router = APIRouter()


@router.post("/purchase-orders", response_model=PurchaseOrderResponse, status_code=201)
def create_purchase_order(
    body: PurchaseOrderCreate,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Record a purchase order from a buyer to a supplier (starts as draft)"""
    try:
        po_id = service.purchase_orders.create_po(
            buyer_id=body.buyer_id,
            supplier_id=body.supplier_id,
            amount=body.amount,
            issue_date=body.issue_date,
            expected_delivery_date=body.expected_delivery_date,
            items=[item.to_domain() for item in body.items],
            currency=body.currency,
        )
    except DomainException as e:
        raise to_http_exception(e, "create_po", get_request_id(request))

    record_operation("create_po", ok=True)
    return PurchaseOrderResponse.model_validate(service.purchase_orders.get_po(po_id))


@router.get("/purchase-orders", response_model=List[PurchaseOrderResponse])
def list_purchase_orders(service: SupplyChainFinancingService = Depends(get_service)):
    return [PurchaseOrderResponse.model_validate(po) for po in service.purchase_orders.list_pos()]


@router.get("/purchase-orders/{po_id}", response_model=PurchaseOrderResponse)
def get_purchase_order(
    po_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        po = service.purchase_orders.get_po(po_id)
    except DomainException as e:
        raise to_http_exception(e, "get_po", get_request_id(request))
    return PurchaseOrderResponse.model_validate(po)


@router.post("/purchase-orders/{po_id}/send", response_model=PurchaseOrderResponse)
def send_purchase_order(
    po_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        po = service.purchase_orders.send_po(po_id)
    except DomainException as e:
        raise to_http_exception(e, "send_po", get_request_id(request))
    record_operation("send_po", ok=True)
    return PurchaseOrderResponse.model_validate(po)


@router.post("/purchase-orders/{po_id}/confirm", response_model=PurchaseOrderResponse)
def confirm_purchase_order(
    po_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        po = service.purchase_orders.confirm_po(po_id)
    except DomainException as e:
        raise to_http_exception(e, "confirm_po", get_request_id(request))
    record_operation("confirm_po", ok=True)
    return PurchaseOrderResponse.model_validate(po)


@router.post("/purchase-orders/{po_id}/deliver", response_model=PurchaseOrderResponse)
def deliver_purchase_order(
    po_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        po = service.purchase_orders.mark_delivered(po_id)
    except DomainException as e:
        raise to_http_exception(e, "mark_delivered", get_request_id(request))
    record_operation("mark_delivered", ok=True)
    return PurchaseOrderResponse.model_validate(po)


@router.post("/purchase-orders/{po_id}/complete", response_model=PurchaseOrderResponse)
def complete_purchase_order(
    po_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        po = service.purchase_orders.complete_po(po_id)
    except DomainException as e:
        raise to_http_exception(e, "complete_po", get_request_id(request))
    record_operation("complete_po", ok=True)
    return PurchaseOrderResponse.model_validate(po)


@router.post("/purchase-orders/{po_id}/financing", response_model=PurchaseOrderResponse)
def request_financing(
    po_id: str,
    body: FinancingRequest,
    background_tasks: BackgroundTasks,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
    settlement_client: SettlementClient = Depends(get_settlement_client),
):
    """
    Finance a purchase order before delivery.

    Rate = 5.0% + (10 - buyer credit rating) * 0.5; approval is automatic.
    A settlement event is queued to advance the funds.
    """
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        po = service.purchase_orders.request_financing(po_id, body.requested_amount)
    except DomainException as e:
        raise to_http_exception(e, "request_financing", request_id)

    background_tasks.add_task(
        dispatch_settlement,
        settlement_client,
        {
            "event": "PO_FINANCED",
            "purchase_order_id": po.id,
            "buyer_id": po.buyer_id,
            "amount": str(po.financing.amount),
            "rate": str(po.financing.rate),
            "currency": po.currency,
        },
    )

    record_operation("request_financing", ok=True)
    record_financed_volume("purchase_order", po.financing.amount)
    log_operation(request_id, "request_financing", po.id, "ok", (time.time() - start_time) * 1000)
    return PurchaseOrderResponse.model_validate(po)
