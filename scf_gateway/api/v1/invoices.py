"""Invoice factoring endpoints"""

import time
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Request

from scf_gateway.api.dependencies import get_request_id, get_service, get_settlement_client
from scf_gateway.api.errors import to_http_exception
from scf_gateway.api.v1.schemas import (
    FactoringOfferRequest,
    InvoiceCreate,
    InvoiceResponse,
    MarkOverdueRequest,
)
from scf_gateway.domain.exceptions import DomainException
from scf_gateway.domain.service import SupplyChainFinancingService
from scf_gateway.infrastructure.clients.settlement import SettlementClient, dispatch_settlement
from scf_gateway.infrastructure.observability.logging import log_operation
from scf_gateway.infrastructure.observability.metrics import record_financed_volume, record_operation

router = APIRouter()


@router.post("/invoices", response_model=InvoiceResponse, status_code=201)
def create_invoice(
    body: InvoiceCreate,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Record an invoice issued by a supplier to a buyer"""
    try:
        invoice_id = service.invoices.create_invoice(
            supplier_id=body.supplier_id,
            buyer_id=body.buyer_id,
            amount=body.amount,
            issue_date=body.issue_date,
            due_date=body.due_date,
            items=[item.to_domain() for item in body.items],
            currency=body.currency,
            terms_and_conditions=body.terms_and_conditions,
        )
    except DomainException as e:
        raise to_http_exception(e, "create_invoice", get_request_id(request))

    record_operation("create_invoice", ok=True)
    return InvoiceResponse.model_validate(service.invoices.get_invoice(invoice_id))


@router.get("/invoices", response_model=List[InvoiceResponse])
def list_invoices(service: SupplyChainFinancingService = Depends(get_service)):
    return [InvoiceResponse.model_validate(i) for i in service.invoices.list_invoices()]


@router.get("/invoices/{invoice_id}", response_model=InvoiceResponse)
def get_invoice(
    invoice_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        invoice = service.invoices.get_invoice(invoice_id)
    except DomainException as e:
        raise to_http_exception(e, "get_invoice", get_request_id(request))
    return InvoiceResponse.model_validate(invoice)


@router.post("/invoices/{invoice_id}/approve", response_model=InvoiceResponse)
def approve_invoice(
    invoice_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        invoice = service.invoices.approve_invoice(invoice_id)
    except DomainException as e:
        raise to_http_exception(e, "approve_invoice", get_request_id(request))
    record_operation("approve_invoice", ok=True)
    return InvoiceResponse.model_validate(invoice)


@router.post("/invoices/{invoice_id}/factoring-offer", response_model=InvoiceResponse)
def offer_factoring(
    invoice_id: str,
    body: FactoringOfferRequest,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Attach a factoring offer; net payout = amount * (1 - fee/100)"""
    try:
        invoice = service.invoices.offer_factoring(invoice_id, body.fee_rate_percent)
    except DomainException as e:
        raise to_http_exception(e, "offer_factoring", get_request_id(request))
    record_operation("offer_factoring", ok=True)
    return InvoiceResponse.model_validate(invoice)


@router.post("/invoices/{invoice_id}/factor", response_model=InvoiceResponse)
def factor_invoice(
    invoice_id: str,
    background_tasks: BackgroundTasks,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
    settlement_client: SettlementClient = Depends(get_settlement_client),
):
    """
    Accept the factoring offer on a pending invoice.

    Flow:
    1. Transition the invoice to 'factored'
    2. Queue a settlement event so the factor pays out the net amount
    3. Return the updated invoice
    """
    start_time = time.time()
    request_id = get_request_id(request)
    try:
        invoice = service.invoices.factor_invoice(invoice_id)
    except DomainException as e:
        raise to_http_exception(e, "factor_invoice", request_id)

    background_tasks.add_task(
        dispatch_settlement,
        settlement_client,
        {
            "event": "INVOICE_FACTORED",
            "invoice_id": invoice.id,
            "supplier_id": invoice.supplier_id,
            "amount": str(invoice.factoring_offer.net_amount),
            "currency": invoice.currency,
        },
    )

    record_operation("factor_invoice", ok=True)
    record_financed_volume("factoring", invoice.factoring_offer.net_amount)
    log_operation(request_id, "factor_invoice", invoice.id, "ok", (time.time() - start_time) * 1000)
    return InvoiceResponse.model_validate(invoice)


@router.post("/invoices/{invoice_id}/overdue", response_model=InvoiceResponse)
def mark_overdue(
    invoice_id: str,
    request: Request,
    body: Optional[MarkOverdueRequest] = None,
    service: SupplyChainFinancingService = Depends(get_service),
):
    try:
        invoice = service.invoices.mark_overdue(invoice_id, body.as_of if body else None)
    except DomainException as e:
        raise to_http_exception(e, "mark_overdue", get_request_id(request))
    record_operation("mark_overdue", ok=True)
    return InvoiceResponse.model_validate(invoice)


@router.post("/invoices/{invoice_id}/paid", response_model=InvoiceResponse)
def mark_paid(
    invoice_id: str,
    request: Request,
    service: SupplyChainFinancingService = Depends(get_service),
):
    """Settlement callback: buyer payment received"""
    try:
        invoice = service.invoices.mark_paid(invoice_id)
    except DomainException as e:
        raise to_http_exception(e, "mark_paid", get_request_id(request))
    record_operation("mark_paid", ok=True)
    return InvoiceResponse.model_validate(invoice)
