"""Pydantic schemas for API request/response validation"""

from datetime import date
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from scf_gateway.domain.models import (
    CollateralCondition,
    CollateralItem,
    FinancingStatus,
    InstallmentStatus,
    InvoiceStatus,
    LineItem,
    ParticipantCategory,
    PurchaseOrderStatus,
    VerificationStatus,
)


class ORMSchema(BaseModel):
    """Response schema populated from domain dataclasses"""

    model_config = ConfigDict(from_attributes=True)


# Participants


class ParticipantCreate(BaseModel):
    """Request body for POST /v1/participants"""

    name: str = Field(..., min_length=1)
    category: ParticipantCategory
    credit_rating: int = Field(..., description="1 (highest risk) - 10 (lowest risk)")
    verification_status: VerificationStatus = VerificationStatus.PENDING
    monthly_volume: Decimal = Field(Decimal("0"), ge=0)
    payment_terms_days: int = Field(30, ge=0)
    on_time_payment_rate: Decimal = Field(Decimal("0"), ge=0, le=100)
    business_license: Optional[str] = None
    address: str = ""
    phone: str = ""
    email: str = ""
    registration_date: Optional[date] = None


class ParticipantResponse(ORMSchema):
    id: str
    name: str
    category: ParticipantCategory
    verification_status: VerificationStatus
    credit_rating: int
    monthly_volume: Decimal
    payment_terms_days: int
    on_time_payment_rate: Decimal
    business_license: Optional[str] = None
    address: str
    phone: str
    email: str
    registration_date: Optional[date] = None


# Line items


class LineItemSchema(BaseModel):
    description: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    unit_price: Decimal = Field(..., ge=0)
    category: str = ""
    delivery_date: Optional[date] = None

    def to_domain(self) -> LineItem:
        return LineItem(**self.model_dump())


class LineItemResponse(ORMSchema):
    description: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    category: str
    delivery_date: Optional[date] = None


# Invoices


class InvoiceCreate(BaseModel):
    """Request body for POST /v1/invoices"""

    supplier_id: str
    buyer_id: str
    amount: Decimal = Field(..., gt=0)
    issue_date: date
    due_date: date
    items: List[LineItemSchema] = []
    currency: Optional[str] = None
    terms_and_conditions: str = ""


class FactoringOfferRequest(BaseModel):
    fee_rate_percent: Decimal = Field(..., ge=0, lt=100)


class MarkOverdueRequest(BaseModel):
    as_of: Optional[date] = None


class FactoringOfferResponse(ORMSchema):
    fee_rate: Decimal
    net_amount: Decimal
    accepted: bool


class InvoiceResponse(ORMSchema):
    id: str
    number: str
    supplier_id: str
    buyer_id: str
    amount: Decimal
    currency: str
    issue_date: date
    due_date: date
    status: InvoiceStatus
    items: List[LineItemResponse]
    terms_and_conditions: str
    factoring_offer: Optional[FactoringOfferResponse] = None


# Purchase orders


class PurchaseOrderCreate(BaseModel):
    """Request body for POST /v1/purchase-orders"""

    buyer_id: str
    supplier_id: str
    amount: Decimal = Field(..., gt=0)
    issue_date: date
    expected_delivery_date: date
    items: List[LineItemSchema] = []
    currency: Optional[str] = None


class FinancingRequest(BaseModel):
    requested_amount: Decimal = Field(..., gt=0)


class FinancingTermsResponse(ORMSchema):
    requested: bool
    approved: bool
    amount: Optional[Decimal] = None
    rate: Optional[Decimal] = None


class PurchaseOrderResponse(ORMSchema):
    id: str
    number: str
    buyer_id: str
    supplier_id: str
    amount: Decimal
    currency: str
    issue_date: date
    expected_delivery_date: date
    status: PurchaseOrderStatus
    items: List[LineItemResponse]
    financing: FinancingTermsResponse


# Inventory financing


class CollateralItemSchema(BaseModel):
    name: str = Field(..., min_length=1)
    category: str
    quantity: int = Field(..., gt=0)
    unit_value: Decimal = Field(..., ge=0)
    condition: CollateralCondition = CollateralCondition.GOOD
    location: str = ""

    def to_domain(self) -> CollateralItem:
        return CollateralItem(**self.model_dump())


class InventoryFinancingApplication(BaseModel):
    """Request body for POST /v1/inventory-financing"""

    participant_id: str
    inventory_value: Decimal = Field(..., gt=0)
    requested_amount: Decimal = Field(..., gt=0)
    collateral_items: List[CollateralItemSchema] = []


class PaymentRequest(BaseModel):
    installment_index: int = Field(..., description="0-based position in the repayment schedule")


class CollateralItemResponse(ORMSchema):
    name: str
    category: str
    quantity: int
    unit_value: Decimal
    total_value: Decimal
    condition: CollateralCondition
    location: str


class InstallmentResponse(ORMSchema):
    sequence: int
    due_date: date
    amount: Decimal
    principal: Decimal
    interest: Decimal
    status: InstallmentStatus


class InventoryFinancingResponse(ORMSchema):
    id: str
    participant_id: str
    inventory_value: Decimal
    financing_amount: Decimal
    interest_rate: Optional[Decimal] = None
    term_months: Optional[int] = None
    collateral_items: List[CollateralItemResponse]
    status: FinancingStatus
    application_date: date
    approval_date: Optional[date] = None
    repayment_schedule: List[InstallmentResponse]


# Portfolio


class CategoryVolumeResponse(ORMSchema):
    category: str
    volume: Decimal


class MetricsResponse(ORMSchema):
    """Response for GET /v1/portfolio/metrics"""

    total_participants: int
    total_financing_volume: Decimal
    average_financing_rate: Decimal
    on_time_payment_rate: Decimal
    average_payment_terms: Decimal
    default_rate: Decimal
    invoices_factored: int
    purchase_orders_financed: int
    top_categories: List[CategoryVolumeResponse]
