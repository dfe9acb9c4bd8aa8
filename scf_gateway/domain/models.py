"""Domain models - pure Python dataclasses representing supply chain financing entities"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional


class ParticipantCategory(str, Enum):
    SUPPLIER = "supplier"
    MANUFACTURER = "manufacturer"
    DISTRIBUTOR = "distributor"
    RETAILER = "retailer"


class VerificationStatus(str, Enum):
    VERIFIED = "verified"
    PENDING = "pending"
    UNVERIFIED = "unverified"


class InvoiceStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    FACTORED = "factored"
    PAID = "paid"
    OVERDUE = "overdue"


class PurchaseOrderStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    CONFIRMED = "confirmed"
    FINANCED = "financed"
    DELIVERED = "delivered"
    COMPLETED = "completed"


class FinancingStatus(str, Enum):
    APPLIED = "applied"
    APPROVED = "approved"
    ACTIVE = "active"
    REPAID = "repaid"
    DEFAULTED = "defaulted"


class InstallmentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class CollateralCondition(str, Enum):
    NEW = "new"
    GOOD = "good"
    FAIR = "fair"
    DAMAGED = "damaged"


@dataclass
class Participant:
    """Supply chain business with its credit attributes"""

    name: str
    category: ParticipantCategory
    credit_rating: int  # 1 (worst) - 10 (best)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    monthly_volume: Decimal = Decimal("0")
    payment_terms_days: int = 30
    on_time_payment_rate: Decimal = Decimal("0")  # percentage
    business_license: Optional[str] = None
    address: str = ""
    phone: str = ""
    email: str = ""
    registration_date: Optional[date] = None
    id: Optional[str] = None


@dataclass
class LineItem:
    """Goods line on an invoice or purchase order"""

    description: str
    quantity: int
    unit_price: Decimal
    category: str = ""
    delivery_date: Optional[date] = None

    @property
    def total_price(self) -> Decimal:
        return self.unit_price * self.quantity


@dataclass
class FactoringOffer:
    """Discounted early payout offered against an invoice"""

    fee_rate: Decimal  # percent of face amount
    net_amount: Decimal
    accepted: bool = False


@dataclass
class Invoice:
    id: str
    number: str
    supplier_id: str
    buyer_id: str
    amount: Decimal
    currency: str
    issue_date: date
    due_date: date
    status: InvoiceStatus = InvoiceStatus.PENDING
    items: List[LineItem] = field(default_factory=list)
    terms_and_conditions: str = ""
    factoring_offer: Optional[FactoringOffer] = None


@dataclass
class FinancingTerms:
    """Financing attached to a purchase order"""

    requested: bool = False
    approved: bool = False
    amount: Optional[Decimal] = None
    rate: Optional[Decimal] = None


@dataclass
class PurchaseOrder:
    id: str
    number: str
    buyer_id: str
    supplier_id: str
    amount: Decimal
    currency: str
    issue_date: date
    expected_delivery_date: date
    status: PurchaseOrderStatus = PurchaseOrderStatus.DRAFT
    items: List[LineItem] = field(default_factory=list)
    financing: FinancingTerms = field(default_factory=FinancingTerms)


@dataclass
class CollateralItem:
    """Stock pledged against an inventory financing agreement"""

    name: str
    category: str
    quantity: int
    unit_value: Decimal
    condition: CollateralCondition = CollateralCondition.GOOD
    location: str = ""

    @property
    def total_value(self) -> Decimal:
        return self.unit_value * self.quantity


@dataclass
class Installment:
    """Single payment in a repayment schedule"""

    sequence: int
    due_date: date
    amount: Decimal
    principal: Decimal
    interest: Decimal
    status: InstallmentStatus = InstallmentStatus.PENDING


@dataclass
class InventoryFinancing:
    id: str
    participant_id: str
    inventory_value: Decimal
    financing_amount: Decimal
    application_date: date
    collateral_items: List[CollateralItem] = field(default_factory=list)
    status: FinancingStatus = FinancingStatus.APPLIED
    interest_rate: Optional[Decimal] = None  # annual percent, fixed at approval
    term_months: Optional[int] = None
    approval_date: Optional[date] = None
    repayment_schedule: List[Installment] = field(default_factory=list)


@dataclass
class CategoryVolume:
    category: str  # product category from line items or collateral
    volume: Decimal


@dataclass
class SupplyChainMetrics:
    """Portfolio-wide summary computed on demand"""

    total_participants: int
    total_financing_volume: Decimal
    average_financing_rate: Decimal
    on_time_payment_rate: Decimal
    average_payment_terms: Decimal
    default_rate: Decimal
    invoices_factored: int
    purchase_orders_financed: int
    top_categories: List[CategoryVolume] = field(default_factory=list)
