"""Supply chain financing service - wires the registry, ledgers and metrics together"""

from datetime import date
from typing import Callable, Optional

from scf_gateway.domain.inventory import InventoryFinancingLedger
from scf_gateway.domain.invoices import InvoiceLedger
from scf_gateway.domain.metrics import compute_metrics
from scf_gateway.domain.models import (
    Invoice,
    InventoryFinancing,
    Participant,
    PurchaseOrder,
    SupplyChainMetrics,
)
from scf_gateway.domain.purchase_orders import PurchaseOrderLedger
from scf_gateway.domain.registry import ParticipantRegistry
from scf_gateway.domain.storage import InMemoryRepository, Repository


class SupplyChainFinancingService:
    """
    Entry point for the financing engine.

    Constructed once by the host process and passed to callers; storage is
    injected so the same service runs over memory or a database.
    """

    def __init__(
        self,
        participants: Optional[Repository[Participant]] = None,
        invoices: Optional[Repository[Invoice]] = None,
        purchase_orders: Optional[Repository[PurchaseOrder]] = None,
        financings: Optional[Repository[InventoryFinancing]] = None,
        clock: Callable[[], date] = date.today,
        default_currency: str = "USD",
        top_categories_limit: int = 3,
    ):
        self.registry = ParticipantRegistry(participants or InMemoryRepository())
        self.invoices = InvoiceLedger(
            invoices or InMemoryRepository(), self.registry, clock=clock, default_currency=default_currency
        )
        self.purchase_orders = PurchaseOrderLedger(
            purchase_orders or InMemoryRepository(), self.registry, default_currency=default_currency
        )
        self.inventory = InventoryFinancingLedger(financings or InMemoryRepository(), self.registry, clock=clock)
        self.top_categories_limit = top_categories_limit

    def compute_metrics(self) -> SupplyChainMetrics:
        # Each list() is a copy, so mutations during aggregation can't tear an entity
        return compute_metrics(
            participants=self.registry.list(),
            invoices=self.invoices.list_invoices(),
            purchase_orders=self.purchase_orders.list_pos(),
            financings=self.inventory.list_financings(),
            top_categories_limit=self.top_categories_limit,
        )
