"""Portfolio metrics aggregator - cross-ledger summary statistics"""

from decimal import Decimal
from typing import Dict, List, Sequence, Tuple

from scf_gateway.domain.models import (
    CategoryVolume,
    FinancingStatus,
    Invoice,
    InventoryFinancing,
    Participant,
    PurchaseOrder,
    SupplyChainMetrics,
)
from scf_gateway.utils.money import to_cents

# Agreements that have been priced and committed
FUNDED_STATUSES = {
    FinancingStatus.APPROVED,
    FinancingStatus.ACTIVE,
    FinancingStatus.REPAID,
    FinancingStatus.DEFAULTED,
}


def _mean(values: Sequence[Decimal]) -> Decimal:
    if not values:
        return Decimal("0")
    return sum(values, Decimal("0")) / len(values)


def _credit_by_value(
    volumes: Dict[str, Decimal],
    amount: Decimal,
    goods: Sequence[Tuple[str, Decimal]],
) -> None:
    """Split amount across (category, value) pairs pro rata to value"""
    total = sum((value for _, value in goods), Decimal("0"))
    if total <= 0:
        return
    for category, value in goods:
        if category:
            volumes[category] = volumes.get(category, Decimal("0")) + amount * value / total


def rank_categories(
    invoices: Sequence[Invoice],
    purchase_orders: Sequence[PurchaseOrder],
    financings: Sequence[InventoryFinancing],
    limit: int,
) -> List[CategoryVolume]:
    """
    Rank product categories by financed volume.

    Each financed amount is split across the goods behind it, pro rata to
    their value:
    - accepted factoring net payout -> invoice line items
    - approved PO financing amount -> PO line items
    - funded inventory principal -> collateral items

    Goods without a category are left out. Ties keep the order in which a
    category was first credited (invoices, then purchase orders, then
    inventory, each in creation order).
    """
    volumes: Dict[str, Decimal] = {}

    for invoice in invoices:
        offer = invoice.factoring_offer
        if offer is not None and offer.accepted:
            _credit_by_value(volumes, offer.net_amount, [(i.category, i.total_price) for i in invoice.items])
    for po in purchase_orders:
        if po.financing.approved and po.financing.amount is not None:
            _credit_by_value(volumes, po.financing.amount, [(i.category, i.total_price) for i in po.items])
    for financing in financings:
        if financing.status in FUNDED_STATUSES:
            _credit_by_value(
                volumes,
                financing.financing_amount,
                [(c.category, c.total_value) for c in financing.collateral_items],
            )

    # sorted() is stable, so equal volumes stay in first-credited order
    ranked = sorted(((c, to_cents(v)) for c, v in volumes.items()), key=lambda cv: cv[1], reverse=True)
    return [CategoryVolume(category=c, volume=v) for c, v in ranked if v > 0][:limit]


def compute_metrics(
    participants: Sequence[Participant],
    invoices: Sequence[Invoice],
    purchase_orders: Sequence[PurchaseOrder],
    financings: Sequence[InventoryFinancing],
    top_categories_limit: int = 3,
) -> SupplyChainMetrics:
    """Aggregate a snapshot of every ledger; nothing is cached between calls"""
    rates = [f.interest_rate for f in financings if f.interest_rate is not None]
    funded = [f for f in financings if f.status in FUNDED_STATUSES]
    defaulted = [f for f in funded if f.status == FinancingStatus.DEFAULTED]
    default_rate = Decimal(len(defaulted)) * 100 / len(funded) if funded else Decimal("0")

    return SupplyChainMetrics(
        total_participants=len(participants),
        total_financing_volume=sum((f.financing_amount for f in financings), Decimal("0")),
        average_financing_rate=_mean(rates).quantize(Decimal("0.001")),
        on_time_payment_rate=_mean([p.on_time_payment_rate for p in participants]).quantize(Decimal("0.01")),
        average_payment_terms=to_cents(_mean([Decimal(p.payment_terms_days) for p in participants])),
        default_rate=to_cents(default_rate),
        invoices_factored=sum(
            1 for i in invoices if i.factoring_offer is not None and i.factoring_offer.accepted
        ),
        purchase_orders_financed=sum(1 for po in purchase_orders if po.financing.approved),
        top_categories=rank_categories(
            invoices, purchase_orders, financings, top_categories_limit
        ),
    )
