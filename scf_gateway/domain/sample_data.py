"""Demo portfolio loaded through the public ledger operations"""

from datetime import date
from decimal import Decimal
from typing import Dict

from scf_gateway.domain.models import (
    CollateralCondition,
    CollateralItem,
    LineItem,
    Participant,
    ParticipantCategory,
    VerificationStatus,
)
from scf_gateway.domain.service import SupplyChainFinancingService


def load_sample_portfolio(service: SupplyChainFinancingService) -> Dict[str, str]:
    """
    Register three East African businesses and open one document per ledger.

    Returns ids keyed by role: supplier, manufacturer, distributor,
    invoice, purchase_order, inventory_financing.
    """
    supplier_id = service.registry.register(
        Participant(
            name="Green Valley Farm Supplies",
            category=ParticipantCategory.SUPPLIER,
            verification_status=VerificationStatus.VERIFIED,
            credit_rating=8,
            business_license="BL-2024-001",
            address="Agricultural Zone, Kampala",
            phone="+256-700-123456",
            email="info@greenvalley.com",
            registration_date=date(2024, 1, 15),
            monthly_volume=Decimal("250000"),
            payment_terms_days=30,
            on_time_payment_rate=Decimal("95"),
        )
    )
    manufacturer_id = service.registry.register(
        Participant(
            name="East Africa Processors Ltd",
            category=ParticipantCategory.MANUFACTURER,
            verification_status=VerificationStatus.VERIFIED,
            credit_rating=9,
            business_license="BL-2024-002",
            address="Industrial Area, Nairobi",
            phone="+254-700-789012",
            email="procurement@eaprocessors.com",
            registration_date=date(2024, 2, 1),
            monthly_volume=Decimal("500000"),
            payment_terms_days=45,
            on_time_payment_rate=Decimal("98"),
        )
    )
    distributor_id = service.registry.register(
        Participant(
            name="Rural Markets Distribution",
            category=ParticipantCategory.DISTRIBUTOR,
            verification_status=VerificationStatus.VERIFIED,
            credit_rating=7,
            business_license="BL-2024-003",
            address="Transport Hub, Dar es Salaam",
            phone="+255-700-345678",
            email="orders@ruralmarkets.com",
            registration_date=date(2024, 3, 1),
            monthly_volume=Decimal("180000"),
            payment_terms_days=21,
            on_time_payment_rate=Decimal("92"),
        )
    )

    invoice_id = service.invoices.create_invoice(
        supplier_id=supplier_id,
        buyer_id=manufacturer_id,
        amount=Decimal("25000"),
        issue_date=date(2024, 7, 1),
        due_date=date(2024, 7, 31),
        items=[
            LineItem("Premium Coffee Beans", 1000, Decimal("15"), "Agricultural Products"),
            LineItem("Organic Fertilizer", 200, Decimal("50"), "Farm Supplies"),
        ],
        terms_and_conditions="Net 30 days payment terms",
    )
    service.invoices.offer_factoring(invoice_id, Decimal("3.5"))

    po_id = service.purchase_orders.create_po(
        buyer_id=manufacturer_id,
        supplier_id=supplier_id,
        amount=Decimal("35000"),
        issue_date=date(2024, 7, 15),
        expected_delivery_date=date(2024, 8, 15),
        items=[
            LineItem("Maize Seeds - Hybrid Variety", 500, Decimal("25"), "Seeds", date(2024, 8, 1)),
            LineItem("Irrigation Equipment", 50, Decimal("450"), "Equipment"),
        ],
    )
    service.purchase_orders.confirm_po(po_id)

    financing_id = service.inventory.apply(
        participant_id=supplier_id,
        inventory_value=Decimal("150000"),
        requested_amount=Decimal("120000"),
        collateral_items=[
            CollateralItem(
                "Coffee Processing Equipment", "Machinery", 5, Decimal("15000"),
                CollateralCondition.GOOD, "Warehouse A",
            ),
            CollateralItem(
                "Raw Coffee Beans Stock", "Raw Materials", 2500, Decimal("30"),
                CollateralCondition.NEW, "Storage Facility B",
            ),
        ],
    )
    service.inventory.approve(financing_id)

    return {
        "supplier": supplier_id,
        "manufacturer": manufacturer_id,
        "distributor": distributor_id,
        "invoice": invoice_id,
        "purchase_order": po_id,
        "inventory_financing": financing_id,
    }
