"""Repayment schedule generation for inventory-backed financing"""

from datetime import date
from decimal import Decimal
from typing import List

from scf_gateway.domain.models import Installment
from scf_gateway.utils.date_utils import add_months
from scf_gateway.utils.money import to_cents


def generate_repayment_schedule(
    financing_amount: Decimal,
    annual_rate_percent: Decimal,
    term_months: int,
    start_date: date,
) -> List[Installment]:
    """
    Generate a flat-rate monthly repayment schedule.

    Requirements:
    - One installment per month, due start_date + i months (i = 1..term)
    - Equal principal portions; last installment absorbs the cent remainder
      so principals sum exactly to financing_amount
    - Interest charged on the original principal every month (flat rate,
      not declining balance): amount * rate / 100 / 12

    Example:
        120,000 at 8.6% over 6 months
        principal 20,000.00 + interest 860.00 = 20,860.00 per month
    """
    if term_months <= 0 or financing_amount <= 0:
        return []

    base_principal = to_cents(financing_amount / term_months)
    remainder = financing_amount - base_principal * term_months
    monthly_interest = to_cents(financing_amount * annual_rate_percent / 100 / 12)

    installments = []
    for i in range(1, term_months + 1):
        principal = base_principal + (remainder if i == term_months else 0)
        installments.append(
            Installment(
                sequence=i,
                due_date=add_months(start_date, i),
                amount=principal + monthly_interest,
                principal=principal,
                interest=monthly_interest,
            )
        )

    return installments
