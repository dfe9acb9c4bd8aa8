"""Rate & risk calculator - pricing derived from a participant's credit rating"""

from decimal import Decimal

from scf_gateway.domain.exceptions import InvalidCreditRating, InvalidRequest
from scf_gateway.utils.money import Number, as_decimal, to_cents

MIN_CREDIT_RATING = 1
MAX_CREDIT_RATING = 10

PO_FINANCING_BASE_RATE = Decimal("5.0")
PO_FINANCING_STEP = Decimal("0.5")

INVENTORY_FINANCING_BASE_RATE = Decimal("8.0")
INVENTORY_FINANCING_STEP = Decimal("0.3")


def validate_credit_rating(credit_rating: int) -> int:
    """Reject anything that is not an integer in [1, 10]"""
    if isinstance(credit_rating, bool) or not isinstance(credit_rating, int):
        raise InvalidCreditRating(f"Credit rating must be an integer, got {credit_rating!r}")
    if not MIN_CREDIT_RATING <= credit_rating <= MAX_CREDIT_RATING:
        raise InvalidCreditRating(
            f"Credit rating {credit_rating} outside {MIN_CREDIT_RATING}-{MAX_CREDIT_RATING}"
        )
    return credit_rating


def financing_rate(credit_rating: int) -> Decimal:
    """
    Annual rate (percent) for purchase order financing.

    5.0% for the best rating, +0.5 points per notch below 10:
    rating 10 -> 5.0, rating 9 -> 5.5, rating 1 -> 9.5
    """
    rating = validate_credit_rating(credit_rating)
    return PO_FINANCING_BASE_RATE + (MAX_CREDIT_RATING - rating) * PO_FINANCING_STEP


def inventory_financing_rate(credit_rating: int) -> Decimal:
    """
    Annual rate (percent) for inventory-backed loans.

    8.0% for the best rating, +0.3 points per notch below 10:
    rating 10 -> 8.0, rating 8 -> 8.6, rating 1 -> 10.7
    """
    rating = validate_credit_rating(credit_rating)
    return INVENTORY_FINANCING_BASE_RATE + (MAX_CREDIT_RATING - rating) * INVENTORY_FINANCING_STEP


def factoring_net_payout(amount: Number, fee_rate_percent: Number) -> Decimal:
    """
    Cash paid to the supplier when an invoice is factored.

    The fee is set per invoice by the factor, not derived from credit rating.

    Example:
        25,000 at 3.5% -> 25,000 * 0.965 = 24,125.00
    """
    fee = as_decimal(fee_rate_percent)
    if not Decimal("0") <= fee < Decimal("100"):
        raise InvalidRequest(f"Factoring fee must be in [0, 100), got {fee}")
    return to_cents(as_decimal(amount) * (1 - fee / 100))
