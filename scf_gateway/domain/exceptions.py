"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class NotFound(DomainException):
    """No entity exists under the given id"""

    pass


class UnknownParticipant(DomainException):
    """Referenced participant is not registered"""

    pass


class DuplicateParticipant(DomainException):
    """Business identity is already registered"""

    pass


class InvalidState(DomainException):
    """Operation is not legal for the entity's current status"""

    pass


class NoFactoringOffer(DomainException):
    """Invoice has no factoring offer attached"""

    pass


class FinancingExceedsOrderValue(DomainException):
    """Requested financing is larger than the purchase order amount"""

    pass


class CollateralInsufficient(DomainException):
    """Requested financing is larger than the declared inventory value"""

    pass


class InvalidCreditRating(DomainException):
    """Credit rating is outside the 1-10 scale"""

    pass


class AlreadyPaid(DomainException):
    """Installment has already been paid"""

    pass


class IndexOutOfRange(DomainException):
    """Installment index does not exist in the repayment schedule"""

    pass


class InvalidRequest(DomainException):
    """Input values are malformed (non-positive amounts, inverted dates, ...)"""

    pass


class SettlementAPIError(DomainException):
    """Settlement collaborator returned an error or is unavailable"""

    pass
