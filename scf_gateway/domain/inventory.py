"""Inventory-backed financing ledger - collateralized loans with repayment schedules"""

import logging
import uuid
from datetime import date
from typing import Callable, List, Sequence

from scf_gateway.domain.exceptions import (
    AlreadyPaid,
    CollateralInsufficient,
    IndexOutOfRange,
    InvalidRequest,
    InvalidState,
    NotFound,
)
from scf_gateway.domain.installments import generate_repayment_schedule
from scf_gateway.domain.models import (
    CollateralItem,
    FinancingStatus,
    InstallmentStatus,
    InventoryFinancing,
)
from scf_gateway.domain.rates import inventory_financing_rate
from scf_gateway.domain.registry import ParticipantRegistry
from scf_gateway.domain.storage import EntityLocks, Repository
from scf_gateway.utils.money import Number, as_decimal

logger = logging.getLogger(__name__)

INVENTORY_FINANCING_TERM_MONTHS = 6

# Installments can be settled once funds are committed
REPAYABLE = {FinancingStatus.APPROVED, FinancingStatus.ACTIVE}


class InventoryFinancingLedger:
    """
    Tracks loans collateralized by declared inventory.

    The repayment schedule is generated once at approval. Afterwards only
    individual installment statuses change.
    """

    def __init__(
        self,
        repository: Repository[InventoryFinancing],
        registry: ParticipantRegistry,
        clock: Callable[[], date] = date.today,
    ):
        self.repository = repository
        self.registry = registry
        self.clock = clock
        self._locks = EntityLocks()

    def apply(
        self,
        participant_id: str,
        inventory_value: Number,
        requested_amount: Number,
        collateral_items: Sequence[CollateralItem] = (),
    ) -> str:
        """
        Open a financing application against declared inventory.

        Raises:
            UnknownParticipant: borrower is not registered
            CollateralInsufficient: requested amount > inventory value
        """
        self.registry.require(participant_id)
        inventory_value = as_decimal(inventory_value)
        requested_amount = as_decimal(requested_amount)
        if requested_amount <= 0:
            raise InvalidRequest(f"Financing amount must be positive, got {requested_amount}")
        if requested_amount > inventory_value:
            raise CollateralInsufficient(
                f"Requested {requested_amount} exceeds inventory value {inventory_value}"
            )

        financing = InventoryFinancing(
            id=f"inv_fin_{uuid.uuid4().hex}",
            participant_id=participant_id,
            inventory_value=inventory_value,
            financing_amount=requested_amount,
            application_date=self.clock(),
            collateral_items=list(collateral_items),
        )
        self.repository.put(financing)

        logger.info(
            "Inventory financing applied",
            extra={
                "entity": "inventory_financing",
                "entity_id": financing.id,
                "to_status": financing.status.value,
                "financing_amount": str(requested_amount),
            },
        )
        return financing.id

    def get_financing(self, financing_id: str) -> InventoryFinancing:
        financing = self.repository.get(financing_id)
        if financing is None:
            raise NotFound(f"Inventory financing {financing_id} not found")
        return financing

    def list_financings(self) -> List[InventoryFinancing]:
        return self.repository.list()

    def approve(self, financing_id: str) -> InventoryFinancing:
        """Price the loan, fix the term and generate the repayment schedule"""
        with self._locks.hold(financing_id):
            financing = self.get_financing(financing_id)
            self._require_status(financing, FinancingStatus.APPLIED, "approve")
            participant = self.registry.require(financing.participant_id)

            approval_date = self.clock()
            financing.interest_rate = inventory_financing_rate(participant.credit_rating)
            financing.term_months = INVENTORY_FINANCING_TERM_MONTHS
            financing.approval_date = approval_date
            financing.repayment_schedule = generate_repayment_schedule(
                financing.financing_amount,
                financing.interest_rate,
                financing.term_months,
                approval_date,
            )
            financing.status = FinancingStatus.APPROVED
            self.repository.put(financing)

        self._log_transition(financing, FinancingStatus.APPLIED)
        return financing

    def activate(self, financing_id: str) -> InventoryFinancing:
        """Funds drawn down: approved -> active"""
        return self._transition(financing_id, FinancingStatus.APPROVED, FinancingStatus.ACTIVE, "activate")

    def mark_defaulted(self, financing_id: str) -> InventoryFinancing:
        return self._transition(financing_id, FinancingStatus.ACTIVE, FinancingStatus.DEFAULTED, "default")

    def record_payment(self, financing_id: str, installment_index: int) -> InventoryFinancing:
        """
        Mark one installment paid (0-based index into the schedule).

        Overdue installments can still be paid late. When every installment
        is paid the agreement becomes 'repaid'.
        """
        with self._locks.hold(financing_id):
            financing = self.get_financing(financing_id)
            if financing.status not in REPAYABLE:
                raise InvalidState(
                    f"Cannot record payment on financing in status '{financing.status.value}'"
                )
            installment = self._installment(financing, installment_index)
            if installment.status == InstallmentStatus.PAID:
                raise AlreadyPaid(f"Installment {installment_index} of {financing_id} is already paid")

            installment.status = InstallmentStatus.PAID
            previous = financing.status
            if all(i.status == InstallmentStatus.PAID for i in financing.repayment_schedule):
                financing.status = FinancingStatus.REPAID
            self.repository.put(financing)

        logger.info(
            "Installment paid",
            extra={
                "entity": "inventory_financing",
                "entity_id": financing.id,
                "installment": installment.sequence,
                "amount": str(installment.amount),
            },
        )
        if financing.status != previous:
            self._log_transition(financing, previous)
        return financing

    def mark_installment_overdue(self, financing_id: str, installment_index: int) -> InventoryFinancing:
        with self._locks.hold(financing_id):
            financing = self.get_financing(financing_id)
            if financing.status not in REPAYABLE:
                raise InvalidState(
                    f"Cannot flag installment on financing in status '{financing.status.value}'"
                )
            installment = self._installment(financing, installment_index)
            if installment.status == InstallmentStatus.PAID:
                raise AlreadyPaid(f"Installment {installment_index} of {financing_id} is already paid")
            installment.status = InstallmentStatus.OVERDUE
            self.repository.put(financing)

        logger.warning(
            "Installment overdue",
            extra={"entity": "inventory_financing", "entity_id": financing.id, "installment": installment.sequence},
        )
        return financing

    def _installment(self, financing: InventoryFinancing, index: int):
        if isinstance(index, bool) or not 0 <= index < len(financing.repayment_schedule):
            raise IndexOutOfRange(
                f"Installment {index} out of range for schedule of {len(financing.repayment_schedule)}"
            )
        return financing.repayment_schedule[index]

    def _transition(
        self,
        financing_id: str,
        expected: FinancingStatus,
        target: FinancingStatus,
        action: str,
    ) -> InventoryFinancing:
        with self._locks.hold(financing_id):
            financing = self.get_financing(financing_id)
            self._require_status(financing, expected, action)
            financing.status = target
            self.repository.put(financing)
        self._log_transition(financing, expected)
        return financing

    @staticmethod
    def _require_status(financing: InventoryFinancing, expected: FinancingStatus, action: str) -> None:
        if financing.status != expected:
            raise InvalidState(
                f"Cannot {action} financing in status '{financing.status.value}' (expected '{expected.value}')"
            )

    @staticmethod
    def _log_transition(financing: InventoryFinancing, from_status: FinancingStatus) -> None:
        logger.info(
            "Inventory financing status changed",
            extra={
                "entity": "inventory_financing",
                "entity_id": financing.id,
                "from_status": from_status.value,
                "to_status": financing.status.value,
            },
        )
