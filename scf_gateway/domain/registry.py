"""Participant registry - onboarding and lookup of supply chain businesses"""

import logging
import threading
import uuid
from typing import List, Optional

from scf_gateway.domain.exceptions import DuplicateParticipant, InvalidRequest, NotFound, UnknownParticipant
from scf_gateway.domain.models import Participant, ParticipantCategory, VerificationStatus
from scf_gateway.domain.rates import validate_credit_rating
from scf_gateway.domain.storage import Repository
from scf_gateway.utils.money import as_decimal

logger = logging.getLogger(__name__)


def business_identity(participant: Participant) -> str:
    """Licence number when present, otherwise normalized name + category"""
    if participant.business_license:
        return f"license:{participant.business_license.strip().upper()}"
    return f"name:{participant.name.strip().casefold()}|{ParticipantCategory(participant.category).value}"


class ParticipantRegistry:
    """
    Stores participants and their credit attributes.

    Credit rating and on-time rate are maintained by external reputation
    processes; this class only reads them.
    """

    def __init__(self, repository: Repository[Participant]):
        self.repository = repository
        self._register_lock = threading.Lock()

    def register(self, participant: Participant) -> str:
        if not participant.name or not participant.name.strip():
            raise InvalidRequest("Participant name is required")
        try:
            participant.category = ParticipantCategory(participant.category)
            participant.verification_status = VerificationStatus(participant.verification_status)
        except ValueError as e:
            raise InvalidRequest(str(e)) from e
        validate_credit_rating(participant.credit_rating)
        participant.monthly_volume = as_decimal(participant.monthly_volume)
        participant.on_time_payment_rate = as_decimal(participant.on_time_payment_rate)

        identity = business_identity(participant)
        with self._register_lock:
            for existing in self.repository.list():
                if business_identity(existing) == identity:
                    raise DuplicateParticipant(
                        f"Participant '{participant.name}' already registered as {existing.id}"
                    )
            participant.id = f"participant_{uuid.uuid4().hex}"
            self.repository.put(participant)

        logger.info(
            "Participant registered",
            extra={"entity": "participant", "entity_id": participant.id, "category": participant.category.value},
        )
        return participant.id

    def get(self, participant_id: str) -> Participant:
        participant = self.repository.get(participant_id)
        if participant is None:
            raise NotFound(f"Participant {participant_id} not found")
        return participant

    def require(self, participant_id: str) -> Participant:
        """Lookup used by ledgers: a missing party is UnknownParticipant, not NotFound"""
        participant = self.repository.get(participant_id)
        if participant is None:
            raise UnknownParticipant(f"Participant {participant_id} is not registered")
        return participant

    def list(self, category: Optional[ParticipantCategory] = None) -> List[Participant]:
        participants = self.repository.list()
        if category is None:
            return participants
        category = ParticipantCategory(category)
        return [p for p in participants if p.category == category]
