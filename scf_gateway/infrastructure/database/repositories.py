"""Database-backed repositories for ledger entities"""

from typing import Generic, List, Optional, Type, TypeVar

from pydantic import TypeAdapter
from sqlalchemy.orm import sessionmaker

from scf_gateway.domain.models import Invoice, InventoryFinancing, Participant, PurchaseOrder
from scf_gateway.infrastructure.database.models import LedgerRecord

T = TypeVar("T")


class SqlAlchemyRepository(Generic[T]):
    """Repository storing one entity kind as JSON rows in ledger_record"""

    def __init__(self, session_factory: sessionmaker, kind: str, entity_type: Type[T]):
        self.session_factory = session_factory
        self.kind = kind
        self.adapter = TypeAdapter(entity_type)

    def get(self, entity_id: str) -> Optional[T]:
        with self.session_factory() as db:
            record = (
                db.query(LedgerRecord)
                .filter(LedgerRecord.kind == self.kind, LedgerRecord.entity_id == entity_id)
                .first()
            )
            return self.adapter.validate_python(record.payload) if record else None

    def put(self, entity: T) -> None:
        """Insert or replace the entity in a single transaction"""
        payload = self.adapter.dump_python(entity, mode="json")
        status = payload.get("status")
        with self.session_factory() as db:
            record = (
                db.query(LedgerRecord)
                .filter(LedgerRecord.kind == self.kind, LedgerRecord.entity_id == entity.id)
                .first()
            )
            if record is None:
                db.add(LedgerRecord(kind=self.kind, entity_id=entity.id, status=status, payload=payload))
            else:
                record.payload = payload
                record.status = status
                record.version = record.version + 1
            db.commit()

    def list(self) -> List[T]:
        with self.session_factory() as db:
            records = (
                db.query(LedgerRecord)
                .filter(LedgerRecord.kind == self.kind)
                .order_by(LedgerRecord.seq)
                .all()
            )
            return [self.adapter.validate_python(r.payload) for r in records]


def build_repositories(session_factory: sessionmaker) -> dict:
    """Repositories for every ledger, keyed by service constructor argument"""
    return {
        "participants": SqlAlchemyRepository(session_factory, "participant", Participant),
        "invoices": SqlAlchemyRepository(session_factory, "invoice", Invoice),
        "purchase_orders": SqlAlchemyRepository(session_factory, "purchase_order", PurchaseOrder),
        "financings": SqlAlchemyRepository(session_factory, "inventory_financing", InventoryFinancing),
    }
