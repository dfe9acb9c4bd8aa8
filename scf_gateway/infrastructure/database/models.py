"""SQLAlchemy ORM models for persisted ledger entities"""

from sqlalchemy import JSON, Column, DateTime, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class LedgerRecord(Base):
    """
    One domain entity stored as a JSON document.

    `kind` separates participants, invoices, purchase orders and inventory
    financings; `seq` preserves insertion order for listing.
    """

    __tablename__ = "ledger_record"
    __table_args__ = (UniqueConstraint("kind", "entity_id", name="uq_ledger_record_kind_entity"),)

    seq = Column(Integer, primary_key=True, autoincrement=True)
    kind = Column(String(32), nullable=False, index=True)
    entity_id = Column(Text, nullable=False)
    status = Column(String(32), nullable=True)
    payload = Column(JSON, nullable=False)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=True, onupdate=func.now())
