"""SQLAlchemy ORM models for the deal closing workflow.

All models use SQLite-compatible types:
- String(36) for UUID primary keys
- String columns holding enum values (see domain.enums)
- UTCDateTime for timestamps (SQLite keeps no offset, so UTC is re-attached on load)

Timestamps use Python-side defaults so they are populated on the instance at
flush time; async sessions cannot lazily refresh expired server defaults.
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from dealdesk.domain.enums import (
    ContractStatus,
    ContractType,
    DealStatus,
    TransactionRole,
    TransactionStepStatus,
)
from dealdesk.infra.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetime stored as a naive UTC value.

    Values written in one session compare equal to the same row read back
    in another, whatever the backend does with offsets.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc).replace(tzinfo=None)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)


# ---------------------------------------------------------------------------
# Deal
# ---------------------------------------------------------------------------


class Deal(Base):
    """A property transaction moving through the marketplace lifecycle.

    Only ``status`` is touched by the closing workflow; the remaining
    columns are descriptive.
    """

    __tablename__ = "deals"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    city = Column(String(100))
    state = Column(String(50))
    price = Column(Float)
    status = Column(String(30), nullable=False, default=DealStatus.DRAFT.value)
    created_at = Column(UTCDateTime, default=_utcnow)
    updated_at = Column(UTCDateTime, default=_utcnow, onupdate=_utcnow)

    # Relationships: rows are removed by ON DELETE CASCADE, never loaded for deletion
    steps = relationship(
        "TransactionStep",
        back_populates="deal",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="TransactionStep.order",
    )
    contracts = relationship(
        "Contract",
        back_populates="deal",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


# ---------------------------------------------------------------------------
# Transaction Steps
# ---------------------------------------------------------------------------


class TransactionStep(Base):
    """One closing milestone of a deal.

    ``completed_at`` is set if and only if ``status`` is COMPLETE.
    """

    __tablename__ = "transaction_steps"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    deal_id = Column(
        String(36),
        ForeignKey("deals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    label = Column(String(255), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    status = Column(
        String(20), nullable=False, default=TransactionStepStatus.PENDING.value
    )
    assigned_to = Column(
        String(20), nullable=False, default=TransactionRole.AGENT.value
    )
    completed_at = Column(UTCDateTime, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(UTCDateTime, default=_utcnow)
    updated_at = Column(UTCDateTime, default=_utcnow, onupdate=_utcnow)

    deal = relationship("Deal", back_populates="steps")


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class Contract(Base):
    """A legal document record tracked through generation and signing."""

    __tablename__ = "contracts"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    deal_id = Column(
        String(36),
        ForeignKey("deals.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    type = Column(
        String(50), nullable=False, default=ContractType.PURCHASE_AGREEMENT.value
    )
    status = Column(String(20), nullable=False, default=ContractStatus.DRAFT.value)
    content = Column(Text, nullable=True)
    generated_at = Column(UTCDateTime, nullable=True)
    signed_at = Column(UTCDateTime, nullable=True)
    created_at = Column(UTCDateTime, default=_utcnow)
    updated_at = Column(UTCDateTime, default=_utcnow, onupdate=_utcnow)

    deal = relationship("Deal", back_populates="contracts")
