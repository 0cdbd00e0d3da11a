"""Transaction Service - drives a deal's closing milestones and close-out.

Steps are bootstrapped lazily from the default catalog the first time a deal's
timeline is read. Steps may be completed in any order; ``order`` is for
display only. Close-out is the single gated transition: every step COMPLETE,
at least one SIGNED contract (of any type), then the deal flips to CLOSED.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.domain.enums import ContractStatus, DealStatus, TransactionStepStatus
from dealdesk.domain.models import Contract, Deal, TransactionStep
from dealdesk.services.step_catalog import build_default_steps

logger = logging.getLogger(__name__)


class CloseDealError(Exception):
    """Raised when a deal cannot be closed."""

    code = "close_failed"


class IncompleteStepsError(CloseDealError):
    """One or more milestones are not COMPLETE."""

    code = "incomplete_steps"

    def __init__(self, labels: list[str]):
        self.labels = list(labels)
        super().__init__(
            f"Cannot close deal. Incomplete steps: {', '.join(self.labels)}"
        )


class UnsignedContractError(CloseDealError):
    """No contract on the deal has been signed."""

    code = "unsigned_contract"

    def __init__(self):
        super().__init__("Cannot close deal. A signed contract is required.")


class DealNotFoundError(CloseDealError):
    """The deal being closed does not exist."""

    code = "deal_not_found"

    def __init__(self, deal_id: str):
        self.deal_id = deal_id
        super().__init__(f"Deal {deal_id} not found")


@dataclass(frozen=True)
class StepProgress:
    total: int
    complete: int
    in_progress: int
    blocked: int
    pending: int

    @property
    def pct_complete(self) -> float:
        if self.total <= 0:
            return 0.0
        return float(self.complete) / float(self.total)

    @property
    def all_complete(self) -> bool:
        return self.complete == self.total

    def as_dict(self) -> dict:
        return {
            "total": self.total,
            "complete": self.complete,
            "in_progress": self.in_progress,
            "blocked": self.blocked,
            "pending": self.pending,
            "pct_complete": self.pct_complete,
            "all_complete": self.all_complete,
        }


class TransactionService:
    """Orchestrates milestone bootstrapping, status toggles and close-out.

    All methods are async and accept a SQLAlchemy AsyncSession. Methods
    flush but never commit; the caller owns the transaction.
    """

    async def _fetch_steps(
        self, db: AsyncSession, deal_id: str
    ) -> list[TransactionStep]:
        result = await db.execute(
            select(TransactionStep)
            .where(TransactionStep.deal_id == deal_id)
            .order_by(TransactionStep.order.asc())
        )
        return list(result.scalars().all())

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    async def initialize_steps(
        self, db: AsyncSession, deal_id: str
    ) -> list[TransactionStep]:
        """Create the default milestones for a deal.

        Idempotent: if the deal already has steps they are returned as-is,
        ordered by ``order``.
        """
        existing = await self._fetch_steps(db, deal_id)
        if existing:
            return existing

        steps = build_default_steps(deal_id, datetime.now(timezone.utc))
        db.add_all(steps)
        await db.flush()

        logger.info("Initialized %d transaction steps for deal %s", len(steps), deal_id)
        return sorted(steps, key=lambda s: s.order)

    async def get_steps_by_deal(
        self, db: AsyncSession, deal_id: str
    ) -> list[TransactionStep]:
        """Return the deal's milestones, bootstrapping the defaults on first access."""
        steps = await self._fetch_steps(db, deal_id)
        if not steps:
            steps = await self.initialize_steps(db, deal_id)
        return steps

    async def update_step_status(
        self,
        db: AsyncSession,
        step_id: str,
        status: TransactionStepStatus,
        notes: Optional[str] = None,
    ) -> Optional[TransactionStep]:
        """Set a step's status. Returns None if the step does not exist.

        Moving to COMPLETE stamps ``completed_at``; any other status clears it.
        """
        result = await db.execute(
            select(TransactionStep).where(TransactionStep.id == step_id)
        )
        step = result.scalar_one_or_none()
        if step is None:
            return None

        status = TransactionStepStatus(status)
        previous = step.status
        step.status = status.value
        if status == TransactionStepStatus.COMPLETE:
            step.completed_at = datetime.now(timezone.utc)
        else:
            step.completed_at = None
        if notes is not None:
            step.notes = notes

        await db.flush()
        logger.info(
            "Step %s (%s) on deal %s: %s -> %s",
            step.id, step.label, step.deal_id, previous, status.value,
        )
        return step

    async def get_progress(self, db: AsyncSession, deal_id: str) -> StepProgress:
        """Summarize the deal's milestones by status."""
        steps = await self.get_steps_by_deal(db, deal_id)
        counts = {s: 0 for s in TransactionStepStatus}
        for step in steps:
            counts[TransactionStepStatus(step.status)] += 1
        return StepProgress(
            total=len(steps),
            complete=counts[TransactionStepStatus.COMPLETE],
            in_progress=counts[TransactionStepStatus.IN_PROGRESS],
            blocked=counts[TransactionStepStatus.BLOCKED],
            pending=counts[TransactionStepStatus.PENDING],
        )

    # ------------------------------------------------------------------
    # Close-out
    # ------------------------------------------------------------------

    async def close_deal(self, db: AsyncSession, deal_id: str) -> Deal:
        """Close a deal once every milestone is done and a contract is signed.

        Checks, in order (first failure wins):
            1. All steps COMPLETE -> IncompleteStepsError listing every
               incomplete label.
            2. Any contract SIGNED -> UnsignedContractError.
            3. Deal exists -> DealNotFoundError.

        Nothing is written unless all checks pass.
        """
        steps = await self._fetch_steps(db, deal_id)
        incomplete = [
            s.label for s in steps if s.status != TransactionStepStatus.COMPLETE
        ]
        if incomplete:
            logger.warning(
                "Close rejected for deal %s: %d incomplete steps", deal_id, len(incomplete)
            )
            raise IncompleteStepsError(incomplete)

        result = await db.execute(
            select(Contract.status).where(Contract.deal_id == deal_id)
        )
        statuses = result.scalars().all()
        if not any(s == ContractStatus.SIGNED for s in statuses):
            logger.warning("Close rejected for deal %s: no signed contract", deal_id)
            raise UnsignedContractError()

        result = await db.execute(select(Deal).where(Deal.id == deal_id))
        deal = result.scalar_one_or_none()
        if deal is None:
            raise DealNotFoundError(deal_id)

        deal.status = DealStatus.CLOSED.value
        await db.flush()

        logger.info("Deal %s closed", deal_id)
        return deal
