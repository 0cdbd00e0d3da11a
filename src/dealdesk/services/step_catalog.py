"""Default closing milestones applied to a deal that has no steps yet.

Order and assignee are load-bearing: the UI renders ownership badges from them.
"""

from dataclasses import dataclass
from datetime import datetime

from dealdesk.domain.enums import TransactionRole, TransactionStepStatus
from dealdesk.domain.models import TransactionStep


@dataclass(frozen=True)
class CatalogStep:
    """One entry of the default milestone table."""

    label: str
    order: int
    assigned_to: TransactionRole
    status: TransactionStepStatus = TransactionStepStatus.PENDING

    @property
    def pre_completed(self) -> bool:
        return self.status == TransactionStepStatus.COMPLETE


R = TransactionRole

DEFAULT_STEPS: tuple[CatalogStep, ...] = (
    CatalogStep("Offer Accepted", 1, R.SYSTEM, TransactionStepStatus.COMPLETE),
    CatalogStep("Earnest Money Deposited", 2, R.INVESTOR),
    CatalogStep("Title Search Ordered", 3, R.AGENT),
    CatalogStep("Property Inspection", 4, R.INVESTOR),
    CatalogStep("Appraisal", 5, R.AGENT),
    CatalogStep("Final Walkthrough", 6, R.INVESTOR),
    CatalogStep("Closing Documents Signed", 7, R.SELLER),
    CatalogStep("Funds Transferred", 8, R.INVESTOR),
    CatalogStep("Keys Handed Over", 9, R.AGENT),
)


def build_default_steps(deal_id: str, now: datetime) -> list[TransactionStep]:
    """Instantiate (unsaved) step rows for ``deal_id`` from the catalog."""
    return [
        TransactionStep(
            deal_id=deal_id,
            label=entry.label,
            order=entry.order,
            assigned_to=entry.assigned_to.value,
            status=entry.status.value,
            completed_at=now if entry.pre_completed else None,
        )
        for entry in DEFAULT_STEPS
    ]
