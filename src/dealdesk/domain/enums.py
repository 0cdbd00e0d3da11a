"""Domain enumerations for the deal closing workflow.

All enums use the (str, Enum) pattern to ensure JSON serialization compatibility.
Values are upper case because the marketplace UI matches on them verbatim.
"""

from enum import Enum


class DealStatus(str, Enum):
    """Status of a deal through its marketplace lifecycle."""

    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    INTERESTED = "INTERESTED"
    OFFER_SUBMITTED = "OFFER_SUBMITTED"
    OFFER_ACCEPTED = "OFFER_ACCEPTED"
    UNDER_REVIEW = "UNDER_REVIEW"
    UNDER_CONTRACT = "UNDER_CONTRACT"
    CLOSED = "CLOSED"
    CANCELLED = "CANCELLED"


# ---------------------------------------------------------------------------
# Transaction Steps
# ---------------------------------------------------------------------------


class TransactionStepStatus(str, Enum):
    """Status of a single closing milestone."""

    PENDING = "PENDING"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETE = "COMPLETE"
    BLOCKED = "BLOCKED"


class TransactionRole(str, Enum):
    """Party responsible for a closing milestone."""

    INVESTOR = "INVESTOR"
    AGENT = "AGENT"
    SELLER = "SELLER"
    SYSTEM = "SYSTEM"


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class ContractType(str, Enum):
    """Kind of legal document attached to a deal."""

    PURCHASE_AGREEMENT = "PURCHASE_AGREEMENT"
    ASSIGNMENT = "ASSIGNMENT"
    AMENDMENT = "AMENDMENT"


class ContractStatus(str, Enum):
    """Status of a contract through generation and signing."""

    DRAFT = "DRAFT"
    GENERATED = "GENERATED"
    SIGNED = "SIGNED"
    VOIDED = "VOIDED"
