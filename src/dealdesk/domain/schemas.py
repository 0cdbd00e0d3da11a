"""Pydantic v2 schemas for API request/response validation."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dealdesk.domain.enums import (
    ContractStatus,
    ContractType,
    DealStatus,
    TransactionRole,
    TransactionStepStatus,
)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str


# ---------------------------------------------------------------------------
# Deal
# ---------------------------------------------------------------------------


class DealCreate(BaseModel):
    """Schema for creating a deal record."""

    title: str = Field(min_length=1, max_length=255)
    address: str = Field(min_length=1, max_length=500)
    city: str | None = None
    state: str | None = None
    price: float | None = Field(default=None, ge=0)
    status: DealStatus = DealStatus.DRAFT


class DealResponse(BaseModel):
    """Schema for deal API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    address: str
    city: str | None = None
    state: str | None = None
    price: float | None = None
    status: DealStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------------------
# Transaction Steps
# ---------------------------------------------------------------------------


class TransactionStepResponse(BaseModel):
    """A closing milestone as shown on the transaction timeline."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    deal_id: str
    label: str
    order: int
    status: TransactionStepStatus
    assigned_to: TransactionRole
    completed_at: datetime | None = None
    notes: str | None = None


class TransactionStepUpdate(BaseModel):
    """Schema for toggling a milestone's status."""

    status: TransactionStepStatus
    notes: str | None = None


class StepProgressResponse(BaseModel):
    """Roll-up of a deal's milestones."""

    deal_id: str
    total: int
    complete: int
    in_progress: int
    blocked: int
    pending: int
    pct_complete: float
    all_complete: bool


# ---------------------------------------------------------------------------
# Contracts
# ---------------------------------------------------------------------------


class ContractGenerate(BaseModel):
    """Schema for requesting contract generation."""

    deal_id: str
    type: ContractType = ContractType.PURCHASE_AGREEMENT


class ContractStatusUpdate(BaseModel):
    """Schema for moving a contract to a new status."""

    status: ContractStatus


class ContractResponse(BaseModel):
    """Schema for contract API responses."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    deal_id: str
    type: ContractType
    status: ContractStatus
    content: str | None = None
    generated_at: datetime | None = None
    signed_at: datetime | None = None
