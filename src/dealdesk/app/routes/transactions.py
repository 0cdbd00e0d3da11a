"""Transaction timeline API endpoints.

Reads and toggles a deal's closing milestones and performs close-out.
Role checks (only agents toggle steps) are enforced upstream of this API.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.domain.schemas import (
    DealResponse,
    StepProgressResponse,
    TransactionStepResponse,
    TransactionStepUpdate,
)
from dealdesk.infra.database import get_db
from dealdesk.services.deal_service import get_deal
from dealdesk.services.transaction_service import (
    CloseDealError,
    DealNotFoundError,
    IncompleteStepsError,
    TransactionService,
    UnsignedContractError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/transactions", tags=["transactions"])
service = TransactionService()


async def _require_deal(db: AsyncSession, deal_id: str) -> None:
    if await get_deal(db, deal_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deal {deal_id} not found",
        )


@router.get(
    "/deals/{deal_id}/steps",
    response_model=list[TransactionStepResponse],
)
async def list_steps(deal_id: str, db: AsyncSession = Depends(get_db)):
    """Return the deal's milestones in order, creating the defaults on first access."""
    await _require_deal(db, deal_id)
    steps = await service.get_steps_by_deal(db, deal_id)
    await db.commit()
    return steps


@router.get("/deals/{deal_id}/progress", response_model=StepProgressResponse)
async def step_progress(deal_id: str, db: AsyncSession = Depends(get_db)):
    await _require_deal(db, deal_id)
    progress = await service.get_progress(db, deal_id)
    await db.commit()
    return StepProgressResponse(deal_id=deal_id, **progress.as_dict())


@router.patch("/steps/{step_id}", response_model=TransactionStepResponse)
async def update_step(
    step_id: str,
    data: TransactionStepUpdate,
    db: AsyncSession = Depends(get_db),
):
    step = await service.update_step_status(db, step_id, data.status, notes=data.notes)
    if step is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Transaction step {step_id} not found",
        )
    await db.commit()
    return step


@router.post("/deals/{deal_id}/close", response_model=DealResponse)
async def close_deal(deal_id: str, db: AsyncSession = Depends(get_db)):
    """Finalize closing.

    409 when milestones are outstanding (every incomplete label is listed)
    or no contract has been signed; 404 when the deal does not exist.
    """
    try:
        deal = await service.close_deal(db, deal_id)
    except IncompleteStepsError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "code": e.code,
                "message": str(e),
                "incomplete_steps": e.labels,
            },
        )
    except UnsignedContractError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": e.code, "message": str(e)},
        )
    except DealNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"code": e.code, "message": str(e)},
        )
    except CloseDealError as e:
        logger.warning("Close of deal %s refused: %s", deal_id, e)
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={"code": e.code, "message": str(e)},
        )

    await db.commit()
    return deal
