"""Deal record endpoints (create / fetch) backing the closing workflow."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.domain.schemas import DealCreate, DealResponse
from dealdesk.infra.database import get_db
from dealdesk.services import deal_service

router = APIRouter(prefix="/api/deals", tags=["deals"])


@router.post("", response_model=DealResponse, status_code=status.HTTP_201_CREATED)
async def create_deal(data: DealCreate, db: AsyncSession = Depends(get_db)):
    deal = await deal_service.create_deal(
        db,
        title=data.title,
        address=data.address,
        city=data.city,
        state=data.state,
        price=data.price,
        status=data.status,
    )
    await db.commit()
    return deal


@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(deal_id: str, db: AsyncSession = Depends(get_db)):
    deal = await deal_service.get_deal(db, deal_id)
    if deal is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deal {deal_id} not found",
        )
    return deal
