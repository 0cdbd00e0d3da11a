"""Minimal deal record access used by the closing workflow."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.domain.enums import DealStatus
from dealdesk.domain.models import Deal


async def create_deal(
    db: AsyncSession,
    title: str,
    address: str,
    city: Optional[str] = None,
    state: Optional[str] = None,
    price: Optional[float] = None,
    status: DealStatus = DealStatus.DRAFT,
) -> Deal:
    deal = Deal(
        title=title,
        address=address,
        city=city,
        state=state,
        price=price,
        status=DealStatus(status).value,
    )
    db.add(deal)
    await db.flush()
    return deal


async def get_deal(db: AsyncSession, deal_id: str) -> Optional[Deal]:
    result = await db.execute(select(Deal).where(Deal.id == deal_id))
    return result.scalar_one_or_none()
