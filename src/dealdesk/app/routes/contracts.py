"""Contract API endpoints: list, generate, and status changes (signing/voiding)."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.domain.schemas import (
    ContractGenerate,
    ContractResponse,
    ContractStatusUpdate,
)
from dealdesk.infra.database import get_db
from dealdesk.services.contract_service import ContractService
from dealdesk.services.deal_service import get_deal

router = APIRouter(prefix="/api/contracts", tags=["contracts"])
service = ContractService()


@router.get("/deals/{deal_id}", response_model=list[ContractResponse])
async def list_contracts(deal_id: str, db: AsyncSession = Depends(get_db)):
    """Contracts on a deal, newest first."""
    if await get_deal(db, deal_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deal {deal_id} not found",
        )
    return await service.get_contracts_by_deal(db, deal_id)


@router.post("/generate", response_model=ContractResponse)
async def generate_contract(
    data: ContractGenerate,
    db: AsyncSession = Depends(get_db),
):
    """Generate a contract, or return the existing one of the same type."""
    if await get_deal(db, data.deal_id) is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Deal {data.deal_id} not found",
        )
    contract = await service.generate_contract(db, data.deal_id, data.type)
    await db.commit()
    return contract


@router.patch("/{contract_id}/status", response_model=ContractResponse)
async def update_contract_status(
    contract_id: str,
    data: ContractStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    contract = await service.update_status(db, contract_id, data.status)
    if contract is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Contract {contract_id} not found",
        )
    await db.commit()
    return contract
