"""Contract Service - generation and signing of deal contracts."""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from dealdesk.app.config import get_settings
from dealdesk.domain.enums import ContractStatus, ContractType
from dealdesk.domain.models import Contract

logger = logging.getLogger(__name__)

CONTRACT_TITLES: dict[ContractType, str] = {
    ContractType.PURCHASE_AGREEMENT: "PURCHASE AGREEMENT",
    ContractType.ASSIGNMENT: "ASSIGNMENT OF CONTRACT",
    ContractType.AMENDMENT: "AMENDMENT TO PURCHASE AGREEMENT",
}


def render_contract(contract_type: ContractType, deal_id: str, when: datetime) -> str:
    """Render the template body for a newly generated contract."""
    date_str = when.strftime(get_settings().contract_date_format)
    return (
        f"{CONTRACT_TITLES[contract_type]}\n\n"
        f"This agreement is made on {date_str} in connection with deal {deal_id}..."
    )


class ContractService:
    """Generates contracts and tracks their status.

    Methods flush but never commit; the caller owns the transaction.
    """

    async def generate_contract(
        self,
        db: AsyncSession,
        deal_id: str,
        contract_type: ContractType = ContractType.PURCHASE_AGREEMENT,
    ) -> Contract:
        """Generate a contract of ``contract_type`` for a deal.

        Idempotent per (deal, type): an existing contract is returned
        unchanged, without regenerating content or resetting its status.
        """
        contract_type = ContractType(contract_type)
        result = await db.execute(
            select(Contract)
            .where(Contract.deal_id == deal_id, Contract.type == contract_type.value)
            .limit(1)
        )
        existing = result.scalar_one_or_none()
        if existing is not None:
            return existing

        now = datetime.now(timezone.utc)
        contract = Contract(
            deal_id=deal_id,
            type=contract_type.value,
            status=ContractStatus.GENERATED.value,
            content=render_contract(contract_type, deal_id, now),
            generated_at=now,
        )
        db.add(contract)
        await db.flush()

        logger.info("Generated %s contract %s for deal %s", contract_type.value, contract.id, deal_id)
        return contract

    async def get_contracts_by_deal(
        self, db: AsyncSession, deal_id: str
    ) -> list[Contract]:
        """All contracts on a deal, most recently generated first."""
        result = await db.execute(
            select(Contract)
            .where(Contract.deal_id == deal_id)
            .order_by(Contract.generated_at.desc())
        )
        return list(result.scalars().all())

    async def update_status(
        self,
        db: AsyncSession,
        contract_id: str,
        status: ContractStatus,
    ) -> Optional[Contract]:
        """Set a contract's status. Returns None if the contract does not exist.

        SIGNED stamps ``signed_at``; other statuses leave an existing
        ``signed_at`` in place so signing history survives a void.
        """
        result = await db.execute(select(Contract).where(Contract.id == contract_id))
        contract = result.scalar_one_or_none()
        if contract is None:
            return None

        status = ContractStatus(status)
        contract.status = status.value
        if status == ContractStatus.SIGNED:
            contract.signed_at = datetime.now(timezone.utc)

        await db.flush()
        logger.info("Contract %s on deal %s -> %s", contract.id, contract.deal_id, status.value)
        return contract
