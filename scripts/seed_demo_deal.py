"""Seed a demo deal with its default milestones and a generated purchase agreement.

Usage:
    python scripts/seed_demo_deal.py            # create / reset the demo deal
    python scripts/seed_demo_deal.py --ready    # also complete every step and sign the contract
"""

import argparse
import asyncio
import logging

from sqlalchemy import delete

from dealdesk.domain.enums import ContractStatus, DealStatus, TransactionStepStatus
from dealdesk.domain.models import Deal
from dealdesk.infra.database import async_session, init_db
from dealdesk.services.contract_service import ContractService
from dealdesk.services.transaction_service import TransactionService

logger = logging.getLogger(__name__)

DEMO_DEAL_ID = "dddddddd-0000-0000-0000-000000000001"


async def seed(ready: bool) -> None:
    await init_db()
    transactions = TransactionService()
    contracts = ContractService()

    async with async_session() as session:
        async with session.begin():
            await session.execute(delete(Deal).where(Deal.id == DEMO_DEAL_ID))
            session.add(Deal(
                id=DEMO_DEAL_ID,
                title="Demo Duplex",
                address="100 Test Ave",
                city="Phoenix",
                state="AZ",
                price=285000,
                status=DealStatus.UNDER_CONTRACT.value,
            ))
            await session.flush()

            steps = await transactions.get_steps_by_deal(session, DEMO_DEAL_ID)
            contract = await contracts.generate_contract(session, DEMO_DEAL_ID)

            if ready:
                for step in steps:
                    if step.status != TransactionStepStatus.COMPLETE:
                        await transactions.update_step_status(
                            session, step.id, TransactionStepStatus.COMPLETE
                        )
                await contracts.update_status(session, contract.id, ContractStatus.SIGNED)

    logger.info("Seeded demo deal %s (ready=%s)", DEMO_DEAL_ID, ready)
    print(f"SEED COMPLETE: deal {DEMO_DEAL_ID}")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--ready", action="store_true", help="complete all steps and sign the contract")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(seed(args.ready))


if __name__ == "__main__":
    main()
