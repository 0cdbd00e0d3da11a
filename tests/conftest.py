"""Shared test infrastructure for the deal closing test suite.

Provides:
- db_session: async SQLite in-memory session with all tables created
- make_deal: factory for Deal rows
- make_step: factory for hand-built TransactionStep rows
- make_contract: factory for Contract rows in an arbitrary status
- api_client: HTTPX AsyncClient wired to the API routers, one session per request
"""

import uuid
from datetime import datetime, timezone

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

# Import Base first, then models to register all tables
from dealdesk.infra.database import Base, enable_sqlite_foreign_keys

import dealdesk.domain.models  # noqa: F401

from dealdesk.domain.enums import (
    ContractStatus,
    ContractType,
    DealStatus,
    TransactionRole,
    TransactionStepStatus,
)
from dealdesk.domain.models import Contract, Deal, TransactionStep


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------

@pytest.fixture
async def db_session():
    """Async SQLite in-memory session with all tables created.

    Foreign keys are enforced so deal deletion cascades like production.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

    async with session_factory() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


# ---------------------------------------------------------------------------
# Deal factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_deal(db_session):
    """Factory that creates a Deal row.

    Usage:
        deal = await make_deal(status=DealStatus.UNDER_CONTRACT)
    """
    async def _factory(
        title: str = "Test Duplex",
        address: str = "123 Main St",
        status: DealStatus = DealStatus.UNDER_CONTRACT,
    ) -> Deal:
        deal = Deal(
            id=str(uuid.uuid4()),
            title=title,
            address=address,
            city="Phoenix",
            state="AZ",
            price=250000,
            status=status.value,
        )
        db_session.add(deal)
        await db_session.flush()
        return deal

    return _factory


# ---------------------------------------------------------------------------
# Step factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_step(db_session):
    """Factory that creates a single TransactionStep row, bypassing the catalog.

    Usage:
        step = await make_step(deal.id, "Appraisal", 1, TransactionStepStatus.PENDING)
    """
    async def _factory(
        deal_id: str,
        label: str,
        order: int,
        status: TransactionStepStatus = TransactionStepStatus.PENDING,
        assigned_to: TransactionRole = TransactionRole.AGENT,
    ) -> TransactionStep:
        step = TransactionStep(
            id=str(uuid.uuid4()),
            deal_id=deal_id,
            label=label,
            order=order,
            status=status.value,
            assigned_to=assigned_to.value,
            completed_at=(
                datetime.now(timezone.utc)
                if status == TransactionStepStatus.COMPLETE
                else None
            ),
        )
        db_session.add(step)
        await db_session.flush()
        return step

    return _factory


# ---------------------------------------------------------------------------
# Contract factory
# ---------------------------------------------------------------------------

@pytest.fixture
def make_contract(db_session):
    """Factory that creates a Contract row in any status.

    Usage:
        contract = await make_contract(deal.id, status=ContractStatus.SIGNED)
    """
    async def _factory(
        deal_id: str,
        status: ContractStatus = ContractStatus.DRAFT,
        contract_type: ContractType = ContractType.PURCHASE_AGREEMENT,
    ) -> Contract:
        now = datetime.now(timezone.utc)
        contract = Contract(
            id=str(uuid.uuid4()),
            deal_id=deal_id,
            type=contract_type.value,
            status=status.value,
            content="TEST CONTRACT",
            generated_at=now,
            signed_at=now if status == ContractStatus.SIGNED else None,
        )
        db_session.add(contract)
        await db_session.flush()
        return contract

    return _factory


# ---------------------------------------------------------------------------
# API client
# ---------------------------------------------------------------------------

@pytest.fixture
async def api_client(tmp_path):
    """HTTPX AsyncClient against a FastAPI app carrying only the API routers.

    get_db is overridden to open a new session per request on a file-backed
    SQLite database, so every request reads committed rows back from storage
    the way production does.
    """
    from fastapi import FastAPI

    from dealdesk.app.routes.contracts import router as contracts_router
    from dealdesk.app.routes.deals import router as deals_router
    from dealdesk.app.routes.transactions import router as transactions_router
    from dealdesk.infra.database import get_db

    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'api.db'}",
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False,
    )

    test_app = FastAPI()
    test_app.include_router(deals_router)
    test_app.include_router(transactions_router)
    test_app.include_router(contracts_router)

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    test_app.dependency_overrides[get_db] = _override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://testserver",
    ) as client:
        yield client

    await engine.dispose()
