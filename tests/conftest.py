"""Pytest configuration and shared fixtures for all tests."""

import os
import sys
from pathlib import Path

# Minimal environment for settings validation
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("EXPLORER_API_URL", "https://api.bscscan.test/api")
os.environ.setdefault("EXPLORER_API_KEY", "test_api_key")
os.environ.setdefault("STABLE_TOKEN_CONTRACT_ADDRESS", "0x55d398326f99059fF775485246999027B3197955")
os.environ.setdefault("RPC_URL", "https://bsc-dataseed.binance.org/")
os.environ.setdefault("COMPANY_GAS_WALLET_ADDRESS", "0x742d35Cc6634C0532925a3b844Bc9e7595f0bEb0")
os.environ.setdefault("KEY_STORE_PATH", "/nonexistent/privateKey.json")
os.environ.setdefault("LOG_FILE", "logs/test.log")

# Add project root to PYTHONPATH
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from boostx.models import Base, User, Wallet



@pytest_asyncio.fixture
async def db_engine():
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    """Session factory bound to the test engine."""
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Database session for a single test."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """Factory: create a user, optionally with a wallet."""

    async def _make_user(
        username: str,
        referrer_username: str | None = None,
        wallet_address: str | None = None,
        token_balance: Decimal = Decimal("0"),
        gas_balance: Decimal = Decimal("0"),
    ) -> User:
        user = User(username=username, referrer_username=referrer_username)
        db_session.add(user)
        await db_session.flush()
        if wallet_address is not None:
            db_session.add(
                Wallet(
                    user_id=user.id,
                    address=wallet_address,
                    stable_token_balance=token_balance,
                    native_gas_balance=gas_balance,
                )
            )
        await db_session.commit()
        return user

    return _make_user


@pytest.fixture
def mock_gateway():
    """Mock LedgerGateway: no transfers, healthy gas balance."""
    gateway = AsyncMock()
    gateway.get_token_transfers = AsyncMock(return_value=[])
    gateway.get_token_balance = AsyncMock(return_value=0)
    gateway.get_native_balance = AsyncMock(return_value=Decimal("0.01"))
    gateway.send_native = AsyncMock(return_value="0x" + "cd" * 32)
    gateway.close = AsyncMock()
    return gateway


@pytest.fixture
def sample_transaction_hash():
    """Sample transaction hash for testing."""
    return "0x1234567890abcdef1234567890abcdef1234567890abcdef1234567890abcdef"
