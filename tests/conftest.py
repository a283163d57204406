"""Shared test fixtures.

Engine tests run against an on-disk SQLite database (aiosqlite) created per
test under tmp_path. Each service call gets its own session, as it would
per request; services open their own transactions.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-do-not-use-in-production")

from collections.abc import AsyncGenerator
from dataclasses import dataclass
from pathlib import Path

import pytest
import pytest_asyncio
from solders.keypair import Keypair
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

import src.em_ledger.infrastructure.db_models  # noqa: F401  (registers tables on Base)
from src.em_common.database import Base, build_engine
from src.em_common.lamports import LAMPORTS_PER_SOL
from src.em_ledger.application.asset_service import AssetService
from src.em_ledger.domain.derivation import associated_token_address
from src.em_ledger.infrastructure.persistence import LedgerRepository
from src.em_listing.application.service import ListingService
from src.em_marketplace.application.service import MarketplaceService
from src.em_settlement.application.service import SettlementService

STARTING_BALANCE = 10 * LAMPORTS_PER_SOL


def new_wallet() -> str:
    return str(Keypair().pubkey())


class FakeRedis:
    """In-memory stand-in for the two Redis commands the sign-in flow uses."""

    def __init__(self) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int | None] = {}

    async def set(self, key: str, value: str, ex: int | None = None) -> bool:
        self.store[key] = value
        self.ttls[key] = ex
        return True

    async def getdel(self, key: str) -> str | None:
        self.ttls.pop(key, None)
        return self.store.pop(key, None)


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    eng = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'ledger.db'}")
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def sessions(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@dataclass
class Ledger:
    """Test-side view of the ledger: funding, issuing and balance reads."""

    sessions: async_sessionmaker[AsyncSession]
    repo: LedgerRepository
    assets: AssetService

    async def fund(self, address: str, lamports: int = STARTING_BALANCE) -> str:
        async with self.sessions() as db:
            await self.assets.airdrop(db, address, lamports)
        return address

    async def wallet(self, lamports: int = STARTING_BALANCE) -> str:
        return await self.fund(new_wallet(), lamports)

    async def issue(
        self,
        creator: str,
        owner: str,
        collection: str | None,
        verified: bool = True,
        decimals: int = 0,
    ) -> str:
        async with self.sessions() as db:
            return await self.assets.issue_collectible(
                db, creator, owner, collection, collection_verified=verified, decimals=decimals
            )

    async def lamports(self, address: str) -> int:
        async with self.sessions() as db:
            account = await self.repo.get_account(db, address)
        return account.lamports if account is not None else 0

    async def exists(self, address: str) -> bool:
        async with self.sessions() as db:
            if await self.repo.get_account(db, address) is not None:
                return True
            return await self.repo.get_token_account(db, address) is not None

    async def holding(self, owner: str, mint: str) -> int | None:
        """Token amount in owner's associated holding account, None if it does not exist."""
        async with self.sessions() as db:
            account = await self.repo.get_token_account(db, associated_token_address(owner, mint))
        return account.amount if account is not None else None


@pytest.fixture
def ledger(sessions: async_sessionmaker[AsyncSession]) -> Ledger:
    repo = LedgerRepository()
    return Ledger(sessions=sessions, repo=repo, assets=AssetService(repo))


@pytest.fixture
def marketplaces() -> MarketplaceService:
    return MarketplaceService()


@pytest.fixture
def listings() -> ListingService:
    return ListingService()


@pytest.fixture
def settlement() -> SettlementService:
    return SettlementService()


@dataclass
class Gallery:
    """Marketplace "Gallery" (fee 250 bps) with one verified collectible held by the seller."""

    name: str
    admin: str
    creator: str
    seller: str
    buyer: str
    collection: str
    asset: str


@pytest_asyncio.fixture
async def gallery(
    ledger: Ledger, sessions: async_sessionmaker[AsyncSession], marketplaces: MarketplaceService
) -> Gallery:
    admin = await ledger.wallet()
    creator = await ledger.wallet()
    seller = await ledger.wallet()
    buyer = await ledger.wallet()
    collection = new_wallet()
    asset = await ledger.issue(creator, seller, collection)
    async with sessions() as db:
        await marketplaces.init_marketplace(db, admin, "Gallery", 250)
    return Gallery(
        name="Gallery",
        admin=admin,
        creator=creator,
        seller=seller,
        buyer=buyer,
        collection=collection,
        asset=asset,
    )
