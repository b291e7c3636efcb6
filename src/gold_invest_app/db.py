import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
import logging
from dotenv import load_dotenv
from fastapi import FastAPI
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorClientSession
from beanie import init_beanie
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.admin.models import AuditLogModel
from gold_invest_app.finance.models.investment import InvestmentModel
from gold_invest_app.finance.models.transaction import TransactionModel
from gold_invest_app.gold.models.gold_price import GoldPriceModel

load_dotenv()

logger = logging.getLogger(__name__)

MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017")
DATABASE_NAME = os.getenv("DATABASE_NAME", "goldInvest")
# Multi-document transactions need a replica set
MONGO_TRANSACTIONS = os.getenv("MONGO_TRANSACTIONS", "false").lower() in ("1", "true", "yes")


MODELS = [
    UserModel,
    AuditLogModel,
    InvestmentModel,
    TransactionModel,
    GoldPriceModel,
]

_client: Optional[AsyncIOMotorClient] = None


async def init_db(database) -> None:
    await init_beanie(
        database=database,
        document_models=MODELS,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    global _client
    _client = AsyncIOMotorClient(MONGO_URI, uuidRepresentation="standard")
    await init_db(_client[DATABASE_NAME])
    logger.info(f"Connected to MongoDB: {DATABASE_NAME}")

    yield

    _client.close()
    _client = None
    logger.info("MongoDB connection closed.")


@asynccontextmanager
async def transaction_session() -> AsyncIterator[Optional[AsyncIOMotorClientSession]]:
    """
    Groups paired ledger writes. Yields a session inside a transaction when
    MONGO_TRANSACTIONS is enabled, otherwise None (plain independent writes).
    """
    if not MONGO_TRANSACTIONS or _client is None:
        yield None
        return

    async with await _client.start_session() as session:
        async with session.start_transaction():
            yield session
