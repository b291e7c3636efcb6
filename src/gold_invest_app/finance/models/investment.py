import random
import string
from beanie import before_event, Insert, Replace, Save
from pydantic import Field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID
from pymongo import ASCENDING, IndexModel
from gold_invest_app.core.base.base import BaseCollection


class InvestmentStatus(str, Enum):
    ACTIVE = "active"
    WITHDRAWN = "withdrawn"
    COMPLETED = "completed"


def generate_transaction_id() -> str:
    # e.g. INV-K3J9Q2LZP
    alphabet = string.ascii_uppercase + string.digits
    return "INV-" + "".join(random.choices(alphabet, k=9))


class InvestmentModel(BaseCollection):
    user_id: UUID
    amount: float
    gold_weight_oz: float
    gold_price_at_purchase: float
    status: InvestmentStatus = InvestmentStatus.ACTIVE
    withdrawal_date: Optional[datetime] = None
    investment_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    maturity_date: datetime
    return_rate: float = 5.0  # annual, percent
    transaction_id: Optional[str] = None
    fees: float = 0.0
    notes: Optional[str] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @before_event(Insert)
    def assign_transaction_id(self):
        if not self.transaction_id:
            self.transaction_id = generate_transaction_id()

    @before_event([Save, Replace])
    def update_timestamp(self):
        self.updated_at = datetime.now(timezone.utc)

    def value_at(self, price_usd: float) -> float:
        return self.gold_weight_oz * price_usd

    class Settings:
        name = "investments"
        indexes = [
            IndexModel([("transaction_id", ASCENDING)], unique=True),
            IndexModel([("user_id", ASCENDING)]),
        ]
