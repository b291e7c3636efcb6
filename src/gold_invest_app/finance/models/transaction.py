import random
import time
from beanie import before_event, Insert
from pydantic import Field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID
from pymongo import ASCENDING, DESCENDING, IndexModel
from gold_invest_app.core.base.base import BaseCollection


class TransactionType(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INTEREST = "interest"
    FEE = "fee"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    BANK_TRANSFER = "bank_transfer"
    CREDIT_CARD = "credit_card"
    PAYPAL = "paypal"
    CRYPTO = "crypto"
    SYSTEM = "system"


def generate_reference_id(transaction_type: TransactionType) -> str:
    # e.g. D-1712345678901-42
    prefix = transaction_type.value[0].upper()
    return f"{prefix}-{int(time.time() * 1000)}-{random.randint(0, 999)}"


class TransactionModel(BaseCollection):
    """
    Append-only ledger entry. Never updated once inserted.
    """
    user_id: UUID
    investment_id: Optional[UUID] = None
    type: TransactionType
    amount: float
    currency: str = "USD"
    status: TransactionStatus = TransactionStatus.PENDING
    payment_method: PaymentMethod = PaymentMethod.BANK_TRANSFER
    description: Optional[str] = None
    reference_id: Optional[str] = None
    transaction_date: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @before_event(Insert)
    def assign_reference_id(self):
        if not self.reference_id:
            self.reference_id = generate_reference_id(self.type)

    class Settings:
        name = "transactions"
        indexes = [
            IndexModel([("user_id", ASCENDING), ("created_at", DESCENDING)]),
            IndexModel([("investment_id", ASCENDING)]),
        ]
