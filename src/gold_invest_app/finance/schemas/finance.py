from datetime import datetime
from typing import Optional
from uuid import UUID
from gold_invest_app.core.base.base import BaseResponse
from gold_invest_app.finance.models.transaction import PaymentMethod, TransactionStatus, TransactionType


class TransactionResponse(BaseResponse):
    user_id: UUID
    investment_id: Optional[UUID] = None
    type: TransactionType
    amount: float
    currency: str
    status: TransactionStatus
    payment_method: PaymentMethod
    description: Optional[str] = None
    reference_id: Optional[str] = None
    transaction_date: datetime
    created_at: datetime
