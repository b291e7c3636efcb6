from datetime import datetime
from typing import Optional
from pydantic import Field
from uuid import UUID
from gold_invest_app.core.base.base import ApiResponse, BaseResponse, CamelModel
from gold_invest_app.finance.models.investment import InvestmentStatus


class InvestmentCreate(CamelModel):
    amount: Optional[float] = Field(None, allow_inf_nan=False)


class InvestmentResponse(BaseResponse):
    user_id: UUID
    amount: float
    gold_weight_oz: float
    gold_price_at_purchase: float
    status: InvestmentStatus
    withdrawal_date: Optional[datetime] = None
    investment_date: datetime
    maturity_date: datetime
    return_rate: float
    transaction_id: Optional[str] = None
    fees: float = 0.0
    notes: Optional[str] = None
    current_value: Optional[float] = None
    created_at: datetime
    updated_at: datetime


class WithdrawalResponse(ApiResponse[InvestmentResponse]):
    withdrawal_amount: float
