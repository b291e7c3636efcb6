from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from gold_invest_app.core.base.base import ApiResponse
from gold_invest_app.finance.models.investment import InvestmentModel
from gold_invest_app.finance.schemas.investment import InvestmentCreate, InvestmentResponse, WithdrawalResponse
from gold_invest_app.finance.utils import ledger
from gold_invest_app.gold.utils.price_cache import latest_price_usd
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.utils.get_current_user import get_current_user

router = APIRouter(prefix="/investments", tags=["Investments"])


def _with_value(investment: InvestmentModel, price_usd: float) -> InvestmentResponse:
    response = InvestmentResponse.model_validate(investment)
    response.current_value = investment.value_at(price_usd)
    return response


@router.post("", response_model=ApiResponse[InvestmentResponse], status_code=status.HTTP_201_CREATED)
async def create_investment(
    data: InvestmentCreate,
    current_user: UserModel = Depends(get_current_user)
):
    investment = await ledger.create_investment(current_user, data.amount)
    return ApiResponse(data=_with_value(investment, investment.gold_price_at_purchase))


@router.get("", response_model=ApiResponse[List[InvestmentResponse]])
async def get_investments(current_user: UserModel = Depends(get_current_user)):
    """
    All investments of the current user, newest first, valued at the latest price.
    """
    investments = await InvestmentModel.find(
        InvestmentModel.user_id == current_user.id
    ).sort("-created_at").to_list()
    price = await latest_price_usd()
    return ApiResponse(
        count=len(investments),
        data=[_with_value(investment, price) for investment in investments],
    )


@router.get("/{investment_id}", response_model=ApiResponse[InvestmentResponse])
async def get_investment(investment_id: UUID, current_user: UserModel = Depends(get_current_user)):
    investment = await ledger.get_investment_for(investment_id, current_user)
    return ApiResponse(data=_with_value(investment, await latest_price_usd()))


@router.put("/{investment_id}/withdraw", response_model=WithdrawalResponse)
async def withdraw_investment(investment_id: UUID, current_user: UserModel = Depends(get_current_user)):
    investment, withdrawal_amount = await ledger.withdraw_investment(investment_id, current_user)
    response = InvestmentResponse.model_validate(investment)
    response.current_value = withdrawal_amount
    return WithdrawalResponse(
        message="Investment withdrawn successfully",
        data=response,
        withdrawal_amount=withdrawal_amount,
    )
