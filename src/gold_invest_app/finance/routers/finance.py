from fastapi import APIRouter, Depends, Query
from typing import List
from gold_invest_app.core.base.base import ApiResponse
from gold_invest_app.users.utils.get_current_user import get_current_user
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.finance.models.transaction import TransactionModel
from gold_invest_app.finance.schemas.finance import TransactionResponse

router = APIRouter(prefix="/transactions", tags=["Transactions"])

@router.get("", response_model=ApiResponse[List[TransactionResponse]])
async def get_transaction_history(
    current_user: UserModel = Depends(get_current_user),
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=200)
):
    """
    Get the transaction history for the current user.
    Sorted by latest first.
    """
    transactions = await TransactionModel.find(
        TransactionModel.user_id == current_user.id
    ).sort(-TransactionModel.created_at).skip(skip).limit(limit).to_list()

    return ApiResponse(
        count=len(transactions),
        data=[TransactionResponse.model_validate(transaction) for transaction in transactions],
    )
