"""
Investment ledger: every investment change is paired with a Transaction entry.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Tuple
from uuid import UUID
from beanie import UpdateResponse
from beanie.operators import Set
from fastapi import HTTPException, status
from gold_invest_app.db import transaction_session
from gold_invest_app.finance.models.investment import InvestmentModel, InvestmentStatus
from gold_invest_app.finance.models.transaction import (
    PaymentMethod, TransactionModel, TransactionStatus, TransactionType
)
from gold_invest_app.gold.utils.price_cache import latest_price_usd
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.utils.user_role import UserRole

logger = logging.getLogger(__name__)

MIN_INVESTMENT_USD = 100


def one_year_after(moment: datetime) -> datetime:
    try:
        return moment.replace(year=moment.year + 1)
    except ValueError:
        # 29 February rolls over to 1 March
        return moment.replace(year=moment.year + 1, month=3, day=1)


async def create_investment(user: UserModel, amount: float) -> InvestmentModel:
    if amount is None or not math.isfinite(amount) or amount < MIN_INVESTMENT_USD:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Minimum investment amount is ${MIN_INVESTMENT_USD}",
        )

    price = await latest_price_usd()
    now = datetime.now(timezone.utc)

    investment = InvestmentModel(
        user_id=user.id,
        amount=amount,
        gold_weight_oz=amount / price,
        gold_price_at_purchase=price,
        investment_date=now,
        maturity_date=one_year_after(now),
        status=InvestmentStatus.ACTIVE,
    )

    async with transaction_session() as session:
        await investment.insert(session=session)
        await TransactionModel(
            user_id=user.id,
            investment_id=investment.id,
            type=TransactionType.DEPOSIT,
            amount=amount,
            status=TransactionStatus.COMPLETED,
            description="Investment deposit",
        ).insert(session=session)

    logger.info(f"Investment {investment.transaction_id} created for user {user.id}: ${amount} at ${price}/oz")
    return investment


async def get_investment_for(investment_id: UUID, user: UserModel, allow_admin: bool = True) -> InvestmentModel:
    """
    Fetch an investment the caller may see. Admins may read any investment.
    """
    investment = await InvestmentModel.get(investment_id)
    if not investment:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Investment not found")

    is_owner = investment.user_id == user.id
    if not is_owner and not (allow_admin and user.role == UserRole.ADMIN):
        action = "access" if allow_admin else "withdraw"
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action} this investment",
        )
    return investment


def _already_closed(investment: InvestmentModel) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail=f"Investment is already {investment.status.value}",
    )


async def withdraw_investment(investment_id: UUID, user: UserModel) -> Tuple[InvestmentModel, float]:
    """
    Close an active investment at the latest gold price.
    Returns the updated investment and the amount paid out.
    """
    investment = await get_investment_for(investment_id, user, allow_admin=False)
    if investment.status != InvestmentStatus.ACTIVE:
        raise _already_closed(investment)

    current_value = investment.value_at(await latest_price_usd())
    now = datetime.now(timezone.utc)

    async with transaction_session() as session:
        # Only an active document matches, so concurrent withdrawals flip it once
        updated = await InvestmentModel.find_one(
            InvestmentModel.id == investment.id,
            InvestmentModel.status == InvestmentStatus.ACTIVE,
        ).update(
            Set({
                InvestmentModel.status: InvestmentStatus.WITHDRAWN,
                InvestmentModel.withdrawal_date: now,
                InvestmentModel.updated_at: now,
            }),
            session=session,
            response_type=UpdateResponse.NEW_DOCUMENT,
        )
        if updated is None:
            await investment.fetch()
            raise _already_closed(investment)

        await TransactionModel(
            user_id=user.id,
            investment_id=investment.id,
            type=TransactionType.WITHDRAWAL,
            amount=current_value,
            status=TransactionStatus.COMPLETED,
            payment_method=PaymentMethod.BANK_TRANSFER,
            description="Investment withdrawal",
        ).insert(session=session)

    logger.info(f"Investment {updated.transaction_id} withdrawn by user {user.id} for ${current_value:.2f}")
    return updated, current_value
