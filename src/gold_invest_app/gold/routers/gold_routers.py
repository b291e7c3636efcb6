from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from gold_invest_app.core.base.base import ApiResponse
from gold_invest_app.gold.schemas.gold import GoldPricePoint, GoldPriceResponse
from gold_invest_app.gold.utils.price_cache import as_utc, get_current_price, get_price_history
from gold_invest_app.gold.utils.price_source import PriceSource, get_price_source

router = APIRouter(prefix="/gold", tags=["Gold"])

DEFAULT_HISTORY_DAYS = 30
MAX_HISTORY_DAYS = 3650


def history_days(raw: Optional[str]) -> int:
    """
    Parse the ``days`` query value; anything unusable means the default window.
    """
    try:
        days = int(raw)
    except (TypeError, ValueError):
        return DEFAULT_HISTORY_DAYS
    if days < 1:
        return DEFAULT_HISTORY_DAYS
    return min(days, MAX_HISTORY_DAYS)


@router.get("/price", response_model=ApiResponse[GoldPriceResponse])
async def get_gold_price(source: PriceSource = Depends(get_price_source)):
    """
    Latest gold price, refreshed when the stored one is older than an hour.
    """
    gold_price = await get_current_price(source)
    return ApiResponse(data=GoldPriceResponse(
        price=gold_price.price_usd,
        change_24h=gold_price.change_24h,
        change_percent_24h=gold_price.change_percent_24h,
        timestamp=as_utc(gold_price.timestamp),
    ))


@router.get("/history", response_model=ApiResponse[List[GoldPricePoint]])
async def get_gold_price_history(
    days: Optional[str] = Query(None, description="Window in days, default 30"),
    source: PriceSource = Depends(get_price_source)
):
    points, is_mock = await get_price_history(history_days(days), source)
    return ApiResponse(
        count=len(points),
        data=[GoldPricePoint(price=point.price, date=point.date) for point in points],
        message="Using mock data as historical data is not available" if is_mock else None,
    )
