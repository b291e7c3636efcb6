import logging
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Tuple
from gold_invest_app.gold.models.gold_price import GoldPriceModel
from gold_invest_app.gold.utils.price_source import DEFAULT_GOLD_PRICE_USD, PricePoint, PriceSource

logger = logging.getLogger(__name__)

MAX_PRICE_AGE = timedelta(hours=1)
MIN_HISTORY_POINTS = 5


def as_utc(value: datetime) -> datetime:
    # Mongo hands datetimes back naive (in UTC)
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def is_stale(timestamp: datetime, now: Optional[datetime] = None) -> bool:
    now = now or datetime.now(timezone.utc)
    return now - as_utc(timestamp) > MAX_PRICE_AGE


async def get_current_price(source: PriceSource, now: Optional[datetime] = None) -> GoldPriceModel:
    """
    Latest stored price if it is at most an hour old, otherwise a fresh quote
    from ``source`` which is stored before being returned.
    """
    gold_price = await GoldPriceModel.get_latest_price()

    if gold_price is None or is_stale(gold_price.timestamp, now):
        quote = await source.fetch_quote()
        gold_price = GoldPriceModel(
            price_usd=quote.price,
            change_24h=quote.change_24h,
            change_percent_24h=quote.change_percent_24h,
            source="API",
        )
        if now is not None:
            gold_price.timestamp = now
        await gold_price.insert()
        logger.info(f"Stored new gold price {gold_price.price_usd}")

    return gold_price


async def latest_price_usd() -> float:
    """
    Latest stored price without refreshing it; the default price when nothing is stored.
    """
    gold_price = await GoldPriceModel.get_latest_price()
    if gold_price is None:
        return DEFAULT_GOLD_PRICE_USD
    return gold_price.price_usd


async def get_price_history(days: int, source: PriceSource) -> Tuple[List[PricePoint], bool]:
    """
    Stored prices of the last ``days`` days, oldest first.
    Returns (points, is_mock); a synthesized series replaces sparse data.
    """
    # Stored timestamps are naive UTC
    end_date = datetime.now(timezone.utc).replace(tzinfo=None)
    start_date = end_date - timedelta(days=days)

    history = await GoldPriceModel.find(
        GoldPriceModel.timestamp >= start_date,
        GoldPriceModel.timestamp <= end_date,
    ).sort("timestamp").to_list()

    if len(history) < MIN_HISTORY_POINTS:
        return await source.history(days), True

    return [PricePoint(price=item.price_usd, date=as_utc(item.timestamp)) for item in history], False
