from datetime import datetime, timezone
from typing import Optional
from pydantic import Field
from pymongo import DESCENDING, IndexModel
from gold_invest_app.core.base.base import BaseCollection


class GoldPriceModel(BaseCollection):
    """
    Append-only log of gold price snapshots (USD per troy ounce).
    """
    price_usd: float
    change_24h: float = 0.0
    change_percent_24h: float = 0.0
    volume_24h: Optional[float] = None
    market_cap: Optional[float] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: str = "API"

    class Settings:
        name = "gold_prices"
        indexes = [IndexModel([("timestamp", DESCENDING)])]

    @classmethod
    async def get_latest_price(cls) -> Optional["GoldPriceModel"]:
        return await cls.find_all().sort("-timestamp").first_or_none()
