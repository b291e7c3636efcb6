"""
Where fresh gold prices come from.

The default source produces mock prices; set GOLD_PRICE_API_URL to poll a
real JSON feed instead. Callers depend on ``get_price_source`` only.
"""
import os
import random
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import List, Optional
import requests
from dotenv import load_dotenv
from pydantic import BaseModel
from starlette.concurrency import run_in_threadpool

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_GOLD_PRICE_USD = 2000.0
GOLD_PRICE_API_URL = os.getenv("GOLD_PRICE_API_URL")
GOLD_PRICE_API_KEY = os.getenv("GOLD_PRICE_API_KEY")
REQUEST_TIMEOUT_SECONDS = 10


class PriceQuote(BaseModel):
    price: float
    change_24h: float = 0.0
    change_percent_24h: float = 0.0


class PricePoint(BaseModel):
    price: float
    date: datetime


DEFAULT_QUOTE = PriceQuote(price=DEFAULT_GOLD_PRICE_USD)


def generate_mock_history(days: int, rng: Optional[random.Random] = None) -> List[PricePoint]:
    """
    One point per day for the last ``days`` days (inclusive of today),
    starting between $1900 and $2100 with 0.5% daily volatility.
    """
    rng = rng or random.Random()
    end_date = datetime.now(timezone.utc)
    volatility = 0.5
    price = 1900 + rng.random() * 200

    points = []
    for offset in range(days, -1, -1):
        random_change = (rng.random() * 2 - 1) * volatility / 100
        price = price * (1 + random_change)
        points.append(PricePoint(date=end_date - timedelta(days=offset), price=round(price, 2)))
    return points


class PriceSource(ABC):

    @abstractmethod
    async def fetch_quote(self) -> PriceQuote:
        ...

    async def history(self, days: int) -> List[PricePoint]:
        return generate_mock_history(days)


class MockPriceSource(PriceSource):
    """Random prices around $2000."""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    async def fetch_quote(self) -> PriceQuote:
        base_price = DEFAULT_GOLD_PRICE_USD + (self.rng.random() * 100 - 50)
        change_24h = self.rng.random() * 20 - 10
        return PriceQuote(
            price=round(base_price, 2),
            change_24h=round(change_24h, 2),
            change_percent_24h=round(change_24h / base_price * 100, 2),
        )

    async def history(self, days: int) -> List[PricePoint]:
        return generate_mock_history(days, self.rng)


class HttpPriceSource(PriceSource):
    """
    Polls a JSON endpoint returning at least ``price`` (and optionally
    ``change24h`` / ``changePercent24h``). Any failure yields the default quote.
    """

    def __init__(self, url: str, api_key: Optional[str] = None):
        self.url = url
        self.api_key = api_key

    def _get(self) -> dict:
        headers = {"API-Key": self.api_key} if self.api_key else {}
        response = requests.get(self.url, headers=headers, timeout=REQUEST_TIMEOUT_SECONDS)
        response.raise_for_status()
        return response.json()

    async def fetch_quote(self) -> PriceQuote:
        try:
            payload = await run_in_threadpool(self._get)
            price = float(payload["price"])
            change_24h = float(payload.get("change24h", 0.0))
            change_percent = payload.get("changePercent24h")
            if change_percent is None:
                change_percent = change_24h / price * 100 if price else 0.0
            return PriceQuote(
                price=round(price, 2),
                change_24h=round(change_24h, 2),
                change_percent_24h=round(float(change_percent), 2),
            )
        except (requests.RequestException, KeyError, TypeError, ValueError) as e:
            logger.error(f"Error fetching gold price from {self.url}: {e}")
            return DEFAULT_QUOTE


_mock_source = MockPriceSource()


def get_price_source() -> PriceSource:
    """FastAPI dependency; override it in tests or to plug another feed."""
    if GOLD_PRICE_API_URL:
        return HttpPriceSource(GOLD_PRICE_API_URL, GOLD_PRICE_API_KEY)
    return _mock_source
