from datetime import datetime
from pydantic import Field
from gold_invest_app.core.base.base import CamelModel


class GoldPriceResponse(CamelModel):
    price: float
    # to_camel would give "change24H"
    change_24h: float = Field(alias="change24h")
    change_percent_24h: float = Field(alias="changePercent24h")
    timestamp: datetime


class GoldPricePoint(CamelModel):
    price: float
    date: datetime
