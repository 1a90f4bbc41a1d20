from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field


class RateSnapshot(BaseModel):
    model_config = ConfigDict(extra="ignore")

    success: bool = True
    timestamp: int | None = None
    quotes: dict[str, float] = Field(default_factory=dict)


class ConversionResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_currency: str = Field(alias="from")
    to_currency: str = Field(alias="to")
    amount: Decimal
    result: Decimal


class HistoryEntryRead(BaseModel):
    code: str
    rate: Decimal
    date: datetime


class RateDetail(BaseModel):
    rate: Decimal
    updated_at: datetime


class LatestRatesResponse(BaseModel):
    base: str
    rates: dict[str, RateDetail]


class SingleRateResponse(BaseModel):
    code: str
    rate: Decimal
    base: str
    updated_at: datetime


class HealthResponse(BaseModel):
    status: str
    database: str
    timestamp: datetime
