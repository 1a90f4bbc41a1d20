from fastapi import APIRouter, Depends, Query

from fxrates.api.deps import get_app_settings, get_store
from fxrates.core.config import Settings
from fxrates.schemas.currency import (
    ConversionResponse,
    HistoryEntryRead,
    LatestRatesResponse,
    SingleRateResponse,
)
from fxrates.services.currency import convert_amount, normalize_code, parse_amount
from fxrates.services.queries import latest_rates, rate_history, single_rate
from fxrates.services.store import RateStore


router = APIRouter()


@router.get("/convert", response_model=ConversionResponse)
def convert(
    from_currency: str = Query(default="", alias="from"),
    to_currency: str = Query(default="", alias="to"),
    amount: str | None = Query(default=None),
    store: RateStore = Depends(get_store),
) -> ConversionResponse:
    from_code = normalize_code(from_currency)
    to_code = normalize_code(to_currency)
    value = parse_amount(amount)
    result = convert_amount(store, value, from_code, to_code)
    return ConversionResponse(from_currency=from_code, to_currency=to_code, amount=value, result=result)


@router.get("/history", response_model=list[HistoryEntryRead])
def history(
    code: str = Query(default=""),
    start: str | None = Query(default=None),
    end: str | None = Query(default=None),
    store: RateStore = Depends(get_store),
) -> list[HistoryEntryRead]:
    return rate_history(store, code, start, end)


@router.get("/latest", response_model=LatestRatesResponse)
def latest(
    store: RateStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> LatestRatesResponse:
    return latest_rates(store, settings.base_currency)


@router.get("/rates/{code}", response_model=SingleRateResponse)
def rate_detail(
    code: str,
    store: RateStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
) -> SingleRateResponse:
    return single_rate(store, code, settings.base_currency)
