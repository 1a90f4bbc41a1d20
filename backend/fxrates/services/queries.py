from __future__ import annotations

from datetime import date, datetime, time, timezone

from pydantic import TypeAdapter, ValidationError

from fxrates.core.errors import InvalidInput
from fxrates.schemas.currency import (
    HealthResponse,
    HistoryEntryRead,
    LatestRatesResponse,
    RateDetail,
    SingleRateResponse,
)
from fxrates.services.currency import normalize_code, round_display
from fxrates.services.store import RateStore, as_utc


_datetime_adapter = TypeAdapter(datetime)
_date_adapter = TypeAdapter(date)


def parse_timestamp(raw: str | None, field: str) -> datetime | None:
    if raw is None or not raw.strip():
        return None
    value = raw.strip()
    try:
        return as_utc(_datetime_adapter.validate_python(value))
    except ValidationError:
        pass
    try:
        day = _date_adapter.validate_python(value)
    except ValidationError as exc:
        raise InvalidInput(f"Fecha invalida en parametro '{field}'") from exc
    return datetime.combine(day, time.min, tzinfo=timezone.utc)


def latest_rates(store: RateStore, base_currency: str) -> LatestRatesResponse:
    rates = {
        row.currency_code: RateDetail(rate=round_display(row.rate_to_base), updated_at=as_utc(row.updated_at))
        for row in store.list_rates()
    }
    return LatestRatesResponse(base=base_currency, rates=rates)


def single_rate(store: RateStore, raw_code: str, base_currency: str) -> SingleRateResponse:
    code = normalize_code(raw_code)
    row = store.get_rate(code)
    return SingleRateResponse(
        code=code,
        rate=round_display(row.rate_to_base),
        base=base_currency,
        updated_at=as_utc(row.updated_at),
    )


def rate_history(
    store: RateStore,
    raw_code: str | None,
    start: str | None = None,
    end: str | None = None,
) -> list[HistoryEntryRead]:
    code = (raw_code or "").strip().upper()
    rows = store.query_history(code, parse_timestamp(start, "start"), parse_timestamp(end, "end"))
    return [
        HistoryEntryRead(code=row.currency_code, rate=round_display(row.rate), date=as_utc(row.recorded_at))
        for row in rows
    ]


def health(store: RateStore) -> tuple[bool, HealthResponse]:
    connected = store.ping()
    return connected, HealthResponse(
        status="available" if connected else "error",
        database="connected" if connected else "disconnected",
        timestamp=datetime.now(timezone.utc),
    )
