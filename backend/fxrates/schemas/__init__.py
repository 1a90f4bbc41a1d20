from fxrates.schemas.currency import (
    ConversionResponse,
    HealthResponse,
    HistoryEntryRead,
    LatestRatesResponse,
    RateDetail,
    RateSnapshot,
    SingleRateResponse,
)

__all__ = [
    "ConversionResponse",
    "HealthResponse",
    "HistoryEntryRead",
    "LatestRatesResponse",
    "RateDetail",
    "RateSnapshot",
    "SingleRateResponse",
]
