from fxrates.models.currency import ExchangeRate
from fxrates.models.rate_history import RateHistory

__all__ = [
    "ExchangeRate",
    "RateHistory",
]
