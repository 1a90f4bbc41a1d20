from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation

import httpx
from pydantic import ValidationError

from fxrates.core.errors import UpstreamFetchFailed
from fxrates.schemas.currency import RateSnapshot
from fxrates.services.currency import STORAGE_QUANTUM, is_valid_code


logger = logging.getLogger("fxrates.provider")


async def fetch_snapshot(client: httpx.AsyncClient, url: str) -> RateSnapshot:
    try:
        response = await client.get(url)
        response.raise_for_status()
        payload = response.json()
    except httpx.HTTPError as exc:
        raise UpstreamFetchFailed(f"Error de red: {exc}") from exc
    except ValueError as exc:
        raise UpstreamFetchFailed(f"Error JSON: {exc}") from exc

    try:
        snapshot = RateSnapshot.model_validate(payload)
    except ValidationError as exc:
        raise UpstreamFetchFailed("Respuesta del proveedor con formato inesperado") from exc

    if not snapshot.success:
        raise UpstreamFetchFailed("El proveedor reporto un error")
    return snapshot


def _to_decimal(value: float) -> Decimal | None:
    try:
        rate = Decimal(str(value))
    except InvalidOperation:
        return None
    if not rate.is_finite() or rate <= 0:
        return None
    return rate.quantize(STORAGE_QUANTUM)


def parse_quotes(snapshot: RateSnapshot, base_currency: str) -> tuple[dict[str, Decimal], list[str]]:
    """Map pair symbols like ``USDEUR`` to currency codes relative to ``base_currency``.

    Returns the accepted rates and the pair symbols that were discarded.
    """
    rates: dict[str, Decimal] = {}
    skipped: list[str] = []
    for pair, value in snapshot.quotes.items():
        code = pair.removeprefix(base_currency)
        rate = _to_decimal(value)
        if not code or not is_valid_code(code) or rate is None:
            skipped.append(pair)
            continue
        rates[code] = rate

    if skipped:
        logger.debug("discarded %d quotes: %s", len(skipped), ", ".join(sorted(skipped)))
    return rates, skipped
