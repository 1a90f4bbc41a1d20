from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal, DecimalException, InvalidOperation, localcontext
from typing import TYPE_CHECKING

from fxrates.core.errors import InvalidInput

if TYPE_CHECKING:
    from fxrates.services.store import RateStore


CURRENCY_CODE_RE = re.compile(r"^[A-Z]{3}$")
RESULT_QUANTUM = Decimal("0.0001")
DISPLAY_QUANTUM = Decimal("0.000001")
STORAGE_QUANTUM = Decimal("0.00000001")
MAX_AMOUNT_EXPONENT = 100
GUARD_DIGITS = 14


def is_valid_code(code: str) -> bool:
    return bool(CURRENCY_CODE_RE.match(code or ""))


def normalize_code(raw: str | None) -> str:
    code = (raw or "").strip().upper()
    if not is_valid_code(code):
        raise InvalidInput("Codigo de moneda invalido")
    return code


def parse_amount(raw: str | None) -> Decimal:
    if raw is None or not raw.strip():
        return Decimal(1)
    try:
        amount = Decimal(raw.strip())
    except InvalidOperation as exc:
        raise InvalidInput("Monto invalido") from exc
    if not amount.is_finite():
        raise InvalidInput("Monto invalido")
    if amount.is_zero():
        return Decimal(1)
    return amount


def round_display(value: Decimal) -> Decimal:
    return value.quantize(DISPLAY_QUANTUM, rounding=ROUND_HALF_UP)


def _working_precision(amount: Decimal, rate_from: Decimal, rate_to: Decimal) -> int:
    digits = sum(len(value.as_tuple().digits) for value in (amount, rate_from, rate_to))
    int_digits = max(amount.adjusted() + rate_to.adjusted() - rate_from.adjusted() + 2, 0)
    return max(28, digits + int_digits + GUARD_DIGITS)


def cross_rate_amount(amount: Decimal, rate_from: Decimal, rate_to: Decimal) -> Decimal:
    if rate_from <= 0:
        raise InvalidInput("Tasa de origen invalida")
    if amount.adjusted() > MAX_AMOUNT_EXPONENT:
        raise InvalidInput("Monto fuera de rango")
    try:
        with localcontext() as ctx:
            ctx.prec = _working_precision(amount, rate_from, rate_to)
            ctx.rounding = ROUND_HALF_UP
            return (amount * rate_to / rate_from).quantize(RESULT_QUANTUM)
    except DecimalException as exc:
        raise InvalidInput("Monto fuera de rango") from exc


def convert_amount(store: RateStore, amount: Decimal, from_currency: str, to_currency: str) -> Decimal:
    from_code = normalize_code(from_currency)
    to_code = normalize_code(to_currency)

    rate_from = store.get_rate(from_code).rate_to_base
    rate_to = store.get_rate(to_code).rate_to_base

    if from_code == to_code:
        return amount
    return cross_rate_amount(amount, rate_from, rate_to)
