from __future__ import annotations

import logging
import time
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Engine, select, text
from sqlalchemy.exc import InterfaceError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker

from fxrates.core.errors import CurrencyNotFound, InvalidInput, StoreTimeout, StoreUnavailable
from fxrates.db.base import Base
from fxrates.db.session import build_session_factory
from fxrates.models.currency import ExchangeRate
from fxrates.models.rate_history import RateHistory
from fxrates.services.currency import is_valid_code


logger = logging.getLogger("fxrates.store")

HISTORY_LIMIT = 100


def as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class RateStore:
    """Current rates keyed by currency code plus an append-only history.

    Every public method runs in its own transaction; ``apply_snapshot`` writes a
    whole sync cycle in one.
    """

    def __init__(self, engine: Engine, session_factory: sessionmaker[Session] | None = None) -> None:
        self.engine = engine
        self._session_factory = session_factory or build_session_factory(engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except PoolTimeoutError as exc:
            session.rollback()
            raise StoreTimeout() from exc
        except (OperationalError, InterfaceError) as exc:
            session.rollback()
            raise StoreUnavailable() from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_schema(self, retries: int = 1, delay_seconds: float = 1.0) -> None:
        while True:
            try:
                Base.metadata.create_all(bind=self.engine)
                return
            except OperationalError:
                retries -= 1
                if retries <= 0:
                    raise
                logger.warning("database not ready, retrying schema creation (%s left)", retries)
                time.sleep(delay_seconds)

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError:
            logger.warning("database ping failed", exc_info=True)
            return False

    # Writes ---------------------------------------------------------------

    def _upsert_rate(self, session: Session, code: str, rate: Decimal, timestamp: datetime) -> None:
        row = session.get(ExchangeRate, code)
        if not row:
            session.add(ExchangeRate(currency_code=code, rate_to_base=rate, updated_at=timestamp))
        else:
            row.rate_to_base = rate
            row.updated_at = timestamp
        session.flush()

    def _append_history(self, session: Session, code: str, rate: Decimal, timestamp: datetime) -> None:
        session.add(RateHistory(currency_code=code, rate=rate, recorded_at=timestamp))
        session.flush()

    def upsert_rate(self, code: str, rate: Decimal, timestamp: datetime) -> None:
        with self.session_scope() as session:
            self._upsert_rate(session, code, rate, as_utc(timestamp))

    def append_history(self, code: str, rate: Decimal, timestamp: datetime) -> None:
        with self.session_scope() as session:
            self._append_history(session, code, rate, as_utc(timestamp))

    def apply_snapshot(self, rates: Mapping[str, Decimal], timestamp: datetime) -> int:
        timestamp = as_utc(timestamp)
        with self.session_scope() as session:
            for code, rate in rates.items():
                self._upsert_rate(session, code, rate, timestamp)
                self._append_history(session, code, rate, timestamp)
        return len(rates)

    # Reads ----------------------------------------------------------------

    def get_rate(self, code: str) -> ExchangeRate:
        with self.session_scope() as session:
            row = session.get(ExchangeRate, code)
            if not row:
                raise CurrencyNotFound()
            return row

    def list_rates(self) -> list[ExchangeRate]:
        with self.session_scope() as session:
            return list(session.scalars(select(ExchangeRate)).all())

    def query_history(
        self,
        code: str,
        start: datetime | None = None,
        end: datetime | None = None,
        limit: int = HISTORY_LIMIT,
    ) -> list[RateHistory]:
        if not is_valid_code(code):
            raise InvalidInput("Se requiere codigo de moneda (parametro 'code')")

        stmt = select(RateHistory).where(RateHistory.currency_code == code)
        if start is not None:
            stmt = stmt.where(RateHistory.recorded_at >= as_utc(start))
        if end is not None:
            stmt = stmt.where(RateHistory.recorded_at <= as_utc(end))
        stmt = stmt.order_by(RateHistory.recorded_at.desc(), RateHistory.id.desc()).limit(min(limit, HISTORY_LIMIT))

        with self.session_scope() as session:
            return list(session.scalars(stmt).all())
