from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CHAR, DateTime, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from fxrates.db.base import Base


class ExchangeRate(Base):
    __tablename__ = "exchange_rates"

    currency_code: Mapped[str] = mapped_column(CHAR(3), primary_key=True)
    rate_to_base: Mapped[Decimal] = mapped_column(Numeric(18, 8), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
