from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import CHAR, DateTime, Index, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from fxrates.db.base import Base


class RateHistory(Base):
    __tablename__ = "rate_history"
    __table_args__ = (Index("idx_history_lookup", "currency_code", "recorded_at"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    currency_code: Mapped[str] = mapped_column(CHAR(3), nullable=False)
    rate: Mapped[Decimal] = mapped_column(Numeric(18, 8), nullable=False)
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
