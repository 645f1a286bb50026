"""Transient (expiring key/value) model backing the ticker cache."""

from sqlalchemy import Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from coinprice.models.database import Base


class Transient(Base):
    __tablename__ = "transient"

    key: Mapped[str] = mapped_column(String(191), primary_key=True)
    value: Mapped[str] = mapped_column(Text)  # JSON
    created_at: Mapped[float] = mapped_column(Float)  # unix seconds
    expires_at: Mapped[float] = mapped_column(Float, index=True)
