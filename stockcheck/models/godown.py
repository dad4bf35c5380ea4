"""
Godown (warehouse) and the barcoded items stored in it.
"""
from typing import Optional
from datetime import datetime
from sqlalchemy import String, ForeignKey, Index, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockcheck.core.database import Base


class Godown(Base):
    """Warehouse model."""

    __tablename__ = "godowns"

    name: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    state: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    # Relationships
    items = relationship("GodownItem", back_populates="godown", cascade="all, delete-orphan")
    stock_check_reports = relationship("StockCheckReport", back_populates="godown")

    def __repr__(self) -> str:
        return f"<Godown(id={self.id}, name={self.name})>"


class GodownItem(Base):
    """A single barcoded box sitting in a godown."""

    __tablename__ = "godown_items"

    godown_id: Mapped[int] = mapped_column(
        ForeignKey("godowns.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )

    # The first characters of the barcode identify the product type
    barcode: Mapped[str] = mapped_column(String(100), nullable=False)
    item_code: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    item_name: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    added_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False
    )

    # Relationships
    godown = relationship("Godown", back_populates="items")

    __table_args__ = (
        Index("idx_godown_items_barcode", "godown_id", "barcode"),
    )

    def __repr__(self) -> str:
        return f"<GodownItem(id={self.id}, barcode={self.barcode}, godown_id={self.godown_id})>"
