"""
Stock check report model: the persisted outcome of one scan session.
"""
from typing import Optional
from datetime import datetime
from sqlalchemy import String, Integer, ForeignKey, Index, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from stockcheck.core.database import Base


class StockCheckReport(Base):
    """Summary of a godown x product-type verification run."""

    __tablename__ = "stock_check_reports"

    godown_id: Mapped[int] = mapped_column(
        ForeignKey("godowns.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    godown_name: Mapped[str] = mapped_column(String(255), nullable=False)
    product_type: Mapped[str] = mapped_column(String(255), nullable=False)
    product_prefix: Mapped[str] = mapped_column(String(20), nullable=False)

    # Counts
    expected_count: Mapped[int] = mapped_column(Integer, nullable=False)
    scanned_count: Mapped[int] = mapped_column(Integer, nullable=False)
    missing_count: Mapped[int] = mapped_column(Integer, nullable=False)
    wrong_scans_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # Item lists, stored as submitted (camelCase dicts)
    scanned_items: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    missing_items: Mapped[list] = mapped_column(JSON, default=list, nullable=False)
    wrong_scans: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    submitted_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    status: Mapped[str] = mapped_column(String(20), default="pending", nullable=False)  # pending / reviewed / resolved
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Relationships
    godown = relationship("Godown", back_populates="stock_check_reports")

    __table_args__ = (
        Index("idx_stock_check_reports_status", "status"),
        Index("idx_stock_check_reports_submitted_at", "submitted_at"),
    )

    def __repr__(self) -> str:
        return (
            f"<StockCheckReport(id={self.id}, godown={self.godown_name}, "
            f"prefix={self.product_prefix}, status={self.status})>"
        )
