"""
Pydantic schemas for stock checking: scanned items, reports and statistics.
"""
from typing import Optional
from datetime import datetime
from enum import Enum
from pydantic import Field

from stockcheck.schemas.base import CamelModel


class ReportStatus(str, Enum):
    """Review state of a submitted report."""
    PENDING = "pending"
    REVIEWED = "reviewed"
    RESOLVED = "resolved"


class ExpectedItem(CamelModel):
    """An item the godown should contain for the selected product type."""
    barcode: str
    item_code: Optional[str] = None


class ScannedItem(CamelModel):
    """An expected item confirmed present, by scan or by hand."""
    barcode: str
    scan_time: str
    manually_marked: bool = False


class WrongScan(CamelModel):
    """A scan whose prefix belongs to another product type."""
    barcode: str
    expected_prefix: str
    actual_prefix: str
    time: str


class ProductType(CamelModel):
    """Items of a godown grouped by barcode prefix."""
    prefix: str
    name: str
    count: int


class ProductTypeListResponse(CamelModel):
    product_types: list[ProductType]


class GodownItemResponse(CamelModel):
    """Expected item with its godown context."""
    barcode: str
    item_code: Optional[str] = None
    item_name: Optional[str] = None
    godown_name: Optional[str] = None
    added_at: Optional[datetime] = None


class GodownItemListResponse(CamelModel):
    items: list[GodownItemResponse]


class ReportPayload(CamelModel):
    """Stock check summary as submitted by a scanner."""
    godown_id: int
    godown_name: str
    product_type: str
    product_prefix: str
    expected_count: int = Field(..., ge=0)
    scanned_count: int = Field(..., ge=0)
    missing_count: int = Field(..., ge=0)
    wrong_scans_count: int = Field(default=0, ge=0)
    scanned_items: list[ScannedItem] = Field(default_factory=list)
    missing_items: list[ExpectedItem] = Field(default_factory=list)
    wrong_scans: list[WrongScan] = Field(default_factory=list)
    submitted_at: datetime
    submitted_by: Optional[str] = None


class ReportSubmitResponse(CamelModel):
    success: bool
    message: str
    report_id: int


class ReportResponse(ReportPayload):
    """Stored report with review information."""
    id: int
    status: ReportStatus
    notes: Optional[str] = None


class ReportListResponse(CamelModel):
    reports: list[ReportResponse]


class ReportDetailResponse(CamelModel):
    report: ReportResponse


class ReportStatusUpdate(CamelModel):
    status: ReportStatus
    notes: Optional[str] = None


class ReportStatusUpdateResponse(CamelModel):
    success: bool
    report: ReportResponse


class AddMissingItemsRequest(CamelModel):
    barcodes: list[str] = Field(..., min_length=1)


class AddMissingItemsResponse(CamelModel):
    success: bool
    message: str
    added_items: list[str]


class StockCheckStatistics(CamelModel):
    """Report counters for the review dashboard."""
    total_reports: int
    pending_reports: int
    resolved_reports: int
    total_missing_items: int  # Across pending reports
    recent_reports: list[ReportResponse]
