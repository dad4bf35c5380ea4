"""
Stock check API endpoints: product types, expected items and reports.
"""
from typing import Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from stockcheck import reports
from stockcheck.core.config import settings
from stockcheck.core.database import get_db
from stockcheck.inventory import filter_by_search
from stockcheck.middleware import limiter
from stockcheck.schemas.stock_check import (
    ReportStatus,
    ProductTypeListResponse,
    GodownItemListResponse,
    ReportPayload,
    ReportSubmitResponse,
    ReportListResponse,
    ReportDetailResponse,
    ReportStatusUpdate,
    ReportStatusUpdateResponse,
    AddMissingItemsRequest,
    AddMissingItemsResponse,
    StockCheckStatistics
)

router = APIRouter(prefix="/stock-check", tags=["Stock Check"])


@router.get("/godown/{godown_id}/product-types", response_model=ProductTypeListResponse)
def get_product_types(godown_id: int, db: Session = Depends(get_db)):
    """
    Product types in a godown, grouped by the first 3 barcode characters.

    Sorted by item count, largest first.
    """
    return ProductTypeListResponse(product_types=reports.list_product_types(db, godown_id))


@router.get("/godown/{godown_id}/product-type/{prefix}", response_model=GodownItemListResponse)
def get_product_type_items(
    godown_id: int,
    prefix: str,
    search: Optional[str] = Query(None, max_length=100),
    db: Session = Depends(get_db)
):
    """
    Items of one product type in a godown: the expected list for a scan session.

    - **search**: only items whose barcode, item code or name contains this text
    """
    items = reports.items_for_product_type(db, godown_id, prefix)
    return GodownItemListResponse(items=filter_by_search(items, search))


@router.post("/submit-report", response_model=ReportSubmitResponse)
@limiter.limit(settings.report_submit_rate_limit)
def submit_report(request: Request, payload: ReportPayload, db: Session = Depends(get_db)):
    """Store a stock check report with status 'pending'."""
    report = reports.save_report(db, payload)
    return ReportSubmitResponse(
        success=True,
        message="Stock check report submitted successfully",
        report_id=report.id
    )


@router.get("/reports", response_model=ReportListResponse)
def list_reports(
    status: Optional[ReportStatus] = None,
    godown_id: Optional[int] = Query(None, alias="godownId"),
    limit: int = Query(settings.report_list_limit, ge=1, le=500),
    db: Session = Depends(get_db)
):
    """
    List reports, newest first.

    - **status**: pending / reviewed / resolved
    - **godownId**: only reports of this godown
    """
    return ReportListResponse(reports=reports.list_reports(db, status=status, godown_id=godown_id, limit=limit))


@router.get("/reports/{report_id}", response_model=ReportDetailResponse)
def get_report(report_id: int, db: Session = Depends(get_db)):
    return ReportDetailResponse(report=reports.get_report(db, report_id))


@router.put("/reports/{report_id}/status", response_model=ReportStatusUpdateResponse)
def update_report_status(report_id: int, update: ReportStatusUpdate, db: Session = Depends(get_db)):
    """Move a report through review: pending -> reviewed -> resolved."""
    report = reports.update_report_status(db, report_id, update.status, update.notes)
    return ReportStatusUpdateResponse(success=True, report=report)


@router.post("/reports/{report_id}/add-missing-items", response_model=AddMissingItemsResponse)
def add_missing_items(report_id: int, payload: AddMissingItemsRequest, db: Session = Depends(get_db)):
    """Return missing items of a report to the godown's inventory."""
    added = reports.add_missing_items(db, report_id, payload.barcodes)
    return AddMissingItemsResponse(
        success=True,
        message=f"{len(added)} items added back to inventory",
        added_items=added
    )


@router.get("/statistics", response_model=StockCheckStatistics)
def get_statistics(db: Session = Depends(get_db)):
    return StockCheckStatistics(**reports.statistics(db))
