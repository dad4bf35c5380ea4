# stockcheck/reports.py
from typing import List, Optional

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from .core.config import settings
from .error_handlers import ResourceNotFoundError
from .inventory import group_by_prefix
from .logging_config import get_logger
from .models import Godown, GodownItem, StockCheckReport
from .schemas.stock_check import ExpectedItem, ReportPayload, ReportStatus

logger = get_logger("reports")


def get_godown(db: Session, godown_id: int) -> Godown:
    godown = db.get(Godown, godown_id)
    if godown is None:
        raise ResourceNotFoundError("Godown", godown_id)
    return godown


def list_product_types(db: Session, godown_id: int) -> List[dict]:
    """Items of a godown grouped by barcode prefix, largest group first."""
    godown = get_godown(db, godown_id)
    items = db.scalars(
        select(GodownItem).where(GodownItem.godown_id == godown.id).order_by(GodownItem.id)
    ).all()
    product_types = group_by_prefix({"barcode": i.barcode, "item_code": i.item_code} for i in items)
    logger.info(f"[STOCK_CHECK] Product types fetched godown_id={godown_id} count={len(product_types)}")
    return product_types


def items_for_product_type(db: Session, godown_id: int, prefix: str) -> List[dict]:
    godown = get_godown(db, godown_id)
    items = db.scalars(
        select(GodownItem)
        .where(GodownItem.godown_id == godown.id, GodownItem.barcode.startswith(prefix, autoescape=True))
        .order_by(GodownItem.id)
    ).all()
    logger.info(f"[STOCK_CHECK] Items fetched godown_id={godown_id} prefix={prefix} count={len(items)}")
    return [
        {
            "barcode": i.barcode,
            "item_code": i.item_code,
            "item_name": i.item_name,
            "godown_name": godown.name,
            "added_at": i.added_at,
        }
        for i in items
    ]


def expected_items_for(db: Session, godown_id: int, prefix: str) -> List[ExpectedItem]:
    return [
        ExpectedItem(barcode=i["barcode"], item_code=i["item_code"])
        for i in items_for_product_type(db, godown_id, prefix)
    ]


def save_report(db: Session, payload: ReportPayload) -> StockCheckReport:
    get_godown(db, payload.godown_id)
    wire = payload.to_wire()
    report = StockCheckReport(
        godown_id=payload.godown_id,
        godown_name=payload.godown_name,
        product_type=payload.product_type,
        product_prefix=payload.product_prefix,
        expected_count=payload.expected_count,
        scanned_count=payload.scanned_count,
        missing_count=payload.missing_count,
        wrong_scans_count=payload.wrong_scans_count,
        scanned_items=wire["scannedItems"],
        missing_items=wire["missingItems"],
        wrong_scans=wire["wrongScans"],
        submitted_at=payload.submitted_at,
        submitted_by=payload.submitted_by,
        status=ReportStatus.PENDING.value,
    )
    db.add(report)
    db.commit()
    db.refresh(report)
    logger.info(
        f"[STOCK_CHECK] Report submitted id={report.id} godown={report.godown_name} "
        f"type={report.product_type} scanned={report.scanned_count} missing={report.missing_count}"
    )
    return report


def list_reports(
    db: Session,
    status: Optional[ReportStatus] = None,
    godown_id: Optional[int] = None,
    limit: Optional[int] = None,
) -> List[StockCheckReport]:
    query = select(StockCheckReport)
    if status:
        query = query.where(StockCheckReport.status == ReportStatus(status).value)
    if godown_id:
        query = query.where(StockCheckReport.godown_id == godown_id)
    query = query.order_by(StockCheckReport.submitted_at.desc(), StockCheckReport.id.desc())
    query = query.limit(limit or settings.report_list_limit)
    return list(db.scalars(query).all())


def get_report(db: Session, report_id: int) -> StockCheckReport:
    report = db.get(StockCheckReport, report_id)
    if report is None:
        raise ResourceNotFoundError("Report", report_id)
    return report


def update_report_status(
    db: Session, report_id: int, status: ReportStatus, notes: Optional[str] = None
) -> StockCheckReport:
    report = get_report(db, report_id)
    report.status = ReportStatus(status).value
    report.notes = notes
    db.commit()
    db.refresh(report)
    logger.info(f"[STOCK_CHECK] Report status updated id={report_id} status={report.status}")
    return report


def add_missing_items(db: Session, report_id: int, barcodes: List[str]) -> List[str]:
    """
    Put missing items of a report back into the godown's inventory.
    Barcodes not listed as missing in the report are skipped.
    """
    report = get_report(db, report_id)
    missing = list(report.missing_items or [])
    added: List[str] = []

    for barcode in barcodes:
        item = next((m for m in missing if m.get("barcode") == barcode), None)
        if item is None:
            continue
        item_code = item.get("itemCode")
        db.add(GodownItem(
            godown_id=report.godown_id,
            barcode=barcode,
            item_code=item_code,
            item_name=f"{item_code} - {barcode}",
        ))
        missing = [m for m in missing if m.get("barcode") != barcode]
        added.append(barcode)

    # JSON columns only notice reassignment
    report.missing_items = missing
    report.missing_count = len(missing)
    db.commit()

    logger.info(f"[STOCK_CHECK] Missing items added back report_id={report_id} count={len(added)}")
    return added


def statistics(db: Session) -> dict:
    total_reports = db.scalar(select(func.count(StockCheckReport.id))) or 0
    pending_reports = db.scalar(
        select(func.count(StockCheckReport.id)).where(StockCheckReport.status == ReportStatus.PENDING.value)
    ) or 0
    resolved_reports = db.scalar(
        select(func.count(StockCheckReport.id)).where(StockCheckReport.status == ReportStatus.RESOLVED.value)
    ) or 0
    total_missing_items = db.scalar(
        select(func.sum(StockCheckReport.missing_count)).where(StockCheckReport.status == ReportStatus.PENDING.value)
    ) or 0

    return {
        "total_reports": total_reports,
        "pending_reports": pending_reports,
        "resolved_reports": resolved_reports,
        "total_missing_items": total_missing_items,
        "recent_reports": list_reports(db, limit=settings.recent_reports_count),
    }
