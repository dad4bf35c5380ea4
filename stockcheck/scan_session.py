"""
Scan session controller.

Turns raw barcode strings from a scanner into classified outcomes, keeps the
scanned / missing / wrong-box tallies of one godown x product-type batch and
assembles the report payload for submission.

Invariants kept by every operation:
    missing_items == expected_items minus scanned barcodes
    a barcode is never in both scanned_items and missing_items
    wrong_scans never change scanned_items or missing_items
"""
from datetime import datetime, timezone
from typing import Iterable, Optional, Tuple

from .core.config import settings
from .error_handlers import EmptyReportError
from .inventory import barcode_prefix
from .logging_config import get_logger
from .schemas.scan_session import OutcomeKind, ScanOutcome, ScanSession
from .schemas.stock_check import ExpectedItem, ReportPayload, ScannedItem, WrongScan

logger = get_logger("scan_session")


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _timestamp() -> str:
    return _now().isoformat(timespec="seconds")


def begin_session(expected_items: Iterable[ExpectedItem], product_prefix: str) -> ScanSession:
    """Start scanning a batch: everything expected is missing until seen."""
    expected = [ExpectedItem.model_validate(i) for i in expected_items]
    session = ScanSession(
        product_prefix=product_prefix,
        expected_items=expected,
        missing_items=list(expected),
        scanned_items=[],
        wrong_scans=[],
        is_scanning=True,
    )
    logger.info(f"[SCAN] Session started prefix={product_prefix} expected={len(expected)}")
    return session


def start_scanning(session: ScanSession) -> ScanSession:
    session.is_scanning = True
    return session


def stop_scanning(session: ScanSession) -> ScanSession:
    session.is_scanning = False
    return session


def submit_scan(
    session: ScanSession,
    raw_barcode: str,
    product_prefix: Optional[str] = None,
) -> Tuple[ScanSession, ScanOutcome]:
    """
    Classify one scanned barcode and update the session.

    Checks run in a fixed order: empty input, duplicate, wrong prefix, not
    expected, match. Duplicates are looked up in scanned_items only, so
    repeating a wrong-box barcode records another wrong scan.
    """
    barcode = (raw_barcode or "").strip()
    product_prefix = product_prefix or session.product_prefix

    if not barcode or not session.is_scanning:
        return session, ScanOutcome(kind=OutcomeKind.IGNORED, barcode=barcode)

    if any(s.barcode == barcode for s in session.scanned_items):
        logger.debug(f"[SCAN] Duplicate {barcode}")
        return session, ScanOutcome(kind=OutcomeKind.DUPLICATE, barcode=barcode)

    actual_prefix = barcode_prefix(barcode)
    if actual_prefix != product_prefix:
        session.wrong_scans.append(WrongScan(
            barcode=barcode,
            expected_prefix=product_prefix,
            actual_prefix=actual_prefix,
            time=_timestamp(),
        ))
        logger.info(f"[SCAN] Wrong box {barcode}: expected {product_prefix}, got {actual_prefix}")
        return session, ScanOutcome(
            kind=OutcomeKind.WRONG_BOX,
            barcode=barcode,
            expected_prefix=product_prefix,
            actual_prefix=actual_prefix,
        )

    if not any(e.barcode == barcode for e in session.expected_items):
        logger.info(f"[SCAN] Not expected {barcode}")
        return session, ScanOutcome(kind=OutcomeKind.NOT_EXPECTED, barcode=barcode)

    _move_to_scanned(session, barcode, manually_marked=False)
    outcome = ScanOutcome(
        kind=OutcomeKind.MATCHED,
        barcode=barcode,
        progress=len(session.scanned_items),
        total=len(session.expected_items),
    )
    logger.info(f"[SCAN] Matched {barcode} ({outcome.progress}/{outcome.total})")
    return session, outcome


def mark_found(session: ScanSession, barcode: str) -> ScanSession:
    """
    Move a missing item to scanned by hand. Allowed whether or not scanning
    is active. Barcodes that are not currently missing are left alone.
    """
    if not any(m.barcode == barcode for m in session.missing_items):
        logger.warning(f"[SCAN] mark_found ignored, {barcode} is not missing")
        return session
    _move_to_scanned(session, barcode, manually_marked=True)
    logger.info(f"[SCAN] Marked as found {barcode}")
    return session


def _move_to_scanned(session: ScanSession, barcode: str, manually_marked: bool) -> None:
    session.scanned_items.append(ScannedItem(
        barcode=barcode,
        scan_time=_timestamp(),
        manually_marked=manually_marked,
    ))
    session.missing_items = [m for m in session.missing_items if m.barcode != barcode]


def progress_percent(session: ScanSession) -> int:
    if not session.expected_items:
        return 0
    return round(len(session.scanned_items) / len(session.expected_items) * 100)


def build_report(
    session: ScanSession,
    godown_id: int,
    godown_name: str,
    product_type: str,
    product_prefix: Optional[str] = None,
    submitted_by: Optional[str] = None,
    submitted_at: Optional[datetime] = None,
) -> ReportPayload:
    """
    Summarize the session for submission.

    Raises:
        EmptyReportError: nothing has been scanned yet
    """
    if not session.scanned_items:
        raise EmptyReportError(expected_count=len(session.expected_items))

    return ReportPayload(
        godown_id=godown_id,
        godown_name=godown_name,
        product_type=product_type,
        product_prefix=product_prefix or session.product_prefix,
        expected_count=len(session.expected_items),
        scanned_count=len(session.scanned_items),
        missing_count=len(session.missing_items),
        wrong_scans_count=len(session.wrong_scans),
        scanned_items=[s.model_copy() for s in session.scanned_items],
        missing_items=[m.model_copy() for m in session.missing_items],
        wrong_scans=[w.model_copy() for w in session.wrong_scans],
        submitted_at=submitted_at or _now(),
        submitted_by=submitted_by or settings.default_submitter,
    )


def end_session(session: ScanSession) -> ScanSession:
    """Discard all progress ("start over" or after a successful submit)."""
    session.expected_items = []
    session.scanned_items = []
    session.missing_items = []
    session.wrong_scans = []
    session.is_scanning = False
    return session
