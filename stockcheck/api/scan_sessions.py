"""
Server-hosted scan sessions for thin scanner terminals.

The terminal only forwards barcodes; classification, tallies and report
assembly happen here.
"""
from contextlib import contextmanager
from typing import Iterator, Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from stockcheck import reports, scan_session
from stockcheck.core.database import get_db
from stockcheck.error_handlers import ResourceNotFoundError
from stockcheck.inventory import group_by_prefix
from stockcheck.session_registry import HostedSession, SessionRegistry, get_registry
from stockcheck.schemas.scan_session import (
    ScanOutcome,
    ScanSessionCreate,
    ScanSessionState,
    ScanRequest,
    MarkFoundRequest,
    SessionSubmitRequest
)
from stockcheck.schemas.stock_check import ReportSubmitResponse

router = APIRouter(prefix="/scan-sessions", tags=["Scan Sessions"])


@router.post("", response_model=ScanSessionState, status_code=status.HTTP_201_CREATED)
def open_session(
    payload: ScanSessionCreate,
    db: Session = Depends(get_db),
    sessions: SessionRegistry = Depends(get_registry)
):
    """
    Load the expected items of a godown x product type and start scanning.

    - **godownId**: godown to verify
    - **productPrefix**: barcode prefix of the product type
    """
    godown = reports.get_godown(db, payload.godown_id)
    expected = reports.expected_items_for(db, godown.id, payload.product_prefix)
    groups = group_by_prefix({"barcode": i.barcode, "item_code": i.item_code} for i in expected)
    product_type = groups[0]["name"] if groups else f"Product {payload.product_prefix}"

    session = scan_session.begin_session(expected, payload.product_prefix)
    hosted = sessions.add(HostedSession(session, godown.id, godown.name, product_type))
    return hosted.state()


@contextmanager
def _locked(sessions: SessionRegistry, session_id: str) -> Iterator[HostedSession]:
    """Hold the session lock; a session closed by a concurrent request is gone."""
    hosted = sessions.get(session_id)
    with hosted.lock:
        if hosted.closed:
            raise ResourceNotFoundError("Scan session", session_id)
        yield hosted


@router.get("/{session_id}", response_model=ScanSessionState)
def get_session(session_id: str, sessions: SessionRegistry = Depends(get_registry)):
    with _locked(sessions, session_id) as hosted:
        return hosted.state()


@router.post("/{session_id}/scan", response_model=ScanOutcome)
def scan_barcode(session_id: str, payload: ScanRequest, sessions: SessionRegistry = Depends(get_registry)):
    """Classify one scanned barcode: matched / duplicate / wrong_box / not_expected / ignored."""
    with _locked(sessions, session_id) as hosted:
        _, outcome = scan_session.submit_scan(hosted.session, payload.barcode)
    return outcome


@router.post("/{session_id}/mark-found", response_model=ScanSessionState)
def mark_found(session_id: str, payload: MarkFoundRequest, sessions: SessionRegistry = Depends(get_registry)):
    """Mark a missing item as present without scanning it."""
    with _locked(sessions, session_id) as hosted:
        scan_session.mark_found(hosted.session, payload.barcode)
        return hosted.state()


@router.post("/{session_id}/start", response_model=ScanSessionState)
def start_scanning(session_id: str, sessions: SessionRegistry = Depends(get_registry)):
    with _locked(sessions, session_id) as hosted:
        scan_session.start_scanning(hosted.session)
        return hosted.state()


@router.post("/{session_id}/stop", response_model=ScanSessionState)
def stop_scanning(session_id: str, sessions: SessionRegistry = Depends(get_registry)):
    with _locked(sessions, session_id) as hosted:
        scan_session.stop_scanning(hosted.session)
        return hosted.state()


@router.post("/{session_id}/submit", response_model=ReportSubmitResponse)
def submit_session(
    session_id: str,
    payload: Optional[SessionSubmitRequest] = None,
    db: Session = Depends(get_db),
    sessions: SessionRegistry = Depends(get_registry)
):
    """
    Build the report, store it and close the session.

    Fails with 400 when nothing was scanned; the session stays open.
    """
    with _locked(sessions, session_id) as hosted:
        report_payload = scan_session.build_report(
            hosted.session,
            godown_id=hosted.godown_id,
            godown_name=hosted.godown_name,
            product_type=hosted.product_type,
            submitted_by=payload.submitted_by if payload else None
        )
        report = reports.save_report(db, report_payload)

        hosted.closed = True
        scan_session.end_session(hosted.session)
        sessions.discard(session_id)

    return ReportSubmitResponse(
        success=True,
        message="Stock check report submitted successfully",
        report_id=report.id
    )


@router.delete("/{session_id}", status_code=status.HTTP_204_NO_CONTENT)
def discard_session(session_id: str, sessions: SessionRegistry = Depends(get_registry)):
    """Start over: drop the session and all progress."""
    with _locked(sessions, session_id) as hosted:
        hosted.closed = True
        scan_session.end_session(hosted.session)
        sessions.discard(session_id)
