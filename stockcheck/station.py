"""
Operator-side scan station: godown and product-type selection, debounced
scanner input, manual marking and report submission against the backend.

Notifications are delivered to callbacks registered with `subscribe`.
"""
import asyncio
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel

from . import scan_session
from .client import StockCheckClient
from .core.config import settings
from .error_handlers import BackendError, EmptyReportError
from .logging_config import get_logger
from .schemas.scan_session import OutcomeKind, ScanOutcome, ScanSession
from .schemas.stock_check import ProductType

logger = get_logger("station")


class Notification(BaseModel):
    level: str  # success / info / warning / error
    message: str


OUTCOME_LEVELS = {
    OutcomeKind.MATCHED: "success",
    OutcomeKind.DUPLICATE: "warning",
    OutcomeKind.WRONG_BOX: "error",
    OutcomeKind.NOT_EXPECTED: "warning",
}


class ScanDebouncer:
    """
    Delays a value until input has been quiet for `delay` seconds.

    Every push cancels the pending timer and re-arms it with the new value,
    so only the last value of a keystroke burst reaches the callback. Must be
    used from inside a running asyncio event loop.
    """

    def __init__(self, callback: Callable[[str], None], delay: float):
        self.callback = callback
        self.delay = delay
        self._handle: Optional[asyncio.TimerHandle] = None
        self._pending: Optional[str] = None

    @property
    def pending(self) -> Optional[str]:
        return self._pending

    def push(self, value: str) -> None:
        self.cancel()
        self._pending = value
        self._handle = asyncio.get_running_loop().call_later(self.delay, self._fire)

    def flush(self) -> None:
        """Deliver the pending value now (Enter key)."""
        if self._handle is not None:
            self._handle.cancel()
            self._fire()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
        self._handle = None
        self._pending = None

    def _fire(self) -> None:
        value = self._pending
        self._handle = None
        self._pending = None
        if value:
            self.callback(value)


class ScanStation:
    def __init__(self, client: StockCheckClient, debounce_seconds: Optional[float] = None):
        self.client = client
        self.godowns: List[Dict] = []
        self.godown: Optional[Dict] = None
        self.product_types: List[ProductType] = []
        self.product_type: Optional[ProductType] = None
        self.session = ScanSession()
        self.last_outcome: Optional[ScanOutcome] = None
        self._listeners: List[Callable[[Notification], None]] = []
        self._debouncer = ScanDebouncer(
            self.scan,
            settings.scan_debounce_seconds if debounce_seconds is None else debounce_seconds,
        )

    # ---- notifications ----

    def subscribe(self, listener: Callable[[Notification], None]) -> Callable[[], None]:
        """Register a notification callback; returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, level: str, message: str) -> None:
        note = Notification(level=level, message=message)
        for listener in list(self._listeners):
            listener(note)

    # ---- selection ----

    def load_godowns(self) -> List[Dict]:
        try:
            self.godowns = self.client.list_godowns()
        except BackendError:
            self._notify("error", "Failed to load godowns")
        return self.godowns

    def select_godown(self, godown: Dict) -> List[ProductType]:
        """Switch godown; any batch in progress is discarded."""
        self.start_over()
        self.godown = godown
        self.product_types = []
        try:
            self.product_types = self.client.product_types(godown["id"])
        except BackendError:
            self._notify("error", "Failed to load product types")
        return self.product_types

    def select_product_type(self, product_type: ProductType) -> ScanSession:
        """Load the expected items of the product type and begin a fresh session."""
        if self.godown is None:
            self._notify("warning", "Please select a godown first")
            return self.session
        self.start_over()
        try:
            items = self.client.expected_items(self.godown["id"], product_type.prefix)
        except BackendError:
            self._notify("error", "Failed to load items")
            return self.session

        self.product_type = product_type
        self.session = scan_session.begin_session(items, product_type.prefix)
        self._notify("success", f"Loaded {len(items)} {product_type.name} items")
        return self.session

    # ---- scanning ----

    @property
    def progress(self) -> int:
        return scan_session.progress_percent(self.session)

    def start_scanning(self) -> bool:
        if self.product_type is None:
            self._notify("warning", "Please select a product type first")
            return False
        scan_session.start_scanning(self.session)
        self._notify("success", "Scanner activated! Start scanning barcodes.")
        return True

    def stop_scanning(self) -> None:
        scan_session.stop_scanning(self.session)
        self._debouncer.cancel()
        self._notify("info", "Scanner stopped")

    def feed_input(self, text: str) -> None:
        """Input box changed; the scan runs once the scanner goes quiet."""
        if self.session.is_scanning and text.strip():
            self._debouncer.push(text.strip())

    def press_enter(self) -> None:
        self._debouncer.flush()

    def scan(self, barcode: str) -> ScanOutcome:
        _, outcome = scan_session.submit_scan(self.session, barcode)
        self.last_outcome = outcome
        level = OUTCOME_LEVELS.get(outcome.kind)
        if level:
            self._notify(level, outcome.message)
        return outcome

    def mark_found(self, barcode: str) -> None:
        was_missing = any(m.barcode == barcode for m in self.session.missing_items)
        scan_session.mark_found(self.session, barcode)
        if was_missing:
            self._notify("success", f"Marked as found: {barcode}")

    # ---- submission ----

    def submit_report(self, submitted_by: Optional[str] = None) -> Optional[int]:
        """
        Send the report; returns its id, or None when nothing was sent.

        An empty session is refused before any network call. A failed call
        keeps every scan so the operator can retry.
        """
        if self.godown is None or self.product_type is None:
            self._notify("warning", "Please select a product type first")
            return None
        try:
            payload = scan_session.build_report(
                self.session,
                godown_id=self.godown["id"],
                godown_name=self.godown["name"],
                product_type=self.product_type.name,
                product_prefix=self.product_type.prefix,
                submitted_by=submitted_by,
            )
        except EmptyReportError:
            self._notify("warning", "No items scanned yet")
            return None

        try:
            report_id = self.client.submit_report(payload)
        except BackendError:
            self._notify("error", "Failed to submit report")
            return None

        self._notify("success", "Stock check report submitted successfully!")
        self.start_over()
        return report_id

    def start_over(self) -> None:
        self._debouncer.cancel()
        scan_session.end_session(self.session)
        self.product_type = None
        self.last_outcome = None
