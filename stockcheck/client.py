"""
HTTP client for the stock check backend.

Calls are single attempts: no retries, no backoff. Any transport error or
non-2xx response raises BackendError so the caller can notify the operator
and retry the same action.
"""
from typing import Any, Dict, List, Optional

import httpx

from .core.config import settings
from .error_handlers import BackendError
from .logging_config import get_logger
from .schemas.stock_check import (
    ExpectedItem,
    ProductType,
    ReportPayload,
    ReportResponse,
    ReportStatus,
    StockCheckStatistics,
)
from .stages import CollectionKind, get_collection

logger = get_logger("client")


class StockCheckClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        http: Optional[httpx.Client] = None,
        timeout: Optional[float] = None,
    ):
        """
        Args:
            base_url: backend root, defaults to the BACKEND_URL setting
            http: preconfigured client (tests pass a TestClient or a mock transport)
            timeout: request timeout in seconds
        """
        self.base_url = (base_url or settings.backend_url).rstrip("/")
        self._http = http or httpx.Client(
            base_url=self.base_url,
            timeout=timeout or settings.http_timeout,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def _request(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"[BACKEND] Timeout {method} {path}: {e}")
            raise BackendError(f"Request timed out: {method} {path}") from e
        except httpx.HTTPError as e:
            logger.error(f"[BACKEND] {method} {path} failed: {e}")
            raise BackendError(f"Request failed: {method} {path}") from e

        if response.is_error:
            try:
                detail = response.json()
            except ValueError:
                detail = response.text
            logger.error(f"[BACKEND] {method} {path} -> {response.status_code}")
            raise BackendError(
                f"Backend returned {response.status_code} for {method} {path}",
                status_code=response.status_code,
                detail=detail,
            )

        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ---- godowns / expected items ----

    def list_godowns(self) -> List[Dict]:
        return self._request("GET", "/api/godowns")

    def product_types(self, godown_id: int) -> List[ProductType]:
        data = self._request("GET", f"/api/stock-check/godown/{godown_id}/product-types")
        return [ProductType.model_validate(p) for p in data["productTypes"]]

    def expected_items(self, godown_id: int, prefix: str, search: Optional[str] = None) -> List[ExpectedItem]:
        params = {"search": search} if search else None
        data = self._request("GET", f"/api/stock-check/godown/{godown_id}/product-type/{prefix}", params=params)
        return [ExpectedItem.model_validate(i) for i in data["items"]]

    # ---- reports ----

    def submit_report(self, payload: ReportPayload) -> int:
        """Returns the id of the stored report."""
        data = self._request("POST", "/api/stock-check/submit-report", json=payload.to_wire())
        return data["reportId"]

    def list_reports(self, status: Optional[ReportStatus] = None, godown_id: Optional[int] = None,
                     limit: Optional[int] = None) -> List[ReportResponse]:
        params = {}
        if status:
            params["status"] = ReportStatus(status).value
        if godown_id:
            params["godownId"] = godown_id
        if limit:
            params["limit"] = limit
        data = self._request("GET", "/api/stock-check/reports", params=params)
        return [ReportResponse.model_validate(r) for r in data["reports"]]

    def get_report(self, report_id: int) -> ReportResponse:
        data = self._request("GET", f"/api/stock-check/reports/{report_id}")
        return ReportResponse.model_validate(data["report"])

    def update_report_status(self, report_id: int, status: ReportStatus,
                             notes: Optional[str] = None) -> ReportResponse:
        data = self._request(
            "PUT",
            f"/api/stock-check/reports/{report_id}/status",
            json={"status": ReportStatus(status).value, "notes": notes},
        )
        return ReportResponse.model_validate(data["report"])

    def add_missing_items(self, report_id: int, barcodes: List[str]) -> List[str]:
        data = self._request(
            "POST",
            f"/api/stock-check/reports/{report_id}/add-missing-items",
            json={"barcodes": list(barcodes)},
        )
        return data["addedItems"]

    def statistics(self) -> StockCheckStatistics:
        return StockCheckStatistics.model_validate(self._request("GET", "/api/stock-check/statistics"))

    # ---- pipeline collections ----

    def list_collection(self, kind: CollectionKind | str) -> List[Dict]:
        return self._request("GET", get_collection(kind).endpoint)

    def delete_collection_item(self, kind: CollectionKind | str, item: Dict | str) -> None:
        """Delete one record; `item` is the record itself or its id."""
        config = get_collection(kind)
        item_id = item[config.id_field] if isinstance(item, dict) else item
        self._request("DELETE", f"{config.endpoint}/{item_id}")
