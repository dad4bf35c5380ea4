"""Tests for the backend HTTP client."""
import json

import httpx
import pytest

from stockcheck.client import StockCheckClient
from stockcheck.error_handlers import BackendError
from stockcheck.scan_session import begin_session, submit_scan, build_report
from stockcheck.schemas.stock_check import ReportStatus


def mock_client(handler):
    http = httpx.Client(base_url="http://backend", transport=httpx.MockTransport(handler))
    return StockCheckClient(http=http)


class TestAgainstApp:
    """Client wired to the real app through the test client."""

    @pytest.fixture
    def api(self, client):
        return StockCheckClient(http=client)

    def test_godowns_and_product_types(self, api, sample_godown):
        godowns = api.list_godowns()
        assert [g["name"] for g in godowns] == ["Main Godown"]

        types = api.product_types(godowns[0]["id"])
        assert [(t.prefix, t.count) for t in types] == [("XYZ", 2), ("ABC", 1)]

        items = api.expected_items(godowns[0]["id"], "XYZ")
        assert [i.barcode for i in items] == ["XYZ001", "XYZ002"]
        assert items[0].item_code == "XYZ Tiles"

    def test_report_lifecycle(self, api, sample_godown):
        items = api.expected_items(sample_godown.id, "XYZ")
        session = begin_session(items, "XYZ")
        submit_scan(session, "XYZ001")
        payload = build_report(session, sample_godown.id, sample_godown.name, "XYZ Tiles", "XYZ")

        report_id = api.submit_report(payload)

        report = api.get_report(report_id)
        assert report.status == ReportStatus.PENDING
        assert report.missing_count == 1

        assert [r.id for r in api.list_reports(status="pending")] == [report_id]

        updated = api.update_report_status(report_id, ReportStatus.REVIEWED, notes="ok")
        assert updated.status == ReportStatus.REVIEWED

        assert api.add_missing_items(report_id, ["XYZ002"]) == ["XYZ002"]

        stats = api.statistics()
        assert stats.total_reports == 1
        assert stats.pending_reports == 0
        assert stats.total_missing_items == 0
        assert stats.recent_reports[0].id == report_id

    def test_not_found_raises(self, api):
        with pytest.raises(BackendError) as exc_info:
            api.get_report(999)

        assert exc_info.value.upstream_status == 404
        assert exc_info.value.details["detail"]["error"].startswith("Report")


class TestTransportErrors:

    def test_server_error(self):
        api = mock_client(lambda request: httpx.Response(500, text="boom"))

        with pytest.raises(BackendError) as exc_info:
            api.list_godowns()

        assert exc_info.value.upstream_status == 500
        assert exc_info.value.details["detail"] == "boom"

    def test_connection_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        api = mock_client(handler)

        with pytest.raises(BackendError) as exc_info:
            api.statistics()

        assert exc_info.value.upstream_status is None

    def test_timeout(self):
        def handler(request):
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(BackendError, match="timed out"):
            mock_client(handler).list_godowns()


class TestCollections:
    """Generic pipeline collection calls."""

    def test_list_uses_configured_endpoint(self):
        seen = []

        def handler(request):
            seen.append(request.url.path)
            return httpx.Response(200, json=[{"_id": "a1"}])

        assert mock_client(handler).list_collection("despatch") == [{"_id": "a1"}]
        assert seen == ["/api/despatch"]

    def test_delete_by_record_or_id(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(204)

        api = mock_client(handler)
        assert api.delete_collection_item("sales", {"_id": "s9", "name": "x"}) is None
        api.delete_collection_item("transit", "t1")

        assert seen == [("DELETE", "/api/sales/s9"), ("DELETE", "/api/transits/t1")]

    def test_report_params(self):
        captured = {}

        def handler(request):
            captured.update(request.url.params)
            return httpx.Response(200, content=json.dumps({"reports": []}))

        mock_client(handler).list_reports(status="resolved", godown_id=3, limit=5)

        assert captured == {"status": "resolved", "godownId": "3", "limit": "5"}
