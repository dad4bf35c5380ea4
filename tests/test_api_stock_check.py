"""Tests for godown and stock check API endpoints."""
import pytest

from stockcheck.models import GodownItem, StockCheckReport


class TestGodownAPI:
    """Tests for godown endpoints."""

    def test_create_and_list_godowns(self, client):
        response = client.post("/api/godowns", json={"name": "North Godown", "city": "Ajmer"})
        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "North Godown"
        assert "createdAt" in data

        response = client.get("/api/godowns")
        assert response.status_code == 200
        assert [g["name"] for g in response.json()] == ["North Godown"]

    def test_duplicate_name_rejected(self, client, sample_godown):
        response = client.post("/api/godowns", json={"name": sample_godown.name})
        assert response.status_code == 409

    def test_missing_name_rejected(self, client):
        response = client.post("/api/godowns", json={"city": "Ajmer"})
        assert response.status_code == 422
        assert response.json()["error"] == "Validation failed"

    def test_add_items(self, client, sample_godown, test_db):
        response = client.post(
            f"/api/godowns/{sample_godown.id}/items",
            json={"items": [{"barcode": "XYZ003", "itemCode": "XYZ Tiles"}]}
        )
        assert response.status_code == 201
        assert response.json() == {"godownId": sample_godown.id, "added": 1}

        count = test_db.query(GodownItem).filter_by(godown_id=sample_godown.id).count()
        assert count == 5

    def test_add_items_unknown_godown(self, client):
        response = client.post("/api/godowns/999/items", json={"items": [{"barcode": "XYZ003"}]})
        assert response.status_code == 404
        assert response.json()["details"]["resource"] == "Godown"


class TestProductTypes:
    """Tests for product type discovery."""

    def test_grouped_by_prefix(self, client, sample_godown, other_godown):
        response = client.get(f"/api/stock-check/godown/{sample_godown.id}/product-types")

        assert response.status_code == 200
        types = response.json()["productTypes"]
        assert types == [
            {"prefix": "XYZ", "name": "XYZ Tiles", "count": 2},
            {"prefix": "ABC", "name": "ABC Marble", "count": 1},
        ]

    def test_unknown_godown(self, client):
        response = client.get("/api/stock-check/godown/999/product-types")
        assert response.status_code == 404

    def test_items_for_prefix(self, client, sample_godown, other_godown):
        response = client.get(f"/api/stock-check/godown/{sample_godown.id}/product-type/XYZ")

        assert response.status_code == 200
        items = response.json()["items"]
        assert [i["barcode"] for i in items] == ["XYZ001", "XYZ002"]
        assert items[0]["itemCode"] == "XYZ Tiles"
        assert items[0]["godownName"] == "Main Godown"
        assert items[0]["addedAt"] is not None

    def test_items_search(self, client, sample_godown, test_db):
        test_db.add(GodownItem(godown_id=sample_godown.id, barcode="XYZ003", item_code="XYZ Tiles", item_name="Matt finish"))
        test_db.commit()

        url = f"/api/stock-check/godown/{sample_godown.id}/product-type/XYZ"
        assert [i["barcode"] for i in client.get(url, params={"search": "MATT"}).json()["items"]] == ["XYZ003"]
        assert [i["barcode"] for i in client.get(url, params={"search": "002"}).json()["items"]] == ["XYZ002"]
        assert len(client.get(url, params={"search": ""}).json()["items"]) == 3

    def test_prefix_is_matched_literally(self, client, sample_godown):
        response = client.get(f"/api/stock-check/godown/{sample_godown.id}/product-type/X%25")
        assert response.status_code == 200
        assert response.json()["items"] == []


class TestSubmitReport:
    """Tests for report submission."""

    def test_submit_report(self, client, report_payload, test_db):
        response = client.post("/api/stock-check/submit-report", json=report_payload)

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        report = test_db.get(StockCheckReport, data["reportId"])
        assert report.status == "pending"
        assert report.missing_items == [{"barcode": "XYZ002", "itemCode": "XYZ Tiles"}]
        assert report.scanned_items[0]["scanTime"] == "2025-01-15T10:00:00+00:00"

    def test_submit_report_unknown_godown(self, client, report_payload):
        report_payload["godownId"] = 999
        response = client.post("/api/stock-check/submit-report", json=report_payload)
        assert response.status_code == 404

    def test_submit_report_validation(self, client, report_payload):
        del report_payload["scannedCount"]
        response = client.post("/api/stock-check/submit-report", json=report_payload)
        assert response.status_code == 422

    def test_submit_report_rate_limited(self, client, report_payload):
        from stockcheck.core.config import settings
        limit = int(settings.report_submit_rate_limit.split("/")[0])

        for _ in range(limit):
            assert client.post("/api/stock-check/submit-report", json=report_payload).status_code == 200

        response = client.post("/api/stock-check/submit-report", json=report_payload)
        assert response.status_code == 429
        assert response.json()["error"] == "Rate limit exceeded"

    def test_rate_limit_is_per_terminal(self, client, report_payload):
        from stockcheck.core.config import settings
        limit = int(settings.report_submit_rate_limit.split("/")[0])

        for _ in range(limit):
            client.post("/api/stock-check/submit-report", json=report_payload, headers={"X-Terminal-Id": "T1"})

        blocked = client.post("/api/stock-check/submit-report", json=report_payload, headers={"X-Terminal-Id": "T1"})
        other = client.post("/api/stock-check/submit-report", json=report_payload, headers={"X-Terminal-Id": "T2"})
        assert blocked.status_code == 429
        assert other.status_code == 200


class TestReports:
    """Tests for report review endpoints."""

    @pytest.fixture
    def submitted(self, client, report_payload):
        ids = []
        for prefix in ["XYZ", "ABC"]:
            payload = dict(report_payload, productPrefix=prefix)
            ids.append(client.post("/api/stock-check/submit-report", json=payload).json()["reportId"])
        return ids

    def test_list_reports_newest_first(self, client, submitted):
        response = client.get("/api/stock-check/reports")

        assert response.status_code == 200
        reports = response.json()["reports"]
        assert [r["id"] for r in reports] == list(reversed(submitted))
        assert reports[0]["status"] == "pending"

    def test_list_reports_limit_and_filters(self, client, submitted, sample_godown):
        assert len(client.get("/api/stock-check/reports?limit=1").json()["reports"]) == 1
        assert client.get("/api/stock-check/reports?status=resolved").json()["reports"] == []
        by_godown = client.get(f"/api/stock-check/reports?godownId={sample_godown.id}").json()["reports"]
        assert len(by_godown) == 2

    def test_invalid_status_filter(self, client):
        response = client.get("/api/stock-check/reports?status=archived")
        assert response.status_code == 422

    def test_get_report(self, client, submitted):
        response = client.get(f"/api/stock-check/reports/{submitted[0]}")

        assert response.status_code == 200
        report = response.json()["report"]
        assert report["productPrefix"] == "XYZ"
        assert report["wrongScans"][0]["actualPrefix"] == "ABC"

    def test_get_missing_report(self, client):
        response = client.get("/api/stock-check/reports/999")
        assert response.status_code == 404

    def test_update_status(self, client, submitted):
        response = client.put(
            f"/api/stock-check/reports/{submitted[0]}/status",
            json={"status": "reviewed", "notes": "Checked by supervisor"}
        )

        assert response.status_code == 200
        report = response.json()["report"]
        assert report["status"] == "reviewed"
        assert report["notes"] == "Checked by supervisor"

    def test_update_status_invalid(self, client, submitted):
        response = client.put(f"/api/stock-check/reports/{submitted[0]}/status", json={"status": "lost"})
        assert response.status_code == 422

    def test_add_missing_items(self, client, submitted, sample_godown, test_db):
        response = client.post(
            f"/api/stock-check/reports/{submitted[0]}/add-missing-items",
            json={"barcodes": ["XYZ002", "XYZ404"]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["addedItems"] == ["XYZ002"]
        assert data["message"] == "1 items added back to inventory"

        report = client.get(f"/api/stock-check/reports/{submitted[0]}").json()["report"]
        assert report["missingItems"] == []
        assert report["missingCount"] == 0

        restored = test_db.query(GodownItem).filter_by(godown_id=sample_godown.id, barcode="XYZ002").all()
        assert len(restored) == 2
        assert any(i.item_name == "XYZ Tiles - XYZ002" for i in restored)

    def test_add_missing_items_requires_barcodes(self, client, submitted):
        response = client.post(f"/api/stock-check/reports/{submitted[0]}/add-missing-items", json={"barcodes": []})
        assert response.status_code == 422

    def test_statistics(self, client, submitted):
        client.put(f"/api/stock-check/reports/{submitted[1]}/status", json={"status": "resolved"})

        response = client.get("/api/stock-check/statistics")

        assert response.status_code == 200
        stats = response.json()
        assert stats["totalReports"] == 2
        assert stats["pendingReports"] == 1
        assert stats["resolvedReports"] == 1
        assert stats["totalMissingItems"] == 1
        assert len(stats["recentReports"]) == 2

    def test_statistics_empty(self, client):
        stats = client.get("/api/stock-check/statistics").json()
        assert stats["totalReports"] == 0
        assert stats["totalMissingItems"] == 0
        assert stats["recentReports"] == []


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] in ("healthy", "degraded")

    def test_process_time_header(self, client):
        response = client.get("/")
        assert "X-Process-Time" in response.headers
