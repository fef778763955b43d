"""Tests for the HTTP API."""

import json
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from statement_ocr.config import Settings, get_settings
from statement_ocr.main import app
from statement_ocr.tests.helpers import llm_response, make_image, make_pdf

EXTRACTED = json.dumps(
    [
        {"date": "2024-03-01", "description": "Coffee", "amount": -4.5, "category": "Dining"},
        {"date": "2024-02-15", "description": "Salary", "amount": 2000, "category": "Salary"},
    ]
)


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHealth:
    """Test the health endpoint."""

    def test_reports_provider(self, client):
        """Should report the configured provider and model."""
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "llm_provider": "gemini",
            "model": "gemini/gemini-flash-latest",
        }


class TestExtractEndpoint:
    """Test the extraction endpoint."""

    def test_returns_sorted_ledger(self, client):
        """Should return the ordered ledger, summary and insights."""
        mock = AsyncMock(side_effect=[llm_response(EXTRACTED), llm_response("### Financial Summary\nOK")])
        with patch("statement_ocr.parsers.llm_client.acompletion", new=mock):
            response = client.post(
                "/extract",
                files=[("files", ("scan.png", make_image("PNG"), "image/png"))],
            )

        assert response.status_code == 200
        body = response.json()
        assert [t["description"] for t in body["transactions"]] == ["Salary", "Coffee"]
        assert body["transactions"][0]["date"] == "2024-02-15"
        assert body["summary"]["total_transactions"] == 2
        assert body["insights"]["text"].startswith("### Financial Summary")
        assert body["insights_error"] is None

    def test_accepts_multiple_documents(self, client):
        """Should process every uploaded document."""
        mock = AsyncMock(side_effect=[llm_response("[]"), llm_response(EXTRACTED), llm_response("ok")])
        with patch("statement_ocr.parsers.llm_client.acompletion", new=mock):
            response = client.post(
                "/extract",
                files=[
                    ("files", ("statement.pdf", make_pdf(2), "application/pdf")),
                    ("files", ("scan.png", make_image("PNG"), "image/png")),
                ],
            )

        assert response.status_code == 200
        assert len(response.json()["transactions"]) == 2

    def test_batch_failure_is_422(self, client):
        """Should report the failing document and failure kind."""
        mock = AsyncMock(return_value=llm_response("Sorry, I cannot read this."))
        with patch("statement_ocr.parsers.llm_client.acompletion", new=mock):
            response = client.post(
                "/extract",
                files=[("files", ("scan.png", make_image("PNG"), "image/png"))],
            )

        assert response.status_code == 422
        detail = response.json()["detail"]
        assert detail["document"] == "scan.png"
        assert detail["kind"] == "MalformedResponseError"
        assert detail["message"].startswith("An error occurred during extraction")

    def test_unsupported_file_is_422(self, client):
        """Should reject unsupported media types without calling the service."""
        mock = AsyncMock()
        with patch("statement_ocr.parsers.llm_client.acompletion", new=mock):
            response = client.post(
                "/extract",
                files=[("files", ("notes.txt", b"hello world", "text/plain"))],
            )

        assert response.status_code == 422
        assert response.json()["detail"]["kind"] == "UnsupportedMediaError"
        mock.assert_not_awaited()

    def test_missing_key_is_500(self, client):
        """Should report configuration errors."""
        app.dependency_overrides[get_settings] = lambda: Settings(_env_file=None, gemini_api_key="")
        response = client.post(
            "/extract",
            files=[("files", ("scan.png", make_image("PNG"), "image/png"))],
        )

        assert response.status_code == 500
        assert "GEMINI_API_KEY" in response.json()["detail"]


class TestExportEndpoint:
    """Test CSV download."""

    def test_returns_csv_attachment(self, client):
        """Should return the ledger as a CSV attachment."""
        response = client.post(
            "/export/csv",
            json=[{"date": "2024-03-01", "description": "Coffee", "amount": -4.5, "category": "Dining"}],
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert "transactions.csv" in response.headers["content-disposition"]
        assert response.text.splitlines() == [
            "Date,Description,Amount,Category,Notes",
            '"2024-03-01","Coffee",-4.5,"Dining",""',
        ]
