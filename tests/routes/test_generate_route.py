"""
End-to-end tests for POST /ocr-extract with the AI collaborators replaced.

These tests verify:
1. Method / pre-flight / content-type / configuration checks
2. Success envelope shape and CORS headers
3. Per-file failures vs. whole-request failures
"""

import json
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from cvbuilder.core.config import Settings, get_settings
from cvbuilder.core.exceptions import ExtractionError, FailureReason
from cvbuilder.main import app
from cvbuilder.routes.generate import get_extractor, get_generator
from cvbuilder.schemas.base import GenerateResponse, SynthesisResult
from cvbuilder.services.synthesis_service import CVGenerator

URL = "/ocr-extract"

SYNTHESIS = SynthesisResult(
    extracted_data={
        "name": "Jane Doe",
        "province": "Morobe",
        "phone": "+675 7123 4567",
        "email": "jane@example.com",
        "education": "BCom, UPNG",
        "experience": "- Accounts clerk",
        "skills": ["Excel"],
        "summary": "Accountant.",
        "communityLeadership": "Church youth leader",
        "referees": [],
    },
    generated_content={"resume": "JANE DOE", "coverLetter": "Dear Sir/Madam", "atsScore": 91},
)


def _files(*names):
    return [(f"file_{i}", (name, b"%PDF-1.4 " + name.encode(), "application/pdf")) for i, name in enumerate(names)]


class TestGenerateRoute:

    @pytest.fixture
    def extractor(self):
        mock = AsyncMock()
        mock.extract.return_value = "Jane Doe\nAccounts clerk"
        return mock

    @pytest.fixture
    def generator(self):
        mock = AsyncMock()
        mock.generate.return_value = SYNTHESIS
        return mock

    @pytest.fixture
    def client(self, settings, extractor, generator):
        app.dependency_overrides[get_settings] = lambda: settings
        app.dependency_overrides[get_extractor] = lambda: extractor
        app.dependency_overrides[get_generator] = lambda: generator
        with TestClient(app) as c:
            yield c
        app.dependency_overrides.clear()

    def test_success_envelope(self, client, extractor, generator):
        resp = client.post(URL, files=_files("cv.pdf", "certificate.pdf"))

        assert resp.status_code == 200
        body = resp.json()
        assert body["success"] is True
        assert body["aiPowered"] is True
        assert body["jobAdData"] is None
        assert body["extractedData"]["name"] == "Jane Doe"
        assert body["generatedContent"]["atsScore"] == 91
        assert [f["name"] for f in body["filesProcessed"]] == ["cv.pdf", "certificate.pdf"]
        assert body["filesProcessed"][0]["type"] == "application/pdf"
        assert body["filesProcessed"][0]["size"] == len(b"%PDF-1.4 cv.pdf")
        assert extractor.extract.await_count == 2
        assert generator.generate.await_count == 1
        GenerateResponse.model_validate(body)

    def test_response_headers(self, client):
        resp = client.post(URL, files=_files("cv.pdf"))

        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["content-type"].startswith("application/json")

    def test_job_ad_is_parsed_and_echoed(self, client, generator):
        job = {"title": "Accountant", "company": "BSP", "location": "Lae", "description": "CPA preferred"}

        resp = client.post(URL, files=_files("cv.pdf"), data={"job_ad_text": json.dumps(job)})

        assert resp.json()["jobAdData"] == job
        assert generator.generate.await_args.args[1].company == "BSP"

    def test_bad_job_ad_is_ignored(self, client, generator):
        resp = client.post(URL, files=_files("cv.pdf"), data={"job_ad_text": "{oops"})

        assert resp.status_code == 200
        assert resp.json()["jobAdData"] is None
        assert generator.generate.await_args.args[1] is None

    def test_files_keep_submission_order_in_aggregate(self, client, generator):
        client.post(URL, files=_files("z.pdf", "a.pdf", "m.pdf"))

        text = generator.generate.await_args.args[0]
        assert text.index("=== z.pdf ===") < text.index("=== a.pdf ===") < text.index("=== m.pdf ===")

    def test_preflight(self, client):
        resp = client.options(URL)

        assert resp.status_code == 200
        assert resp.text == "ok"
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_other_methods_are_rejected(self, client):
        resp = client.get(URL)

        assert resp.status_code == 405
        assert resp.json()["success"] is False
        assert resp.json()["error"]
        assert resp.headers.get("allow")
        assert resp.headers["access-control-allow-origin"] == "*"

    def test_non_multipart_body_is_rejected(self, client, extractor):
        resp = client.post(URL, json={"file": "cv.pdf"})

        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid content type. Expected multipart/form-data"}
        extractor.extract.assert_not_awaited()

    def test_no_files(self, client):
        resp = client.post(URL, data={"job_ad_text": "{}"}, files=[("file_0", ("empty.pdf", b"", "application/pdf"))])

        assert resp.status_code == 400
        assert resp.json()["success"] is False
        assert "No valid files" in resp.json()["error"]

    def test_missing_api_key_is_a_configuration_error(self, client, extractor, generator):
        app.dependency_overrides[get_settings] = lambda: Settings(gemini_api_key=None, _env_file=None)

        resp = client.post(URL, files=_files("cv.pdf"))

        assert resp.status_code == 500
        assert resp.json()["success"] is False
        assert "GEMINI_API_KEY" in resp.json()["error"]
        extractor.extract.assert_not_awaited()
        generator.generate.assert_not_awaited()

    def test_missing_api_key_wins_over_bad_content_type(self, client):
        app.dependency_overrides[get_settings] = lambda: Settings(gemini_api_key="  ", _env_file=None)

        resp = client.post(URL, json={})

        assert resp.status_code == 500

    def test_partial_failure_still_succeeds(self, client, extractor):
        extractor.extract.side_effect = [
            ExtractionError("Provider responded with HTTP 500", reason=FailureReason.HTTP_STATUS),
            "certificate text",
        ]

        resp = client.post(URL, files=_files("cv.pdf", "certificate.pdf"))

        assert resp.status_code == 200
        assert len(resp.json()["filesProcessed"]) == 2

    def test_all_files_failed(self, client, extractor, generator):
        extractor.extract.side_effect = ExtractionError("timed out", reason=FailureReason.TIMEOUT)

        resp = client.post(URL, files=_files("cv.pdf", "certificate.pdf"))

        assert resp.status_code == 422
        assert resp.json()["success"] is False
        assert "No usable content" in resp.json()["error"]
        assert generator.generate.await_count == 0

    def test_oversized_file_is_left_out_of_files_processed(self, client, settings, extractor):
        settings.max_file_bytes = 20
        files = [
            ("file_0", ("big.pdf", b"x" * 21, "application/pdf")),
            ("file_1", ("small.pdf", b"x" * 5, "application/pdf")),
        ]

        resp = client.post(URL, files=files)

        assert resp.status_code == 200
        assert [f["name"] for f in resp.json()["filesProcessed"]] == ["small.pdf"]
        assert extractor.extract.await_count == 1

    def test_invalid_generated_json_returns_error_envelope(self, client, settings):
        gemini = AsyncMock()
        gemini.generate.return_value = "Here is your CV! {definitely not json"
        app.dependency_overrides[get_generator] = lambda: CVGenerator(gemini, settings)

        resp = client.post(URL, files=_files("cv.pdf"))

        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["error"] == "Failed to generate CV content with AI"
        assert "Failed to parse AI response" in body["details"]
        assert "extractedData" not in body

    def test_nan_in_generated_json_returns_error_envelope(self, client, settings):
        gemini = AsyncMock()
        gemini.generate.return_value = '{"extractedData": {"name": NaN}, "generatedContent": {"atsScore": 80}}'
        app.dependency_overrides[get_generator] = lambda: CVGenerator(gemini, settings)

        resp = client.post(URL, files=_files("cv.pdf"))

        assert resp.status_code == 500
        assert resp.json()["error"] == "Failed to generate CV content with AI"
        assert "Failed to parse AI response" in resp.json()["details"]

    def test_healthz(self, client, settings):
        assert client.get("/healthz").json() == {"ok": True, "model": settings.generation_model}
