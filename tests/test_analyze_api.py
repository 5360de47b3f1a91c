import os
import unittest
from unittest.mock import patch

from fastapi.testclient import TestClient

from cv_analyzer.core.errors import UpstreamError
from cv_analyzer.main import app


class FakeAIClient:
    def __init__(self, reply: str = "## Summary\n- Strong Python experience", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls = []

    async def complete(self, messages):
        self.calls.append(list(messages))
        if self.error is not None:
            raise self.error
        return self.reply


class AnalyzeApiTests(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        env = patch.dict(os.environ, {"GROQ_API_KEY": "gsk_test_key"})
        env.start()
        self.addCleanup(env.stop)
        self.fake = FakeAIClient()
        factory = patch("cv_analyzer.services.analysis_service.get_ai_client", return_value=self.fake)
        factory.start()
        self.addCleanup(factory.stop)

    def test_health(self):
        response = self.client.get("/api/health")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "ok"})

    def test_analyze_returns_upstream_text_verbatim(self):
        response = self.client.post("/api/analyze", json={"cvText": "Jane Doe\nPython engineer"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"text": self.fake.reply})

        messages = self.fake.calls[0]
        self.assertEqual([m.role for m in messages], ["system", "user"])
        self.assertIn("Jane Doe\nPython engineer", messages[1].content)

    def test_position_and_requirements_reach_prompt(self):
        response = self.client.post(
            "/api/analyze",
            json={"cvText": "Jane Doe", "position": "Data Engineer", "jobRequirements": "Spark, Airflow"},
        )
        self.assertEqual(response.status_code, 200)
        user_prompt = self.fake.calls[0][1].content
        self.assertIn("Target position: Data Engineer", user_prompt)
        self.assertIn("Spark, Airflow", user_prompt)

    def test_long_optional_fields_are_accepted(self):
        response = self.client.post(
            "/api/analyze",
            json={"cvText": "Jane", "position": "x" * 201, "jobRequirements": "y" * 20001},
        )
        self.assertEqual(response.status_code, 200)
        self.assertIn("Target position: " + "x" * 201, self.fake.calls[0][1].content)

    def test_missing_or_invalid_cv_text_is_rejected(self):
        for body in ({}, {"cvText": ""}, {"cvText": "   "}, {"cvText": 42}, {"cvText": ["a"]}):
            response = self.client.post("/api/analyze", json=body)
            self.assertEqual(response.status_code, 400, body)
            self.assertEqual(
                response.json(),
                {"error": "Missing or invalid cvText in request body", "code": "invalid_request"},
            )
        self.assertEqual(self.fake.calls, [])

    def test_missing_api_key_returns_fixed_500(self):
        with patch.dict(os.environ, {"GROQ_API_KEY": ""}):
            response = self.client.post("/api/analyze", json={"cvText": "Jane Doe"})
        self.assertEqual(response.status_code, 500)
        body = response.json()
        self.assertEqual(body["error"], "Server is not configured with GROQ_API_KEY")
        self.assertEqual(body["code"], "missing_api_key")
        self.assertEqual(self.fake.calls, [])

    def test_upstream_status_mapping(self):
        cases = [
            (429, 429, "rate_limited"),
            (401, 500, "upstream_auth"),
            (403, 500, "upstream_auth"),
            (500, 503, "upstream_unavailable"),
            (503, 503, "upstream_unavailable"),
            (None, 503, "upstream_unavailable"),
            (400, 502, "analysis_failed"),
        ]
        for upstream_status, expected_status, expected_code in cases:
            self.fake.error = UpstreamError("boom", status_code=upstream_status)
            response = self.client.post("/api/analyze", json={"cvText": "Jane Doe"})
            self.assertEqual(response.status_code, expected_status, upstream_status)
            self.assertEqual(response.json()["code"], expected_code)

    def test_auth_failure_does_not_leak_credentials(self):
        self.fake.error = UpstreamError("Invalid API Key gsk_test_key", status_code=401)
        response = self.client.post("/api/analyze", json={"cvText": "Jane Doe"})
        self.assertNotIn("gsk_test_key", response.text)
        self.assertNotIn("API Key", response.json()["error"])

    def test_unexpected_error_returns_generic_500(self):
        self.fake.error = KeyError("choices")
        response = self.client.post("/api/analyze", json={"cvText": "Jane Doe"})
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json()["code"], "internal_error")

    def test_format_endpoint_renders_html(self):
        response = self.client.post("/api/format", json={"text": "## Title\n\nBody text"})
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["html"], "<h2>Title</h2>\n<p>Body text</p>")

    def test_format_endpoint_placeholder_for_empty_text(self):
        response = self.client.post("/api/format", json={"text": ""})
        self.assertEqual(response.json()["html"], "<p>No analysis results available.</p>")


if __name__ == "__main__":
    unittest.main()
