import json
import os
import re
import unittest
from unittest.mock import Mock, patch

import httpx
import openai
from fastapi import HTTPException
from fastapi.testclient import TestClient

from study_planner.api.v1.routes.plans import create_plan, handle_generate_plan_request
from study_planner.core.errors import QuotaExceededError
from study_planner.main import app, generate_plan_legacy
from study_planner.schemas.requests import PlanRequest
from study_planner.schemas.responses import PlanResponse

ORCHESTRATOR = "study_planner.orchestrators.plan_orchestrator"
SAMPLE_RESULT = PlanResponse.model_validate(
    {"tasks": [{"text": "Intro", "priority": "high", "date": "2026-06-01", "category": "Python"}]}
)
MODEL_REPLY = "```json\n" + json.dumps(
    {
        "estimatedDifficulty": 1,
        "totalHours": 5,
        "recommendedDays": 5,
        "modules": ["Syntax", "Control flow"],
        "tasks": [
            {"text": "📚 Install Python", "description": "Set up (1h)", "priority": "high", "date": "2026-01-01"},
            {"text": "💻 Variables and types", "priority": "high"},
            {"text": "🧪 Control flow", "priority": "medium", "date": "bad"},
            {"text": "🎯 Functions", "priority": "medium"},
            {"text": "🧠 Review", "priority": "low"},
        ],
    }
) + "\n```"


class TestPlanRouteHandlers(unittest.TestCase):
    def test_handle_generate_plan_request_success(self):
        req = PlanRequest(subject="Python")
        with patch(
            "study_planner.api.v1.routes.plans.generate_plan_workflow",
            return_value=SAMPLE_RESULT,
        ) as mock_workflow:
            result = handle_generate_plan_request(req, route_path="/api/v1/plans")

        self.assertEqual(result, SAMPLE_RESULT.to_wire())
        mock_workflow.assert_called_once_with(req, route_path="/api/v1/plans")

    def test_planner_errors_keep_their_status(self):
        with patch(
            "study_planner.api.v1.routes.plans.generate_plan_workflow",
            side_effect=QuotaExceededError("Insufficient credits"),
        ):
            with self.assertRaises(HTTPException) as exc:
                handle_generate_plan_request(PlanRequest(subject="Python"), route_path="/api/v1/plans")

        self.assertEqual(exc.exception.status_code, 402)
        self.assertEqual(exc.exception.detail, "Insufficient credits")

    def test_unexpected_errors_map_to_http_500(self):
        with patch(
            "study_planner.api.v1.routes.plans.generate_plan_workflow",
            side_effect=RuntimeError("boom"),
        ):
            with self.assertRaises(HTTPException) as exc:
                handle_generate_plan_request(PlanRequest(subject="Python"), route_path="/api/v1/plans")

        self.assertEqual(exc.exception.status_code, 500)
        self.assertEqual(exc.exception.detail, "boom")

    def test_create_plan_forwards_expected_route_path(self):
        req = PlanRequest(subject="Python")
        with patch(
            "study_planner.api.v1.routes.plans.handle_generate_plan_request",
            return_value={"tasks": []},
        ) as mock_handler:
            create_plan(req)
        mock_handler.assert_called_once_with(req, route_path="/api/v1/plans")

    def test_legacy_route_forwards_expected_route_path(self):
        req = PlanRequest(subject="Python")
        with patch(
            "study_planner.main.handle_generate_plan_request",
            return_value={"tasks": []},
        ) as mock_handler:
            generate_plan_legacy(req)
        mock_handler.assert_called_once_with(req, route_path="/generate-plan")


class TestGeneratePlanEndToEnd(unittest.TestCase):
    def setUp(self):
        self.client = TestClient(app)

    def test_subject_and_prompt_yield_repaired_tasks(self):
        with patch(f"{ORCHESTRATOR}.invoke_plan_model", return_value=MODEL_REPLY):
            res = self.client.post(
                "/generate-plan",
                json={"subject": "Python", "prompt": "learn basics in 5 days, 1h/day"},
            )

        self.assertEqual(res.status_code, 200)
        body = res.json()
        tasks = body["tasks"]
        self.assertTrue(1 <= len(tasks) <= 25)
        for task in tasks:
            self.assertEqual(task["category"], "Python")
            self.assertRegex(task["date"], r"^\d{4}-\d{2}-\d{2}$")
        dates = [task["date"] for task in tasks]
        self.assertEqual(dates, sorted(dates))
        self.assertEqual(body["analysis"]["modules"], ["Syntax", "Control flow"])

    def test_rate_limited_upstream_returns_429_without_tasks(self):
        response = httpx.Response(429, request=httpx.Request("POST", "https://gateway.test/v1/chat/completions"))
        llm = Mock()
        llm.invoke.side_effect = openai.RateLimitError("rate limited", response=response, body=None)

        with patch.dict(os.environ, {"LLM_GATEWAY_API_KEY": "test-key"}), patch(
            f"{ORCHESTRATOR}._build_client", return_value=llm
        ):
            res = self.client.post("/generate-plan", json={"subject": "Python"})

        self.assertEqual(res.status_code, 429)
        body = res.json()
        self.assertNotIn("tasks", body)
        self.assertIn("limit", body["detail"].lower())

    def test_missing_subject_returns_400(self):
        res = self.client.post("/generate-plan", json={"prompt": "anything"})
        self.assertEqual(res.status_code, 400)
        self.assertEqual(res.json()["detail"], "Subject is required")
        self.assertEqual(res.json()["error"], "Subject is required")

    def test_binary_file_content_returns_400(self):
        res = self.client.post("/api/v1/plans", json={"subject": "Python", "fileContent": "\x00\x01\x02PDF"})
        self.assertEqual(res.status_code, 400)

    def test_non_json_model_reply_returns_500(self):
        with patch(f"{ORCHESTRATOR}.invoke_plan_model", return_value="Sure! Here is your plan."):
            res = self.client.post("/generate-plan", json={"subject": "Python"})

        self.assertEqual(res.status_code, 500)
        self.assertNotIn("tasks", res.json())
        self.assertEqual(res.json()["detail"], "Failed to process AI response")

    def test_missing_credential_returns_500(self):
        with patch.dict(os.environ, {"LLM_GATEWAY_API_KEY": ""}), patch(f"{ORCHESTRATOR}._build_client") as mock_build:
            res = self.client.post("/generate-plan", json={"subject": "Python"})

        self.assertEqual(res.status_code, 500)
        mock_build.assert_not_called()

    def test_preflight_returns_cors_headers(self):
        res = self.client.options(
            "/generate-plan",
            headers={
                "Origin": "http://localhost:5173",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "content-type, authorization",
            },
        )
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.headers["access-control-allow-origin"], "*")
        self.assertTrue(re.search("POST", res.headers["access-control-allow-methods"]))


if __name__ == "__main__":
    unittest.main()
