import json
import unittest
from datetime import date, timedelta

from study_planner.core.config import DATE_POLICY_CONSECUTIVE, DATE_POLICY_SPACED
from study_planner.core.errors import PlanParseError
from study_planner.schemas.requests import PlanRequest
from study_planner.schemas.responses import PlanResponse
from study_planner.services.plan_parser import parse_plan_reply, strip_code_fences

TODAY = date(2026, 3, 30)
REQUEST = PlanRequest(subject="Biology", topic="Genetics")

REPLY = {
    "estimatedDifficulty": 3,
    "totalHours": 12.5,
    "recommendedDays": 6,
    "modules": ["Mendel", "DNA"],
    "tasks": [
        {"text": "📚 Mendel's laws", "description": "Read ch. 1 (1h)", "priority": "high", "date": "2026-05-01"},
        {"text": "🧪 Punnett squares", "priority": "medium", "date": "not a date", "category": "Labs"},
        {"text": "🧠 Review", "priority": "URGENT", "subject": "Heredity"},
    ],
}


def _day(offset: int) -> str:
    return (TODAY + timedelta(days=offset)).isoformat()


class TestStripCodeFences(unittest.TestCase):
    def test_removes_json_and_bare_fences(self):
        self.assertEqual(strip_code_fences('```json\n{"a": 1}\n```'), '{"a": 1}')
        self.assertEqual(strip_code_fences('  ```\n[1]\n```  '), "[1]")

    def test_unfenced_text_is_unchanged(self):
        self.assertEqual(strip_code_fences('{"a": 1}'), '{"a": 1}')


class TestParsePlanReply(unittest.TestCase):
    def test_fenced_and_unfenced_replies_parse_identically(self):
        raw = json.dumps(REPLY)
        plain = parse_plan_reply(raw, REQUEST, TODAY)
        fenced = parse_plan_reply(f"```json\n{raw}\n```", REQUEST, TODAY)
        self.assertEqual(plain.model_dump(), fenced.model_dump())

    def test_invalid_json_raises(self):
        with self.assertRaises(PlanParseError):
            parse_plan_reply("Here is your plan: tasks...", REQUEST, TODAY)

    def test_payload_without_task_array_raises(self):
        for reply in ('{"plan": []}', '{"tasks": "none"}', "42", '"text"'):
            with self.subTest(reply=reply):
                with self.assertRaises(PlanParseError):
                    parse_plan_reply(reply, REQUEST, TODAY)

    def test_consecutive_policy_overrides_model_dates(self):
        plan = parse_plan_reply(json.dumps(REPLY), REQUEST, TODAY, DATE_POLICY_CONSECUTIVE)
        self.assertEqual([t.date for t in plan.tasks], [_day(0), _day(1), _day(2)])

    def test_spaced_policy_keeps_valid_dates_and_spaces_fallbacks(self):
        tasks = [
            {"text": "a", "date": "2026-04-10"},
            {"text": "b", "date": "tomorrow"},
            {"text": "c", "date": "2026-02-30"},
            {"text": "d"},
        ]
        plan = parse_plan_reply(json.dumps(tasks), REQUEST, TODAY, DATE_POLICY_SPACED)
        self.assertEqual([t.date for t in plan.tasks], ["2026-04-10", _day(2), _day(4), _day(6)])

    def test_defaults_are_applied_per_task(self):
        plan = parse_plan_reply(json.dumps(REPLY), REQUEST, TODAY)
        first, second, third = plan.tasks

        self.assertEqual(first.priority, "high")
        self.assertEqual(first.category, "Biology")
        self.assertEqual(first.subject, "Genetics")
        self.assertEqual(first.description, "Read ch. 1 (1h)")

        self.assertEqual(second.category, "Labs")
        self.assertIsNone(second.description)

        self.assertEqual(third.priority, "medium")
        self.assertEqual(third.subject, "Heredity")

    def test_subject_falls_back_to_general_without_topic(self):
        plan = parse_plan_reply('[{"text": "Intro"}]', PlanRequest(subject="Art"), TODAY)
        self.assertEqual(plan.tasks[0].subject, "General")
        self.assertEqual(plan.tasks[0].category, "Art")

    def test_priority_is_case_insensitive(self):
        plan = parse_plan_reply('[{"text": "x", "priority": " High "}]', REQUEST, TODAY)
        self.assertEqual(plan.tasks[0].priority, "high")

    def test_non_object_items_and_missing_text_are_repaired(self):
        plan = parse_plan_reply('["Read chapter 1", {"priority": "low"}]', REQUEST, TODAY)
        self.assertEqual(plan.tasks[0].text, "Read chapter 1")
        self.assertEqual(plan.tasks[1].text, "Study session 2")
        self.assertEqual(plan.tasks[1].priority, "low")

    def test_array_reply_has_no_analysis(self):
        plan = parse_plan_reply('[{"text": "Intro"}]', REQUEST, TODAY)
        self.assertIsNone(plan.analysis)
        self.assertNotIn("analysis", plan.to_wire())

    def test_top_level_analysis_keys_are_collected(self):
        plan = parse_plan_reply(json.dumps(REPLY), REQUEST, TODAY)
        self.assertEqual(plan.analysis.estimatedDifficulty, 3)
        self.assertEqual(plan.analysis.totalHours, 12.5)
        self.assertEqual(plan.analysis.recommendedDays, 6)
        self.assertEqual(plan.analysis.modules, ["Mendel", "DNA"])

    def test_nested_analysis_object_is_accepted(self):
        reply = {
            "analysis": {"estimatedDifficulty": 1, "totalHours": 5, "recommendedDays": 3, "modules": []},
            "tasks": [{"text": "Intro"}],
        }
        plan = parse_plan_reply(json.dumps(reply), REQUEST, TODAY)
        self.assertEqual(plan.analysis.recommendedDays, 3)

    def test_malformed_analysis_is_dropped_not_fatal(self):
        reply = {"estimatedDifficulty": 9, "totalHours": "lots", "tasks": [{"text": "Intro"}]}
        plan = parse_plan_reply(json.dumps(reply), REQUEST, TODAY)
        self.assertIsNone(plan.analysis)
        self.assertEqual(len(plan.tasks), 1)

    def test_wire_round_trip_preserves_tasks(self):
        plan = parse_plan_reply(json.dumps(REPLY), REQUEST, TODAY)
        restored = PlanResponse.model_validate(json.loads(json.dumps(plan.to_wire())))
        self.assertEqual(restored.tasks, plan.tasks)
        self.assertEqual(restored.analysis, plan.analysis)


if __name__ == "__main__":
    unittest.main()
