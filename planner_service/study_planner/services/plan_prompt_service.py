"""
Artifact: planner_service/study_planner/services/plan_prompt_service.py
Purpose: Builds the system prompt and user turn sent to the chat model for plan generation.
Author: Study Planner Team
Created: 2026-10-19
Preconditions:
- `today` is computed once per request by the caller and passed in.
Inputs:
- Acceptable: PlanRequest with a subject, optional topic/prompt, and optional bounded document text.
Postconditions:
- Output is fully determined by the request, `today`, and the date policy.
Returns:
- Prompt strings.
Errors/Exceptions:
- None.
"""

import json
from datetime import date, timedelta
from typing import Optional

from ..core.config import DATE_POLICY_CONSECUTIVE
from ..schemas.requests import PlanRequest

EXAMPLE_DATE_COUNT = 30
EXAMPLE_DATES_SHOWN = 7
DEFAULT_TASK_SUBJECT = "General"
MIN_TASKS = 5
MAX_TASKS = 30

TASK_EMOJIS = "📚 📝 🧪 📖 💡 🎯 ✍️ 🔬 📊 🧠 🎓 ✨ 🚀 💻 📱"

DIFFICULTY_SCALE = """\
   - 1: Introductory (e.g. "Intro to HTML", "Excel basics")
   - 2: Basic-Intermediate (e.g. "CSS Flexbox", "Excel formulas")
   - 3: Intermediate (e.g. "JavaScript ES6", "Python OOP")
   - 4: Advanced (e.g. "React Hooks", "Intro to Machine Learning")
   - 5: Expert (e.g. "Microservices in Go", "Deep Learning", "Kubernetes")"""

DURATION_FORMULA = """\
   - Difficulty 1: 3-5 days (5-10h total)
   - Difficulty 2: 5-10 days (10-20h total)
   - Difficulty 3: 10-15 days (20-30h total)
   - Difficulty 4: 15-25 days (30-50h total)
   - Difficulty 5: 25-30 days (50-80h total)"""


def example_dates(today: date, count: int = EXAMPLE_DATE_COUNT) -> list[str]:
    return [(today + timedelta(days=offset)).isoformat() for offset in range(count)]


def _file_context_section(file_content: Optional[str]) -> str:
    if not file_content or not file_content.strip():
        return ""
    return (
        "\nATTACHED FILE CONTENT:\n"
        '"""\n'
        f"{file_content}\n"
        '"""\n\n'
        "You MUST analyze the file content above and base the study tasks on it.\n"
    )


def _scheduling_rules(dates: list[str], policy: str) -> str:
    shown = ", ".join(dates[:EXAMPLE_DATES_SHOWN])
    if policy == DATE_POLICY_CONSECUTIVE:
        return (
            f"1. ALWAYS use CONSECUTIVE days ({shown}, ...)\n"
            "2. NEVER skip days in the schedule\n"
            "3. One main task per day\n"
            "4. Include a review every 5-7 days\n"
            "5. Start with the basics and progress gradually"
        )
    return (
        f"1. Schedule sessions starting today ({shown}, ...)\n"
        "2. You may leave rest days between sessions; keep dates in ascending order\n"
        "3. One main task per study day\n"
        "4. Include a review every 5-7 days\n"
        "5. Start with the basics and progress gradually"
    )


def _response_example(subject: str, task_subject: str, today_str: str) -> str:
    example = {
        "estimatedDifficulty": 3,
        "totalHours": 25,
        "recommendedDays": 12,
        "modules": ["Module 1: Fundamentals", "Module 2: Practice", "Module 3: Advanced"],
        "tasks": [
            {
                "text": "📚 Short task title",
                "description": "Detailed description of what to study (estimated time: 1h30min)",
                "priority": "high",
                "date": today_str,
                "category": subject,
                "subject": task_subject,
            }
        ],
    }
    return json.dumps(example, ensure_ascii=False, indent=2)


def build_system_prompt(request: PlanRequest, today: date, policy: str, file_content: Optional[str] = None) -> str:
    """
    Build the single system-level instruction string for the model.

    The example dates only anchor the model's formatting; the reply parser
    re-applies the date policy regardless of what comes back.
    """
    subject = (request.subject or "").strip()
    topic = (request.topic or "").strip()
    user_prompt = (request.prompt or "").strip()
    task_subject = topic or DEFAULT_TASK_SUBJECT

    today_str = today.isoformat()
    dates = example_dates(today)

    topic_line = f"\nTOPIC: {topic}" if topic else ""
    user_context = f"\nADDITIONAL USER CONTEXT: {user_prompt}" if user_prompt else ""
    day_examples = "\n".join(
        f"Day {index}: {value}" for index, value in enumerate(dates[:EXAMPLE_DATES_SHOWN], start=1)
    )

    return f"""\
You are an expert in pedagogy and AI-assisted study planning.

TASK: Analyze the study content and generate a smart study schedule.

SUBJECT/COURSE: {subject}{topic_line}
{user_context}
{_file_context_section(file_content)}

START DATE (TODAY): {today_str}

## PHASE 1: INTERNAL ANALYSIS (do this before generating tasks)

1. **CLASSIFY DIFFICULTY** (1 to 5):
{DIFFICULTY_SCALE}

2. **ESTIMATE SCOPE**:
   - Identify how many sub-modules/concepts are needed
   - Estimate total study hours (assume 1-2h per session)
   - Work out the number of days from the difficulty

3. **DAYS FORMULA**:
{DURATION_FORMULA}

## PHASE 2: SCHEDULE GENERATION

MANDATORY RULES:
{_scheduling_rules(dates, policy)}

EXAMPLE OF CORRECT DATES for 7 days:
{day_examples}

## MANDATORY RESPONSE FORMAT

Reply ONLY with valid JSON, with no extra text and no markdown:

{_response_example(subject, task_subject, today_str)}

TASK FIELDS:
- "text": Short title starting with an emoji (max 50 chars). Emojis: {TASK_EMOJIS}
- "description": Detailed description including the estimated time
- "priority": "high" (fundamentals), "medium" (practice), "low" (review)
- "date": YYYY-MM-DD
- "category": "{subject}"
- "subject": "{task_subject}"

Generate between {MIN_TASKS} and {MAX_TASKS} tasks depending on the analyzed difficulty."""


def build_user_message(request: PlanRequest) -> str:
    subject = (request.subject or "").strip()
    topic = (request.topic or "").strip()
    suffix = f" - {topic}" if topic else ""
    return f"Analyze and create a smart study plan for: {subject}{suffix}"
