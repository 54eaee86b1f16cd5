"""
Main Execution Script for the Study Week Planner.
Reads a planner input file, turns activity text into activities, estimates
study demand, generates the week and exports it for the frontend.

Usage: python run_planner.py [input.json] [output.json]
"""

import os
import sys
import logging
from datetime import date
import json
from typing import Any, Dict, List, Type

from pydantic import BaseModel, ValidationError

from extraction import ActivityTextParser
from scheduler.engine import WeeklyScheduleGenerator
from scheduler.requirements import StudyRequirementEstimator
from scheduler.state import AllocationState
from models import ParsedActivity, ClassMeeting, Course, Assignment, Exam

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler()]
)
logger = logging.getLogger("Main")

# --- CONFIGURATION ---
INPUT_FILENAME = "sample_planner_input.json"
OUTPUT_FILENAME = "weekly_schedule.json"
USE_LLM = False  # Set to True to extract activity text with Gemini instead of the rule parser
# ---------------------


def _load_records(items: List[Dict], model_class: Type[BaseModel], label: str) -> List[Any]:
    """Validate raw dicts one by one; invalid records are skipped, not fatal."""
    valid = []
    for i, item in enumerate(items):
        try:
            valid.append(model_class(**item))
        except (ValidationError, TypeError) as e:
            detail = e.json() if isinstance(e, ValidationError) else str(e)
            logger.warning(f"⚠️ Skipping invalid {label} #{i}: {detail}")
    return valid


def load_planner_input(filename: str) -> Dict[str, Any]:
    """
    Load the planner input file and re-hydrate Pydantic objects.
    Raises FileNotFoundError / json.JSONDecodeError for an unreadable file.
    """
    with open(filename, 'r') as f:
        data = json.load(f)

    logger.info(f"📂 Loading planner input from {filename}...")

    today = data.get("today")
    loaded = {
        "activity_text": data.get("activity_text", ""),
        "activities": _load_records(data.get("activities", []), ParsedActivity, "activity"),
        "classes": _load_records(data.get("classes", []), ClassMeeting, "class"),
        "courses": _load_records(data.get("courses", []), Course, "course"),
        "assignments": _load_records(data.get("assignments", []), Assignment, "assignment"),
        "exams": _load_records(data.get("exams", []), Exam, "exam"),
        "today": date.fromisoformat(today) if today else date.today(),
    }

    logger.info(
        f"✅ Input Loaded: {len(loaded['classes'])} class meetings, "
        f"{len(loaded['courses'])} courses, {len(loaded['activities'])} stored activities."
    )
    return loaded


def extract_activities(text: str, use_llm: bool = USE_LLM) -> List[ParsedActivity]:
    """Turn free text into schedulable activities. Incomplete records are dropped."""
    if not text:
        return []

    if use_llm:
        from extraction.llm_extractor import LLMActivityExtractor
        parsed, cost = LLMActivityExtractor().extract(text)
        logger.info(f"💸 Estimated LLM Cost: ${cost:.4f}")
    else:
        parsed = ActivityTextParser().parse_activities(text)

    schedulable = [a for a in parsed if a.is_schedulable]
    dropped = len(parsed) - len(schedulable)
    if dropped:
        logger.warning(f"⚠️ Dropped {dropped} parsed activities without a day and both times")
    return schedulable


def export_schedule(state: AllocationState, filename: str) -> None:
    """Serialize the generated week (plus run report) for the frontend."""
    logger.info(f"💾 Exporting schedule to {filename}...")

    data = state.schedule.to_payload()
    data["report"] = {
        "statistics": state.get_statistics(),
        "shortfall": state.get_shortfall_report(),
        "discarded": [
            {"type": v.constraint_type, "reason": v.reason, "source": v.source, "day_of_week": v.day_of_week}
            for v in state.violations
        ],
    }

    with open(filename, 'w') as f:
        json.dump(data, f, indent=2)
    logger.info("✅ Schedule exported.")


def main(input_path: str = INPUT_FILENAME, output_path: str = OUTPUT_FILENAME) -> AllocationState | None:
    if USE_LLM and not os.environ.get("GOOGLE_API_KEY"):
        logger.error("❌ GOOGLE_API_KEY not found. Please set it via 'export GOOGLE_API_KEY=...'")
        return None

    logger.info("🚀 Starting Study Week Planner...")

    # --- PHASE 1: INPUT ---
    try:
        planner_input = load_planner_input(input_path)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.error(f"❌ Could not read {input_path}: {e}")
        return None

    # --- PHASE 2: ACTIVITY EXTRACTION ---
    activities = planner_input["activities"] + extract_activities(planner_input["activity_text"])
    logger.info(f"📋 {len(activities)} weekly activities on the grid")

    # --- PHASE 3: STUDY DEMAND ---
    requirements = StudyRequirementEstimator().estimate(
        planner_input["courses"],
        planner_input["assignments"],
        planner_input["exams"],
        today=planner_input["today"]
    )

    # --- PHASE 4: SCHEDULING ---
    state = WeeklyScheduleGenerator().run(planner_input["classes"], activities, requirements)

    # --- PHASE 5: REPORTING ---
    stats = state.get_statistics()

    print("\n" + "=" * 50)
    print("📊 WEEKLY STUDY PLAN")
    print("=" * 50)
    for key, value in stats.items():
        print(f"{key:<20} {value}")

    shortfall = state.get_shortfall_report()
    if shortfall:
        print("\n🔍 UNMET STUDY NEED")
        for item in shortfall:
            print(f"❌ {item['course_code'] or item['course_name']}: {item['missing_hours']:.1f}h missing")

    # --- PHASE 6: EXPORT ---
    export_schedule(state, output_path)
    return state


if __name__ == "__main__":
    main(*sys.argv[1:3])
