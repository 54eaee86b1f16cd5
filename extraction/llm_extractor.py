"""
LLM-assisted activity extraction for the Study Week Planner.
Asks Gemini for a JSON array of activities, then validates every item
against ParsedActivity so downstream code sees the same records as the
rule-based parser produces.
"""

import os
import json
import logging
import re
import google.generativeai as genai
from typing import List, Tuple, Any
from pydantic import ValidationError

from models import ParsedActivity, ActivityCategory, WEEKDAY_NAMES

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.5-flash"

PROMPT_TEMPLATE = """
Extract the weekly recurring activities described in the text below.

OUTPUT FORMAT:
A single valid JSON Array. One object per activity.

STRICT SCHEMA RULES:
1. FIELDS:
   - "title" (string, Title Case, e.g. "Soccer Practice")
   - "days" (list of integers, 0=Sunday, 1=Monday ... 6=Saturday)
   - "start_time" (string "HH:MM", 24-hour, or null)
   - "end_time" (string "HH:MM", 24-hour, or null)
   - "duration_hours" (number or null)
   - "category" (one of {categories})
   - "is_flexible" (bool, true if the text says optional/maybe/usually/sometimes)
2. Do NOT invent days or times that the text does not state.
3. Bare hours below 8 without am/pm are afternoon/evening (e.g. "at 3" is "15:00").

TEXT:
{text}
"""


class LLMActivityExtractor:
    def __init__(self, api_key: str | None = None, model_name: str = DEFAULT_MODEL):
        self.api_key = api_key or os.environ.get("GOOGLE_API_KEY")
        if not self.api_key:
            raise ValueError("GOOGLE_API_KEY not found. Please set it in environment.")

        genai.configure(api_key=self.api_key)
        self.model = genai.GenerativeModel(model_name)
        self.total_cost = 0.0

    def _estimate_cost(self, prompt_tokens: int, response_tokens: int) -> float:
        return (prompt_tokens * 0.075 + response_tokens * 0.30) / 1_000_000

    def _robust_parse_json(self, raw_text: str) -> List[Any]:
        """
        Strips Markdown fences and normalizes the payload to a list of dicts.
        """
        if not raw_text:
            return []

        clean_text = re.sub(r"```json\s*|\s*```", "", raw_text).strip()

        try:
            data = json.loads(clean_text)
        except json.JSONDecodeError:
            # Fallback: pull the first JSON array out of surrounding prose
            match = re.search(r'(\[.*\])', clean_text, re.DOTALL)
            if not match:
                return []
            try:
                data = json.loads(match.group(1))
            except json.JSONDecodeError:
                return []

        if isinstance(data, list):
            return [item for item in data if isinstance(item, dict)]
        if isinstance(data, dict):
            for key in ['activities', 'result']:
                if key in data and isinstance(data[key], list):
                    return [item for item in data[key] if isinstance(item, dict)]
            return [data]
        return []

    def _normalize_item(self, item: dict, text: str) -> dict:
        """Light clean-up of fields models commonly get slightly wrong."""
        item = dict(item)
        item.setdefault('description', text.strip()[:200])

        if 'category' in item:
            category = str(item['category']).strip().lower()
            valid = {c.value for c in ActivityCategory}
            item['category'] = category if category in valid else ActivityCategory.PERSONAL.value

        days = item.get('days')
        if isinstance(days, list):
            lookup = {name.lower(): i for i, name in enumerate(WEEKDAY_NAMES)}
            item['days'] = [lookup.get(str(d).lower(), d) for d in days]
        return item

    def extract(self, text: str) -> Tuple[List[ParsedActivity], float]:
        """
        Returns (activities expanded to one record per day, estimated cost in USD).
        A failed request yields an empty list; invalid items are skipped.
        """
        if not text or not text.strip():
            return [], 0.0

        categories = json.dumps([c.value for c in ActivityCategory])
        prompt = PROMPT_TEMPLATE.format(categories=categories, text=text)

        try:
            generation_config = genai.GenerationConfig(
                response_mime_type="application/json",
                max_output_tokens=4000,
                temperature=0.0
            )
            response = self.model.generate_content(prompt, generation_config=generation_config)

            cost = 0.0
            if hasattr(response, 'usage_metadata'):
                p_tok = response.usage_metadata.prompt_token_count
                r_tok = response.usage_metadata.candidates_token_count
                cost = self._estimate_cost(p_tok, r_tok)
            self.total_cost += cost

            raw_items = self._robust_parse_json(response.text)
        except Exception as e:
            logger.error(f"Activity extraction request failed: {e}")
            return [], 0.0

        activities: List[ParsedActivity] = []
        for i, item in enumerate(raw_items):
            try:
                parsed = ParsedActivity(**self._normalize_item(item, text))
            except ValidationError as e:
                logger.warning(f"Skipping invalid item {i}: {e.json()}")
                continue
            activities.extend(parsed.expand())

        logger.info(f"Extracted {len(activities)} activity records (cost ${cost:.4f})")
        return activities, cost
