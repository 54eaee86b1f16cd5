"""
Rule-based Text-to-Activity Parser.

Turns a free-text description of a weekly routine into ParsedActivity records:
    "I have gym on Monday and Wednesday at 6pm for 1 hour."
    -> Gym, Monday 18:00-19:00 (fitness)
    -> Gym, Wednesday 18:00-19:00 (fitness)

Each sentence is handled on its own. The parser never raises: anything it
cannot read becomes a None field or a dropped sentence.
"""

import logging
from typing import List, NamedTuple, Optional

from pydantic import ValidationError

from models import ParsedActivity, ActivityCategory
from models.clock import add_hours
from .vocabulary import (
    ADJACENT_DAYS_PATTERN,
    ASSUME_PM_BEFORE_HOUR,
    CATEGORY_RULES,
    CLOCK_TOKEN_PATTERN,
    DAY_NAME_TABLE,
    DAY_SHORTCUT_RULES,
    DAY_TOKEN_PATTERNS,
    DOTTED_MERIDIEM_PATTERN,
    DURATION_PATTERN,
    FALLBACK_TITLE_WORDS,
    FLEXIBLE_PATTERN,
    LEADING_FILLER_PATTERN,
    LINKING_WORD_PATTERN,
    SENTENCE_END_MERIDIEM_PATTERN,
    SENTENCE_SPLIT_PATTERN,
    TIME_RANGE_PATTERN,
    TITLE_RULES,
)

logger = logging.getLogger(__name__)


class TimeExtraction(NamedTuple):
    """Times found in one sentence. Any field may be None."""
    start_time: Optional[str]
    end_time: Optional[str]
    duration_hours: Optional[float]


class ActivityTextParser:
    """
    Extracts weekly activities from natural language.
    Stateless: one instance can serve any number of callers.
    """

    def parse_activities(self, text: str) -> List[ParsedActivity]:
        """
        Parse every sentence of `text` and expand multi-day results.
        Returns one record per (activity, day); sentences without days yield nothing.
        """
        if not isinstance(text, str):
            return []

        normalized = SENTENCE_END_MERIDIEM_PATTERN.sub(r"\1m.", text)
        normalized = DOTTED_MERIDIEM_PATTERN.sub(r"\1m", normalized)
        sentences = [s.strip() for s in SENTENCE_SPLIT_PATTERN.split(normalized) if s.strip()]
        logger.debug(f"Parsing {len(sentences)} sentences from input")

        activities: List[ParsedActivity] = []
        for sentence in sentences:
            activity = self.parse_sentence(sentence)
            if activity is None:
                continue

            expanded = activity.expand()
            if not expanded:
                logger.debug(f"No days found for '{activity.title}', skipping")
                continue

            for record in expanded:
                logger.debug(
                    f"Parsed {record.title} on day {record.day_of_week}: "
                    f"{record.start_time} - {record.end_time}"
                )
            activities.extend(expanded)

        logger.debug(f"Total activities created: {len(activities)}")
        return activities

    def parse_sentence(self, sentence: str) -> Optional[ParsedActivity]:
        """Parse a single sentence. Returns None if no title can be found."""
        lower = sentence.lower()

        title = self.extract_title(lower)
        if not title:
            return None

        days = self.extract_days(lower)
        times = self.extract_time(lower)

        try:
            return ParsedActivity(
                title=title,
                description=sentence,
                days=days or None,
                day_of_week=days[0] if len(days) == 1 else None,
                start_time=times.start_time,
                end_time=times.end_time,
                duration_hours=times.duration_hours,
                category=self.categorize(title),
                is_flexible=self.is_flexible(lower),
            )
        except ValidationError as e:
            logger.debug(f"Dropping sentence '{sentence}': {e.json()}")
            return None

    # --- Title ---

    def extract_title(self, sentence: str) -> str:
        """
        First matching title template wins; otherwise the first few words.
        Returns an empty string when nothing alphabetic is left.
        """
        for rule in TITLE_RULES:
            match = rule.pattern.search(sentence)
            if match and match.group(1).strip():
                title = LEADING_FILLER_PATTERN.sub("", match.group(1).strip())
                title = LINKING_WORD_PATTERN.sub(" ", title).strip()
                if title:
                    return _title_case(title)

        words = sentence.split()[:FALLBACK_TITLE_WORDS]
        fallback = "".join(ch for ch in " ".join(words) if ch.isalpha() or ch.isspace())
        return _title_case(fallback)

    # --- Days ---

    def extract_days(self, sentence: str) -> List[int]:
        """
        Weekday numbers (0=Sunday) mentioned in the sentence, sorted and unique.
        "every day", "weekdays" and "weekends" short-circuit the scan.
        """
        for rule in DAY_SHORTCUT_RULES:
            if rule.pattern.search(sentence):
                return list(rule.days)

        found = set()
        for match in ADJACENT_DAYS_PATTERN.finditer(sentence):
            for name in match.groups():
                found.add(DAY_NAME_TABLE[name])

        for pattern, number in DAY_TOKEN_PATTERNS:
            if pattern.search(sentence):
                found.add(number)

        return sorted(found)

    # --- Times ---

    def extract_time(self, sentence: str) -> TimeExtraction:
        """
        Start/end from clock tokens, overridden by an explicit "from X to Y"
        range. A duration fills in the end time when only a start is known.
        """
        duration = None
        duration_match = DURATION_PATTERN.search(sentence)
        if duration_match:
            value = float(duration_match.group(1))
            duration = value if duration_match.group(2).startswith('h') else value / 60

        # Numbers inside the duration phrase are not clock times.
        scannable = DURATION_PATTERN.sub(" ", sentence)
        clock_times = []
        for match in CLOCK_TOKEN_PATTERN.finditer(scannable):
            parsed = self.parse_clock(*match.groups())
            if parsed:
                clock_times.append(parsed)

        start_time = clock_times[0] if clock_times else None
        end_time = clock_times[1] if len(clock_times) > 1 else None

        if duration is not None and start_time and not end_time:
            end_time = add_hours(start_time, duration)

        range_match = TIME_RANGE_PATTERN.search(sentence)
        if range_match:
            groups = range_match.groups()
            range_start = self.parse_clock(*groups[:3])
            range_end = self.parse_clock(*groups[3:])
            if range_start and range_end:
                start_time, end_time = range_start, range_end

        return TimeExtraction(start_time, end_time, duration)

    @staticmethod
    def parse_clock(hour: str, minute: Optional[str], meridiem: Optional[str]) -> Optional[str]:
        """
        Resolve one clock token to "HH:MM".
        pm adds 12 (unless already >= 12), 12am is midnight, and a bare hour
        below 8 is assumed to be pm. Out-of-range values yield None.
        """
        try:
            hours = int(hour)
            minutes = int(minute) if minute else 0
        except (TypeError, ValueError):
            return None

        meridiem = meridiem.lower() if meridiem else None
        if meridiem == 'pm' and hours < 12:
            hours += 12
        elif meridiem == 'am' and hours == 12:
            hours = 0
        elif meridiem is None and hours < ASSUME_PM_BEFORE_HOUR:
            hours += 12

        if not (0 <= hours <= 23 and 0 <= minutes <= 59):
            return None
        return f"{hours:02d}:{minutes:02d}"

    # --- Category & flexibility ---

    def categorize(self, title: str) -> ActivityCategory:
        lower = title.lower()
        for category, pattern in CATEGORY_RULES:
            if pattern.search(lower):
                return category
        return ActivityCategory.PERSONAL

    def is_flexible(self, sentence: str) -> bool:
        return bool(FLEXIBLE_PATTERN.search(sentence.lower()))


def _title_case(text: str) -> str:
    """Capitalize the first letter of every word, leaving the rest as is."""
    return " ".join(word[:1].upper() + word[1:] for word in text.split())


_default_parser = ActivityTextParser()


def parse_activities(text: str) -> List[ParsedActivity]:
    """Module-level shortcut for ActivityTextParser().parse_activities(text)."""
    return _default_parser.parse_activities(text)
