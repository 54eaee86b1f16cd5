"""
Static vocabulary for activity text parsing.

Everything here is immutable lookup data: the weekday name table, the
ordered day/title/category rules and the time patterns. Rules are evaluated
in the order they are listed; the first that matches wins.
"""

import re
from dataclasses import dataclass
from types import MappingProxyType
from typing import Pattern, Tuple

from models import ActivityCategory

# --- Weekdays (0=Sunday ... 6=Saturday) ---

# Tuesday/Thursday and Saturday/Sunday only resolve from two-letter or longer
# forms; bare "t" and "s" are not in the table.
DAY_NAME_TABLE = MappingProxyType({
    'sunday': 0, 'sun': 0, 'su': 0,
    'monday': 1, 'mon': 1, 'm': 1,
    'tuesday': 2, 'tue': 2, 'tu': 2,
    'wednesday': 3, 'wed': 3, 'w': 3,
    'thursday': 4, 'thu': 4, 'th': 4,
    'friday': 5, 'fri': 5, 'f': 5,
    'saturday': 6, 'sat': 6, 'sa': 6,
})

FULL_DAY_NAMES = "monday|tuesday|wednesday|thursday|friday|saturday|sunday"
SHORT_DAY_NAMES = "mon|tue|wed|thu|fri|sat|sun"


def day_token_pattern(name: str) -> Pattern:
    """
    Whole-word matcher for one table entry. Names of three letters or more
    also accept a plural "s" ("Mondays"). Apostrophes, slashes and a leading
    dot count as part of a word so "I'm", "w/" and "a.m" are not read as days.
    """
    plural = "s?" if len(name) >= 3 else ""
    return re.compile(rf"(?<![\w'/.]){re.escape(name)}{plural}(?![\w'/])")


DAY_TOKEN_PATTERNS: Tuple[Tuple[Pattern, int], ...] = tuple(
    (day_token_pattern(name), number) for name, number in DAY_NAME_TABLE.items()
)

# Two day names joined by "and", a comma or whitespace.
ADJACENT_DAYS_PATTERN = re.compile(
    rf"\b({FULL_DAY_NAMES}|{SHORT_DAY_NAMES})(?:\s*(?:and|,)\s*|\s+)({FULL_DAY_NAMES}|{SHORT_DAY_NAMES})\b"
)


@dataclass(frozen=True)
class DayRule:
    """A phrase that stands for a fixed set of days and stops the scan."""
    name: str
    pattern: Pattern
    days: Tuple[int, ...]


DAY_SHORTCUT_RULES: Tuple[DayRule, ...] = (
    DayRule("every_day", re.compile(r"every\s*day|daily|all\s*days"), (0, 1, 2, 3, 4, 5, 6)),
    DayRule("weekdays", re.compile(r"weekdays?|mon-fri|monday-friday"), (1, 2, 3, 4, 5)),
    DayRule("weekends", re.compile(r"weekends?|sat-sun|saturday-sunday"), (0, 6)),
)

# --- Titles ---

DAY_TIME_KEYWORDS = rf"on|at|from|every|each|{FULL_DAY_NAMES}"
SESSION_NOUNS = "class|practice|session|meeting|training"
ACTION_VERBS = "have|attend|go to|take|do"


@dataclass(frozen=True)
class TitleRule:
    """A template whose first group captures the activity's noun phrase."""
    name: str
    pattern: Pattern


TITLE_RULES: Tuple[TitleRule, ...] = (
    # "i have soccer practice on ..."
    TitleRule("verb_before_keyword", re.compile(
        rf"\b(?:{ACTION_VERBS})\s+([a-z\s]+?)(?:\s+(?:{DAY_TIME_KEYWORDS})\b)"
    )),
    # "soccer practice on ..."
    TitleRule("leading_phrase", re.compile(
        rf"^([a-z\s]+?)(?:\s+(?:{DAY_TIME_KEYWORDS})\b)"
    )),
    # "i have soccer practice"
    TitleRule("verb_session_noun", re.compile(
        rf"(?:i\s+)?\b(?:{ACTION_VERBS})\s+([a-z\s]+?(?:{SESSION_NOUNS}))\b"
    )),
    # "soccer practice"
    TitleRule("bare_session_noun", re.compile(
        rf"([a-z\s]+?)\s+(?:{SESSION_NOUNS})\b"
    )),
)

LEADING_FILLER_PATTERN = re.compile(r"^(?:(?:i|my|the|a|an)\s+)+")
LINKING_WORD_PATTERN = re.compile(r"\s+(?:is|are|at|on)\b")
FALLBACK_TITLE_WORDS = 3

# --- Categories (order matters: "practice" must land in fitness) ---

CATEGORY_RULES: Tuple[Tuple[ActivityCategory, Pattern], ...] = (
    (ActivityCategory.FITNESS, re.compile(
        r"\b(?:gym|workout|exercise|fitness|yoga|run|swim|sport|soccer|football|basketball"
        r"|baseball|tennis|volleyball|hockey|practice|training|team)"
    )),
    (ActivityCategory.WORK, re.compile(r"\b(?:work|job|office|shift|business)")),
    (ActivityCategory.CLASS, re.compile(r"\b(?:class|lecture|lab|seminar|tutorial|course)")),
    (ActivityCategory.EXTRACURRICULAR, re.compile(
        r"\b(?:club|meeting|organization|volunteer|extracurricular|community)"
    )),
    (ActivityCategory.STUDY, re.compile(r"\b(?:study|homework|assignment|project|review|exam prep)")),
)

FLEXIBLE_PATTERN = re.compile(r"flexible|optional|maybe|usually|sometimes")

# --- Times ---

# H[:MM]; minutes need the colon, so "room 204" is not a time.
CLOCK_TOKEN_PATTERN = re.compile(
    r"(?<![\w.:])(?:at\s+)?(\d{1,2})(?::(\d{2}))?\s*(am|pm)?(?![\w:])"
)
TIME_RANGE_PATTERN = re.compile(
    r"\bfrom\s+(\d{1,2})(?::(\d{2}))?\s*(am|pm)?\s*(?:to|until|-)\s*(\d{1,2})(?::(\d{2}))?\s*(am|pm)?(?![\w:])"
)
DURATION_PATTERN = re.compile(
    r"\b(?:for|lasts?)\s+(\d+(?:\.\d+)?)\s*(hour|hr|minute|min)s?\b"
)
# Bare hours below this are read as afternoon/evening.
ASSUME_PM_BEFORE_HOUR = 8

# A dot between digits ("1.5 hours") does not end a sentence.
SENTENCE_SPLIT_PATTERN = re.compile(r"[!;]|\.(?!\d)")
# "a.m."/"p.m." before a capitalized word or at the end of the text also ends
# the sentence, so its last dot is kept.
SENTENCE_END_MERIDIEM_PATTERN = re.compile(r"\b([aApP])\.[mM]\.(?=\s+[A-Z]|\s*$)")
DOTTED_MERIDIEM_PATTERN = re.compile(r"\b([ap])\.m\b\.?", re.IGNORECASE)
