"""
Activity extraction package: free text in, ParsedActivity records out.

- text_parser: deterministic rule-based parser (the default path)
- llm_extractor: optional Gemini-backed extractor producing the same records
"""

from .text_parser import ActivityTextParser, TimeExtraction, parse_activities

__all__ = [
    "ActivityTextParser",
    "TimeExtraction",
    "parse_activities",
]
