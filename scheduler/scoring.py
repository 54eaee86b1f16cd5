"""
Heuristic Scoring for free study slots.

A slot's priority says how good a time it is to study: weekday mornings
first, then weekday afternoons, then early evenings. Weekends score lower.
"""

from models import WEEKDAYS


class SlotScorer:
    """
    Scores free slots by day and start hour. Higher is better.
    """

    WEEKDAY_BONUS = 2

    # (first hour, end hour exclusive, points); first band that matches wins
    HOUR_BANDS = (
        (9, 12, 3),   # Morning
        (14, 17, 2),  # Afternoon
        (18, 20, 1),  # Early evening
    )

    def calculate_priority(self, day_of_week: int, start_hour: int) -> int:
        priority = 0

        # Weekdays are better than weekends
        if day_of_week in WEEKDAYS:
            priority += self.WEEKDAY_BONUS

        for first, end, points in self.HOUR_BANDS:
            if first <= start_hour < end:
                priority += points
                break

        return priority
