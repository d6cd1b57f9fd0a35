"""Recurrence projection for araise."""

from araise.recurrence.occurrences import (
    occurs_on_date,
    occurrences_for_date,
    occurrences_in_range,
    sort_occurrences,
)

__all__ = [
    "occurs_on_date",
    "occurrences_for_date",
    "occurrences_in_range",
    "sort_occurrences",
]
