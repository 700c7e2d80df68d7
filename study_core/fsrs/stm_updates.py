"""
Short-Term Memory (STM) Updates

Stability updates for reviews that happen less than a day after the
previous one (learning steps, same-day repeats).

The forgetting curve is fitted on day-scale intervals, so retrievability is
not meaningful here; the update depends on the rating alone.
"""

from __future__ import annotations
import math
from typing import Sequence

from study_core.fsrs.constants import STABILITY_MIN, Rating
from study_core.fsrs.ltm_updates import update_difficulty


SHORT_TERM_THRESHOLD_DAYS = 1.0


def is_short_term(elapsed_days: float) -> bool:
    return elapsed_days < SHORT_TERM_THRESHOLD_DAYS


def update_short_term_stability(w: Sequence[float], stability: float, rating: Rating) -> float:
    """
    Formula: S' = S * exp(w17 * (G - 3 + w18))

    With the default weights Again roughly halves stability, Hard shrinks
    it slightly, Good and Easy grow it.
    """
    return max(STABILITY_MIN, stability * math.exp(w[17] * (rating - 3 + w[18])))


def apply_stm_update(
    w: Sequence[float],
    stability: float,
    difficulty: float,
    rating: Rating
) -> tuple[float, float]:
    """
    Returns:
        (new_stability, new_difficulty)
    """
    return (
        update_short_term_stability(w, stability, rating),
        update_difficulty(w, difficulty, rating),
    )
