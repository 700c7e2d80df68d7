"""
Interval utilities: retention-to-interval inversion, capping, fuzz and
learning-step delays.
"""

from __future__ import annotations

import math
import random
from datetime import datetime, timedelta
from typing import Optional, Sequence

from study_core.fsrs.constants import FUZZ_MIN_INTERVAL, FUZZ_RANGES, Rating
from study_core.fsrs.memory_state import Card, interval_for_retention


def next_interval(stability: float, retention: float, maximum_interval: int) -> int:
    """
    Whole days until retrievability falls to `retention`, clamped to
    [1, maximum_interval].
    """
    interval = round(interval_for_retention(stability, retention))
    return max(1, min(maximum_interval, interval))


def fuzz_delta(interval: float) -> float:
    """
    Half-width of the fuzz window in days.

    Grows with the interval: 15% of the part between 2.5 and 7 days,
    10% of the part between 7 and 20, 5% beyond, plus one day.
    """
    delta = 1.0
    for start, end, factor in FUZZ_RANGES:
        delta += factor * max(min(interval, end) - start, 0.0)
    return delta


def fuzz_range(interval: int, maximum_interval: int) -> tuple[int, int]:
    """
    Inclusive (low, high) day bounds a fuzzed interval may take. Both
    bounds lie within fuzz_delta(interval) of the interval.

    Intervals shorter than 2.5 days are not fuzzed.
    """
    if interval < FUZZ_MIN_INTERVAL:
        return interval, interval

    delta = fuzz_delta(interval)
    low = max(2, math.ceil(interval - delta))
    high = min(math.floor(interval + delta), maximum_interval)
    low = min(low, high)
    return low, high


def apply_fuzz(interval: int, maximum_interval: int, rng: random.Random) -> int:
    """Pick a day uniformly within the fuzz range; always within [1, maximum_interval]."""
    low, high = fuzz_range(interval, maximum_interval)
    return max(1, min(rng.randint(low, high), maximum_interval))


def fuzz_seed(card: Card, now: datetime, seed: int) -> str:
    """
    Deterministic seed for one review.

    Same scheduler seed + same card + same review time -> same fuzz, so the
    scheduler stays a pure function of its inputs.
    """
    return f"{seed}:{now.isoformat()}:{card.reps}:{card.stability}:{card.difficulty}"


def learning_step_delay(
    steps: Sequence[timedelta],
    step: Optional[int],
    rating: Rating
) -> tuple[int, timedelta]:
    """
    Next step index and delay for a card that stays in (re)learning.

    - Again: back to the first step
    - Hard: repeat the current step; the delay is the midpoint of the current
      and next step, or 1.5x the step when it is the last one
    - Good: advance to the next step (repeat the last step if there is none)

    Args:
        steps: Configured step durations (non-empty)
        step: Current step index, None for a card entering (re)learning
        rating: Rating that keeps the card in (re)learning

    Returns:
        (new_step, delay)
    """
    if not steps:
        raise ValueError("learning_step_delay needs at least one step")

    current = min(step or 0, len(steps) - 1)

    if rating == Rating.AGAIN:
        return 0, steps[0]

    if rating == Rating.HARD:
        if current + 1 < len(steps):
            return current, (steps[current] + steps[current + 1]) / 2
        return current, steps[current] * 1.5

    next_step = min(current + 1, len(steps) - 1)
    return next_step, steps[next_step]
