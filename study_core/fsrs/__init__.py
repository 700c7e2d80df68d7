"""
FSRS - Free Spaced Repetition Scheduler

Main API of the scheduling core.

This package implements the FSRS-5 spaced repetition algorithm with:
- Power forgetting curve: R = (1 + FACTOR * t / S) ^ DECAY
- Interpretable memory state (Stability, Difficulty, Retrievability)
- New -> Learning -> Review <-> Relearning state machine
- Learning steps, interval capping and deterministic fuzz

Quick start:
    from datetime import datetime, timezone
    from study_core import fsrs

    scheduler = fsrs.Scheduler()
    now = datetime.now(timezone.utc)

    # Grade a card (pure: no DB calls, no system clock)
    card, review_log = scheduler.review(fsrs.Card.new(now), fsrs.Rating.GOOD, now)

    # Hand the result to the persistence layer
    row = fsrs.card_to_record(card)
"""

# Core scheduler API (algorithm logic)
from study_core.fsrs.scheduler import Scheduler, ReviewLog

# Configuration
from study_core.fsrs.parameters import SchedulerParameters

# Constants and enums
from study_core.fsrs.constants import (
    Rating,
    State,
    TRANSITIONS,
    DECAY,
    FACTOR,
    D_MIN,
    D_MAX,
    STABILITY_MIN,
    DEFAULT_WEIGHTS,
    WEIGHT_BOUNDS,
)

# Errors
from study_core.fsrs.exceptions import (
    SchedulingError,
    InvalidState,
    InvalidConfiguration,
    InvalidInput,
)

# Memory state (for advanced usage)
from study_core.fsrs.memory_state import (
    Card,
    calculate_retrievability,
    interval_for_retention,
    card_retrievability,
    validate_card,
)

# Interval utilities
from study_core.fsrs.intervals import (
    next_interval,
    fuzz_range,
    apply_fuzz,
)

# Persistence boundary
from study_core.fsrs.records import (
    parse_rating,
    card_to_record,
    card_from_record,
    review_log_to_record,
)

# Review queue
from study_core.fsrs.queue import (
    is_due,
    due_cards,
    review_forecast,
)


__all__ = [
    # Core algorithm
    "Scheduler",
    "ReviewLog",
    "SchedulerParameters",

    # Enums
    "Rating",
    "State",
    "TRANSITIONS",

    # Errors
    "SchedulingError",
    "InvalidState",
    "InvalidConfiguration",
    "InvalidInput",

    # Memory state
    "Card",
    "calculate_retrievability",
    "interval_for_retention",
    "card_retrievability",
    "validate_card",

    # Intervals
    "next_interval",
    "fuzz_range",
    "apply_fuzz",

    # Records
    "parse_rating",
    "card_to_record",
    "card_from_record",
    "review_log_to_record",

    # Queue
    "is_due",
    "due_cards",
    "review_forecast",

    # Parameters
    "DECAY",
    "FACTOR",
    "D_MIN",
    "D_MAX",
    "STABILITY_MIN",
    "DEFAULT_WEIGHTS",
    "WEIGHT_BOUNDS",
]
