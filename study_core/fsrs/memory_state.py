"""
Memory State - Card Record and Retrievability

Defines the card scheduling record and the forgetting curve.

Key concepts:
- Stability (S): Days until retrievability decays to 90%
- Difficulty (D): How hard the card is to learn (1-10 scale)
- Retrievability (R): Probability of successful recall at time t
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional
import math

from study_core.fsrs.constants import D_MAX, D_MIN, DECAY, FACTOR, State
from study_core.fsrs.exceptions import InvalidInput, InvalidState


SECONDS_PER_DAY = 86400.0


@dataclass(frozen=True)
class Card:
    """
    Scheduling state for a single card.

    Immutable: the scheduler returns a new Card for every review.
    stability and difficulty are None until the first rating.
    """
    due_at: datetime
    state: State = State.NEW

    # Long-term memory parameters
    stability: Optional[float] = None  # S, in days
    difficulty: Optional[float] = None  # D, range 1-10

    # Learning/relearning step index (None outside those states)
    step: Optional[int] = None

    # Review tracking
    reps: int = 0
    lapses: int = 0
    last_review_at: Optional[datetime] = None

    # Audit: whole days actually elapsed vs. planned for the next interval
    elapsed_days: int = 0
    scheduled_days: int = 0

    @classmethod
    def new(cls, now: datetime) -> "Card":
        """Create an empty card, due immediately."""
        return cls(due_at=now)

    @property
    def is_new(self) -> bool:
        return self.state == State.NEW

    def evolve(self, **changes) -> "Card":
        return replace(self, **changes)


def _is_finite_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _check_stability(stability: float) -> None:
    if not _is_finite_number(stability) or stability <= 0:
        raise InvalidState(f"stability must be a finite positive number, got {stability!r}")


def calculate_retrievability(stability: float, elapsed_days: float) -> float:
    """
    Calculate retrievability using the power forgetting curve.

    Formula: R = (1 + FACTOR * t / S) ^ DECAY

    Where:
    - t = time since last review (in days)
    - S = stability (in days)

    Interpretation:
    - Immediately after review: R = 1.0
    - At t = S: R = 0.9
    - As time passes: R decays smoothly towards 0 but never reaches it

    Args:
        stability: Current stability in days
        elapsed_days: Time since last review in days

    Returns:
        Retrievability in (0, 1]
    """
    _check_stability(stability)
    if not _is_finite_number(elapsed_days) or elapsed_days < 0:
        raise InvalidInput(f"elapsed_days must be a finite non-negative number, got {elapsed_days!r}")

    return (1.0 + FACTOR * elapsed_days / stability) ** DECAY


def interval_for_retention(stability: float, retention: float) -> float:
    """
    Inverse of the forgetting curve: days until R falls to `retention`.

    Formula: t = S / FACTOR * (R ^ (1 / DECAY) - 1)

    Args:
        stability: Current stability in days
        retention: Target retrievability, in (0, 1]

    Returns:
        Interval in (fractional) days
    """
    _check_stability(stability)
    if not _is_finite_number(retention) or not 0 < retention <= 1:
        raise InvalidInput(f"retention must be in (0, 1], got {retention!r}")

    return stability / FACTOR * (retention ** (1.0 / DECAY) - 1.0)


def elapsed_days_between(start: datetime, end: datetime) -> float:
    """Fractional days from start to end (negative if end precedes start)."""
    return (end - start).total_seconds() / SECONDS_PER_DAY


def card_retrievability(card: Card, now: datetime) -> float:
    """
    Current retrievability of a stored card.

    New cards have nothing to recall and return 0.0.
    """
    if card.is_new:
        return 0.0
    check_timestamp(now)
    elapsed = max(elapsed_days_between(card.last_review_at, now), 0.0)
    return calculate_retrievability(card.stability, elapsed)


def check_timestamp(now) -> None:
    """Injected clock values must be timezone-aware datetimes."""
    if not isinstance(now, datetime):
        raise InvalidInput(f"now must be a datetime, got {type(now).__name__}")
    if now.tzinfo is None or now.utcoffset() is None:
        raise InvalidInput("now must be timezone-aware")


def validate_card(card: Card) -> None:
    """
    Check stored card fields against the scheduling invariants.

    Raises:
        InvalidState: if any invariant is violated
    """
    if not isinstance(card, Card):
        raise InvalidState(f"expected a Card, got {type(card).__name__}")
    if not isinstance(card.state, State):
        raise InvalidState(f"unknown state {card.state!r}")
    if not isinstance(card.due_at, datetime) or card.due_at.tzinfo is None:
        raise InvalidState("due_at must be a timezone-aware datetime")
    if card.reps < 0 or card.lapses < 0:
        raise InvalidState("reps and lapses must be non-negative")

    if card.state == State.NEW:
        if card.reps != 0 or card.lapses != 0 or card.last_review_at is not None:
            raise InvalidState("a new card cannot have reviews, lapses or a last review")
        return

    _check_stability(card.stability)
    if not _is_finite_number(card.difficulty) or not D_MIN <= card.difficulty <= D_MAX:
        raise InvalidState(
            f"difficulty must be within [{D_MIN}, {D_MAX}], got {card.difficulty!r}"
        )
    if card.reps < 1:
        raise InvalidState(f"a {card.state.name} card must have at least one review")
    if card.lapses > card.reps:
        raise InvalidState("lapses cannot exceed reps")
    if card.last_review_at is None:
        raise InvalidState(f"a {card.state.name} card must have last_review_at")
    if card.last_review_at.tzinfo is None:
        raise InvalidState("last_review_at must be timezone-aware")
    if card.due_at < card.last_review_at:
        raise InvalidState("due_at precedes last_review_at")
    if card.state in (State.LEARNING, State.RELEARNING):
        if not isinstance(card.step, int) or card.step < 0:
            raise InvalidState(f"a {card.state.name} card needs a non-negative step")
