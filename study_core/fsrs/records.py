"""
Records - conversion between Card/ReviewLog and flat persistence rows.

The persistence collaborator stores cards as rows with `fsrs_*` columns,
the state as an integer (0-3) and timestamps as ISO-8601 strings. This
module only maps values; it never touches storage.
"""

from __future__ import annotations
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from study_core.fsrs.constants import RATING_NAMES, Rating, State
from study_core.fsrs.exceptions import InvalidInput, InvalidState
from study_core.fsrs.memory_state import Card, validate_card
from study_core.fsrs.scheduler import ReviewLog


_RATINGS_BY_NAME = {name: rating for rating, name in RATING_NAMES.items()}


def parse_rating(value: Union[Rating, int, str]) -> Rating:
    """
    Map an incoming grade to a Rating.

    Accepts a Rating, an integer 1-4 or one of "again", "hard", "good",
    "easy" (case-insensitive). Anything else is rejected.

    Raises:
        InvalidInput: for unknown grades
    """
    if isinstance(value, Rating):
        return value
    if isinstance(value, str):
        rating = _RATINGS_BY_NAME.get(value.strip().lower())
        if rating is not None:
            return rating
    elif isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 4:
        return Rating(value)
    raise InvalidInput(f"unknown rating {value!r}")


def card_to_record(card: Card) -> dict[str, Any]:
    """Convert a Card to persistence fields."""
    return {
        "fsrs_stability": card.stability if card.stability is not None else 0.0,
        "fsrs_difficulty": card.difficulty if card.difficulty is not None else 0.0,
        "fsrs_elapsed_days": card.elapsed_days,
        "fsrs_scheduled_days": card.scheduled_days,
        "fsrs_reps": card.reps,
        "fsrs_lapses": card.lapses,
        "fsrs_state": int(card.state),
        "fsrs_step": card.step,
        "fsrs_last_review": card.last_review_at.isoformat() if card.last_review_at else None,
        "next_review_at": card.due_at.isoformat(),
    }


def card_from_record(record: Mapping[str, Any]) -> Card:
    """
    Convert persistence fields back to a validated Card.

    New cards are stored with zero stability/difficulty; those map back to
    None.

    Raises:
        InvalidState: if the record is incomplete or violates an invariant
    """
    try:
        state = State(int(record["fsrs_state"]))
        is_new = state == State.NEW
        step = record.get("fsrs_step")
        if step is not None:
            step = int(step)
        elif state in (State.LEARNING, State.RELEARNING):
            # Rows written without a step column resume at the first step
            step = 0

        card = Card(
            state=state,
            stability=None if is_new else float(record["fsrs_stability"]),
            difficulty=None if is_new else float(record["fsrs_difficulty"]),
            step=step,
            reps=int(record["fsrs_reps"]),
            lapses=int(record["fsrs_lapses"]),
            elapsed_days=int(record.get("fsrs_elapsed_days") or 0),
            scheduled_days=int(record.get("fsrs_scheduled_days") or 0),
            last_review_at=_parse_timestamp(record.get("fsrs_last_review")),
            due_at=_parse_timestamp(record["next_review_at"]),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidState(f"malformed card record: {exc!r}") from exc

    if card.due_at is None:
        raise InvalidState("card record has no next_review_at")
    validate_card(card)
    return card


def review_log_to_record(log: ReviewLog) -> dict[str, Any]:
    """Convert a ReviewLog to the review-history row."""
    return {
        "rating": RATING_NAMES[log.rating],
        "fsrs_stability_before": log.previous_stability,
        "fsrs_difficulty_before": log.previous_difficulty,
        "fsrs_state_before": int(log.previous_state),
        "elapsed_days": log.elapsed_days,
        "retrievability": log.retrievability,
        "scheduled_for": log.due_at.isoformat(),
        "reviewed_at": log.now.isoformat(),
    }


def _parse_timestamp(value: Optional[Union[str, datetime]]) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)
