"""
Scheduler - FSRS Algorithm Logic

Pure scheduling and state updates (no database calls, no system clock).

Main workflow:
1. Validate card, rating and injected timestamp
2. Calculate retrievability at review time
3. Apply the first-rating, short-term or long-term update rules
4. Decide the next state from the transition table
5. Compute the next interval (learning step or fuzzed long-term interval)
6. Return the updated card + review log

Callers own loading the card, persisting the result and serialising
reviews of the same card.
"""

from __future__ import annotations
import random
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta
from typing import Any, Mapping, Optional, Union

from study_core.fsrs import ltm_updates, memory_state, stm_updates
from study_core.fsrs.constants import TRANSITIONS, Rating, State
from study_core.fsrs.exceptions import InvalidConfiguration, InvalidInput, SchedulingError
from study_core.fsrs.intervals import apply_fuzz, fuzz_seed, learning_step_delay, next_interval
from study_core.fsrs.memory_state import Card
from study_core.fsrs.parameters import SchedulerParameters
from study_core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ReviewLog:
    """
    Audit record of one grading event, ready for the persistence collaborator.

    previous_* fields are None when the card was New.
    """
    rating: Rating
    previous_state: State
    previous_stability: Optional[float]
    previous_difficulty: Optional[float]
    elapsed_days: int
    now: datetime
    retrievability: Optional[float]
    scheduled_days: int
    due_at: datetime

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["rating"] = int(self.rating)
        data["previous_state"] = int(self.previous_state)
        data["now"] = self.now.isoformat()
        data["due_at"] = self.due_at.isoformat()
        return data


class Scheduler:
    """
    FSRS scheduler.

    Holds only immutable configuration; every call is a pure function of
    (card, rating, now), so one instance can serve concurrent callers.

    Attributes:
        parameters: Weight vector, requested retention, interval cap, steps
        enable_fuzzing: Spread long-term intervals to avoid review clusters
        seed: Fuzz seed; identical seeds give identical schedules
    """

    def __init__(
        self,
        parameters: Optional[Union[SchedulerParameters, Mapping[str, Any]]] = None,
        enable_fuzzing: bool = True,
        seed: int = 0,
    ):
        if parameters is None:
            parameters = SchedulerParameters()
        elif isinstance(parameters, Mapping):
            parameters = SchedulerParameters(**parameters)
        elif not isinstance(parameters, SchedulerParameters):
            raise InvalidConfiguration(
                f"parameters must be SchedulerParameters or a mapping, got {type(parameters).__name__}"
            )

        self.parameters = parameters
        self.enable_fuzzing = enable_fuzzing
        self.seed = seed
        self.w = parameters.weights

    def review(
        self,
        card: Card,
        rating: Union[Rating, int],
        now: datetime
    ) -> tuple[Card, ReviewLog]:
        """
        Grade a card and return its next scheduling state.

        State transitions:
            - New -> Learning (Again/Hard/Good) or Review (Easy)
            - Learning -> Learning (Again/Hard) or Review (Good/Easy)
            - Review -> Relearning (Again) or Review
            - Relearning -> Relearning (Again/Hard) or Review (Good/Easy)
        A transition into Learning/Relearning graduates straight to Review
        when the matching step list is empty.

        Args:
            card: Current card record
            rating: AGAIN, HARD, GOOD or EASY (or 1-4)
            now: Timezone-aware review time supplied by the caller

        Returns:
            (updated_card, review_log)

        Raises:
            InvalidInput: malformed rating or timestamp, or now < last_review_at
            InvalidState: card fields violate an invariant
        """
        try:
            rating = _check_rating(rating)
            memory_state.check_timestamp(now)
            memory_state.validate_card(card)
            elapsed = self._elapsed_days(card, now)
        except SchedulingError as exc:
            logger.warning("Rejected review: %s", exc)
            raise

        if card.is_new:
            retrievability = None
        else:
            retrievability = memory_state.calculate_retrievability(card.stability, elapsed)

        stability, difficulty = self._next_memory_state(card, rating, elapsed, retrievability)

        next_state = TRANSITIONS[(card.state, rating)]
        lapses = card.lapses
        if rating == Rating.AGAIN and card.state in (State.REVIEW, State.RELEARNING):
            lapses += 1

        step = None
        steps = self._steps_for(next_state)
        if next_state in (State.LEARNING, State.RELEARNING) and steps:
            current_step = card.step if card.state == next_state else None
            step, delay = learning_step_delay(steps, current_step, rating)
        else:
            next_state = State.REVIEW
            delay = timedelta(days=self._review_interval(card, stability, now))

        due_at = now + delay
        scheduled_days = delay.days

        updated = card.evolve(
            state=next_state,
            stability=stability,
            difficulty=difficulty,
            step=step,
            reps=card.reps + 1,
            lapses=lapses,
            last_review_at=now,
            due_at=due_at,
            elapsed_days=int(elapsed),
            scheduled_days=scheduled_days,
        )

        log = ReviewLog(
            rating=rating,
            previous_state=card.state,
            previous_stability=card.stability,
            previous_difficulty=card.difficulty,
            elapsed_days=int(elapsed),
            now=now,
            retrievability=retrievability,
            scheduled_days=scheduled_days,
            due_at=due_at,
        )

        logger.debug(
            "Reviewed card: %s -> %s (rating=%s, S=%.4f, D=%.4f, due in %s)",
            card.state.name, next_state.name, rating.name, stability, difficulty, delay,
        )

        return updated, log

    def preview(self, card: Card, now: datetime) -> dict[Rating, Card]:
        """
        Outcome of every rating, without committing to one.

        Useful for showing predicted intervals on the rating buttons.
        """
        return {rating: self.review(card, rating, now)[0] for rating in Rating}

    def retrievability(self, card: Card, now: datetime) -> float:
        """Current recall probability (0.0 for New cards)."""
        memory_state.validate_card(card)
        return memory_state.card_retrievability(card, now)

    def _elapsed_days(self, card: Card, now: datetime) -> float:
        if card.is_new:
            return 0.0
        elapsed = memory_state.elapsed_days_between(card.last_review_at, now)
        if elapsed < 0:
            raise InvalidInput(
                f"review time {now.isoformat()} precedes last review {card.last_review_at.isoformat()}"
            )
        return elapsed

    def _next_memory_state(
        self,
        card: Card,
        rating: Rating,
        elapsed: float,
        retrievability: Optional[float]
    ) -> tuple[float, float]:
        if card.is_new:
            return (
                ltm_updates.initial_stability(self.w, rating),
                ltm_updates.initial_difficulty(self.w, rating),
            )

        if stm_updates.is_short_term(elapsed):
            return stm_updates.apply_stm_update(self.w, card.stability, card.difficulty, rating)

        return ltm_updates.apply_ltm_update(
            self.w, card.stability, card.difficulty, retrievability, rating
        )

    def _steps_for(self, state: State) -> tuple[timedelta, ...]:
        if state == State.LEARNING:
            return self.parameters.learning_steps
        if state == State.RELEARNING:
            return self.parameters.relearning_steps
        return ()

    def _review_interval(self, card: Card, stability: float, now: datetime) -> int:
        interval = next_interval(
            stability,
            self.parameters.requested_retention,
            self.parameters.maximum_interval,
        )
        if self.enable_fuzzing:
            rng = random.Random(fuzz_seed(card, now, self.seed))
            interval = apply_fuzz(interval, self.parameters.maximum_interval, rng)
        return interval


def _check_rating(rating) -> Rating:
    if isinstance(rating, Rating):
        return rating
    if isinstance(rating, int) and not isinstance(rating, bool) and 1 <= rating <= 4:
        return Rating(rating)
    raise InvalidInput(f"rating must be one of {[r.name for r in Rating]}, got {rating!r}")
