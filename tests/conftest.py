"""
Shared fixtures for scheduling tests.

The clock is always injected; nothing here reads the system time.
"""

from datetime import datetime, timedelta, timezone

import pytest

from study_core.fsrs import Card, Scheduler, SchedulerParameters, State


@pytest.fixture
def now():
    """Fixed review time."""
    return datetime(2026, 1, 15, 10, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def scheduler():
    """Default parameters, fuzz disabled so intervals are exact."""
    return Scheduler(enable_fuzzing=False)


@pytest.fixture
def fuzzy_scheduler():
    return Scheduler(enable_fuzzing=True, seed=42)


@pytest.fixture
def no_steps_scheduler():
    """Cards graduate straight to Review (no learning/relearning steps)."""
    parameters = SchedulerParameters(learning_steps=(), relearning_steps=())
    return Scheduler(parameters, enable_fuzzing=False)


@pytest.fixture
def new_card(now):
    return Card.new(now)


@pytest.fixture
def review_card(now):
    """A graduated card with S=20 last reviewed 25 days ago."""
    last_review = now - timedelta(days=25)
    return Card(
        state=State.REVIEW,
        stability=20.0,
        difficulty=5.0,
        reps=6,
        lapses=0,
        last_review_at=last_review,
        due_at=last_review + timedelta(days=20),
        scheduled_days=20,
    )


@pytest.fixture
def run_ratings():
    """Feed a rating sequence to a card, one day apart."""

    def _run(scheduler, card, ratings, start, gap=timedelta(days=1)):
        when = start
        for rating in ratings:
            card, _ = scheduler.review(card, rating, when)
            when = max(when + gap, card.due_at)
        return card

    return _run
