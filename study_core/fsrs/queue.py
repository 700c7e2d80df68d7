"""
Review queue helpers.

Pure functions over card records for building a study session:
which cards are due, in what order, and how the upcoming load looks.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Iterable

from study_core.fsrs.memory_state import Card, card_retrievability, check_timestamp, validate_card


def is_due(card: Card, now: datetime) -> bool:
    return card.due_at <= now


def due_cards(cards: Iterable[Card], now: datetime) -> list[Card]:
    """
    Get all cards due for review, sorted by urgency.

    Priority order:
    1. Reviewed cards, lowest current retrievability first
    2. New cards, oldest due date first

    Args:
        cards: Card records
        now: Reference time

    Returns:
        Due cards, most urgent first

    Raises:
        InvalidState: if a card violates a card invariant
    """
    check_timestamp(now)
    cards = list(cards)
    for card in cards:
        validate_card(card)
    due = [card for card in cards if is_due(card, now)]

    reviewed = [card for card in due if not card.is_new]
    reviewed.sort(key=lambda card: card_retrievability(card, now))

    new = [card for card in due if card.is_new]
    new.sort(key=lambda card: card.due_at)

    return reviewed + new


def review_forecast(cards: Iterable[Card], now: datetime) -> dict[str, int]:
    """
    Get forecast of upcoming reviews.

    Day boundaries are taken in the timezone of `now`. New cards are not
    counted.

    Returns:
        Dict with counts: overdue, today, tomorrow, this_week, later
    """
    check_timestamp(now)
    today_start = now.replace(hour=0, minute=0, second=0, microsecond=0)
    tomorrow_start = today_start + timedelta(days=1)
    week_end = today_start + timedelta(days=7)

    forecast = {
        "overdue": 0,
        "today": 0,
        "tomorrow": 0,
        "this_week": 0,
        "later": 0,
    }

    for card in cards:
        if card.is_new:
            continue

        if card.due_at < today_start:
            forecast["overdue"] += 1
        elif card.due_at < tomorrow_start:
            forecast["today"] += 1
        elif card.due_at < tomorrow_start + timedelta(days=1):
            forecast["tomorrow"] += 1
        elif card.due_at < week_end:
            forecast["this_week"] += 1
        else:
            forecast["later"] += 1

    return forecast
