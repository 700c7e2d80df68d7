"""
FSRS Constants and Parameters

All fixed constants and default parameters for the FSRS algorithm in one place.
Default weights are the published FSRS-5 parameter set.
"""

from datetime import timedelta
from enum import IntEnum


# ---- Ratings and States ----

class Rating(IntEnum):
    """Reviewer grade for a recall attempt. Order matters for multipliers."""
    AGAIN = 1   # Retrieval failed
    HARD = 2    # Retrieved with high effort
    GOOD = 3    # Retrieved normally
    EASY = 4    # Retrieved fluently


class State(IntEnum):
    """Scheduling state of a card."""
    NEW = 0          # Never rated
    LEARNING = 1     # Rated, not yet graduated
    REVIEW = 2       # Graduated, long-term intervals
    RELEARNING = 3   # Lapsed, back on short steps


# ---- Transition Table ----
# (current state, rating) -> next state, before graduation of empty step lists

TRANSITIONS = {
    (State.NEW, Rating.AGAIN): State.LEARNING,
    (State.NEW, Rating.HARD): State.LEARNING,
    (State.NEW, Rating.GOOD): State.LEARNING,
    (State.NEW, Rating.EASY): State.REVIEW,
    (State.LEARNING, Rating.AGAIN): State.LEARNING,
    (State.LEARNING, Rating.HARD): State.LEARNING,
    (State.LEARNING, Rating.GOOD): State.REVIEW,
    (State.LEARNING, Rating.EASY): State.REVIEW,
    (State.REVIEW, Rating.AGAIN): State.RELEARNING,
    (State.REVIEW, Rating.HARD): State.REVIEW,
    (State.REVIEW, Rating.GOOD): State.REVIEW,
    (State.REVIEW, Rating.EASY): State.REVIEW,
    (State.RELEARNING, Rating.AGAIN): State.RELEARNING,
    (State.RELEARNING, Rating.HARD): State.RELEARNING,
    (State.RELEARNING, Rating.GOOD): State.REVIEW,
    (State.RELEARNING, Rating.EASY): State.REVIEW,
}


# ---- Forgetting Curve ----
# R(t, S) = (1 + FACTOR * t / S) ** DECAY, with R(S, S) = 0.9

DECAY = -0.5
FACTOR = 0.9 ** (1 / DECAY) - 1  # 19/81


# ---- Bounds ----

STABILITY_MIN = 0.01  # days
D_MIN = 1.0
D_MAX = 10.0


# ---- Default Parameters ----

WEIGHT_COUNT = 19

DEFAULT_WEIGHTS = (
    0.40255,   # w0: initial stability, Again
    1.18385,   # w1: initial stability, Hard
    3.173,     # w2: initial stability, Good
    15.69105,  # w3: initial stability, Easy
    7.1949,    # w4: initial difficulty base
    0.5345,    # w5: initial difficulty grade exponent
    1.4604,    # w6: difficulty delta per grade
    0.0046,    # w7: difficulty mean reversion
    1.54575,   # w8: recall stability base (exp)
    0.1192,    # w9: recall stability saturation
    1.01925,   # w10: recall retrievability influence
    1.9395,    # w11: forget stability base
    0.11,      # w12: forget difficulty exponent
    0.29605,   # w13: forget stability exponent
    2.2698,    # w14: forget retrievability influence
    0.2315,    # w15: hard penalty
    2.9898,    # w16: easy bonus
    0.51655,   # w17: short-term stability rate
    0.6621,    # w18: short-term grade offset
)

# (low, high) per weight, the range an FSRS-5 optimizer may produce.
# Outside it the exponentials in the stability updates can overflow.
WEIGHT_BOUNDS = (
    (0.001, 100.0),  # w0
    (0.001, 100.0),  # w1
    (0.001, 100.0),  # w2
    (0.001, 100.0),  # w3
    (1.0, 10.0),     # w4
    (0.001, 4.0),    # w5
    (0.001, 4.0),    # w6
    (0.001, 0.75),   # w7
    (0.0, 4.5),      # w8
    (0.0, 0.8),      # w9
    (0.001, 3.5),    # w10
    (0.001, 5.0),    # w11
    (0.001, 0.25),   # w12
    (0.001, 0.9),    # w13
    (0.0, 4.0),      # w14
    (0.0, 1.0),      # w15
    (1.0, 6.0),      # w16
    (0.0, 2.0),      # w17
    (0.0, 2.0),      # w18
)

DEFAULT_REQUESTED_RETENTION = 0.9
DEFAULT_MAXIMUM_INTERVAL = 36500  # 100 years

DEFAULT_LEARNING_STEPS = (timedelta(minutes=1), timedelta(minutes=10))
DEFAULT_RELEARNING_STEPS = (timedelta(minutes=10),)


# ---- Fuzz ----
# (start_days, end_days, factor): fuzz delta grows by factor per day in range

FUZZ_MIN_INTERVAL = 2.5
FUZZ_RANGES = (
    (2.5, 7.0, 0.15),
    (7.0, 20.0, 0.10),
    (20.0, float("inf"), 0.05),
)


# ---- Record mapping ----

RATING_NAMES = {
    Rating.AGAIN: "again",
    Rating.HARD: "hard",
    Rating.GOOD: "good",
    Rating.EASY: "easy",
}
