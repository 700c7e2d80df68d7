"""
Long-Term Memory (LTM) Updates

Implements stability and difficulty updates for spaced reviews.

Key principles:
- Successful recall at low retrievability produces the largest stability gains
- Forgetting shrinks stability, less so for shaky memories
- Difficulty reflects learning efficiency and is always kept within [1, 10]

All functions take the weight vector `w` explicitly; nothing here holds state.
"""

from __future__ import annotations
import math
from typing import Sequence

from study_core.fsrs.constants import D_MAX, D_MIN, STABILITY_MIN, Rating


def clamp_difficulty(difficulty: float) -> float:
    return max(D_MIN, min(D_MAX, difficulty))


def initial_stability(w: Sequence[float], rating: Rating) -> float:
    """
    Stability after the first-ever rating.

    Formula: S0(G) = w[G - 1]
    """
    return max(STABILITY_MIN, w[rating - 1])


def initial_difficulty(w: Sequence[float], rating: Rating, clamp: bool = True) -> float:
    """
    Difficulty after the first-ever rating.

    Formula: D0(G) = w4 - exp(w5 * (G - 1)) + 1

    Args:
        w: Weight vector
        rating: First rating
        clamp: Clip to [1, 10]; the unclipped value is the mean-reversion target

    Returns:
        Initial difficulty
    """
    difficulty = w[4] - math.exp(w[5] * (rating - 1)) + 1
    return clamp_difficulty(difficulty) if clamp else difficulty


def update_difficulty(w: Sequence[float], difficulty: float, rating: Rating) -> float:
    """
    Update difficulty based on the rating.

    Formula:
        delta = -w6 * (G - 3)
        D' = D + delta * (10 - D) / 9          (linear damping near the top)
        D'' = w7 * D0(Easy) + (1 - w7) * D'    (mean reversion)
        clip(D'', 1, 10)

    Again and Hard push difficulty up, Easy pulls it down, Good leaves
    only the small mean-reversion pull.
    """
    delta = -w[6] * (rating - 3)
    damped = difficulty + delta * (D_MAX - difficulty) / 9.0
    reverted = w[7] * initial_difficulty(w, Rating.EASY, clamp=False) + (1 - w[7]) * damped
    return clamp_difficulty(reverted)


def update_stability_on_success(
    w: Sequence[float],
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating
) -> float:
    """
    Update stability after successful retrieval (Hard/Good/Easy).

    Formula:
        S' = S * (1 + exp(w8) * (11 - D) * S^(-w9)
                    * (exp(w10 * (1 - R)) - 1) * hard_penalty * easy_bonus)

    Where:
        - (exp(w10 * (1 - R)) - 1) rewards recall at low retrievability
        - (11 - D) reduces gains for difficult items
        - S^(-w9) saturates gains for already-stable memories
        - hard_penalty = w15 for Hard, easy_bonus = w16 for Easy

    Args:
        w: Weight vector
        stability: Current stability (S)
        difficulty: Current difficulty (D)
        retrievability: Retrievability at review time (R)
        rating: HARD, GOOD or EASY

    Returns:
        New stability value
    """
    if rating == Rating.AGAIN:
        raise ValueError("Use update_stability_on_failure for AGAIN ratings")

    hard_penalty = w[15] if rating == Rating.HARD else 1.0
    easy_bonus = w[16] if rating == Rating.EASY else 1.0

    increase = (
        math.exp(w[8])
        * (11 - difficulty)
        * stability ** -w[9]
        * (math.exp(w[10] * (1 - retrievability)) - 1)
        * hard_penalty
        * easy_bonus
    )

    return max(STABILITY_MIN, stability * (1 + increase))


def update_stability_on_failure(
    w: Sequence[float],
    stability: float,
    difficulty: float,
    retrievability: float
) -> float:
    """
    Update stability after failed retrieval (Again).

    Formula:
        S_f = w11 * D^(-w12) * ((S + 1)^w13 - 1) * exp(w14 * (1 - R))
        S' = min(S_f, S / exp(w17 * w18), S)

    A forgotten memory keeps only a fraction of its stability; harder cards
    keep less.

    Args:
        w: Weight vector
        stability: Current stability
        difficulty: Current difficulty
        retrievability: Retrievability at review time

    Returns:
        New stability value (never above the old one)
    """
    forget_stability = (
        w[11]
        * difficulty ** -w[12]
        * ((stability + 1) ** w[13] - 1)
        * math.exp(w[14] * (1 - retrievability))
    )
    short_term_cap = stability / math.exp(w[17] * w[18])

    return max(STABILITY_MIN, min(forget_stability, short_term_cap, stability))


def apply_ltm_update(
    w: Sequence[float],
    stability: float,
    difficulty: float,
    retrievability: float,
    rating: Rating
) -> tuple[float, float]:
    """
    Apply LTM update rules to get new S and D.

    Stability is updated from the current difficulty; difficulty is
    updated afterwards.

    Returns:
        (new_stability, new_difficulty)
    """
    if rating == Rating.AGAIN:
        new_stability = update_stability_on_failure(w, stability, difficulty, retrievability)
    else:
        new_stability = update_stability_on_success(
            w, stability, difficulty, retrievability, rating
        )

    new_difficulty = update_difficulty(w, difficulty, rating)

    return new_stability, new_difficulty
