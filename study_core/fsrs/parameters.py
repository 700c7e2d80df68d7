"""
Scheduler parameters.

Immutable configuration supplied once when the scheduler is built. Any
malformed option is reported as InvalidConfiguration before a single card
is scheduled.
"""

from __future__ import annotations

import math
import os
from datetime import timedelta
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from study_core.fsrs.constants import (
    DEFAULT_LEARNING_STEPS,
    DEFAULT_MAXIMUM_INTERVAL,
    DEFAULT_RELEARNING_STEPS,
    DEFAULT_REQUESTED_RETENTION,
    DEFAULT_WEIGHTS,
    WEIGHT_BOUNDS,
    WEIGHT_COUNT,
)
from study_core.fsrs.exceptions import InvalidConfiguration
from study_core.logging_config import get_logger

logger = get_logger(__name__)


class SchedulerParameters(BaseModel):
    """Weight vector, target retention, interval cap and learning steps."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    weights: tuple[float, ...] = Field(default=DEFAULT_WEIGHTS, description="FSRS weight vector")
    requested_retention: float = Field(
        default=DEFAULT_REQUESTED_RETENTION, gt=0, lt=1, description="Target recall probability"
    )
    maximum_interval: int = Field(
        default=DEFAULT_MAXIMUM_INTERVAL, gt=0, strict=True, description="Interval cap in days"
    )
    learning_steps: tuple[timedelta, ...] = DEFAULT_LEARNING_STEPS
    relearning_steps: tuple[timedelta, ...] = DEFAULT_RELEARNING_STEPS

    def __init__(self, **data):
        try:
            super().__init__(**data)
        except ValidationError as exc:
            raise InvalidConfiguration(f"invalid scheduler parameters: {exc}") from exc

    @field_validator("weights")
    @classmethod
    def _check_weights(cls, value: tuple[float, ...]) -> tuple[float, ...]:
        if len(value) != WEIGHT_COUNT:
            raise ValueError(f"expected {WEIGHT_COUNT} weights, got {len(value)}")
        if not all(math.isfinite(weight) for weight in value):
            raise ValueError("weights must be finite")
        for index, (weight, (low, high)) in enumerate(zip(value, WEIGHT_BOUNDS)):
            if not low <= weight <= high:
                raise ValueError(f"w{index}={weight} is outside [{low}, {high}]")
        return value

    @field_validator("learning_steps", "relearning_steps")
    @classmethod
    def _check_steps(cls, value: tuple[timedelta, ...]) -> tuple[timedelta, ...]:
        if any(step <= timedelta(0) for step in value):
            raise ValueError("learning steps must be positive durations")
        return value

    @classmethod
    def from_env(cls, dotenv_path: Optional[str] = None) -> "SchedulerParameters":
        """
        Build parameters from environment variables (after loading .env).

        Recognised variables:
            FSRS_REQUESTED_RETENTION   float in (0, 1)
            FSRS_MAXIMUM_INTERVAL      integer days
            FSRS_WEIGHTS               comma-separated floats
            FSRS_LEARNING_STEPS        comma-separated minutes ("" for none)
            FSRS_RELEARNING_STEPS      comma-separated minutes ("" for none)

        Unset variables keep their defaults.
        """
        load_dotenv(dotenv_path)

        options = {}
        retention = os.getenv("FSRS_REQUESTED_RETENTION")
        if retention is not None:
            options["requested_retention"] = _parse_float(retention, "FSRS_REQUESTED_RETENTION")

        maximum_interval = os.getenv("FSRS_MAXIMUM_INTERVAL")
        if maximum_interval is not None:
            options["maximum_interval"] = _parse_int(maximum_interval, "FSRS_MAXIMUM_INTERVAL")

        weights = os.getenv("FSRS_WEIGHTS")
        if weights is not None:
            options["weights"] = tuple(
                _parse_float(item, "FSRS_WEIGHTS") for item in _split_list(weights)
            )

        for env_name, field_name in (
            ("FSRS_LEARNING_STEPS", "learning_steps"),
            ("FSRS_RELEARNING_STEPS", "relearning_steps"),
        ):
            raw = os.getenv(env_name)
            if raw is not None:
                options[field_name] = tuple(
                    timedelta(minutes=_parse_float(item, env_name)) for item in _split_list(raw)
                )

        logger.debug("Scheduler parameters from environment: %s", sorted(options))
        return cls(**options)


def _split_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def _parse_float(raw: str, name: str) -> float:
    try:
        return float(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be a number, got {raw!r}") from None


def _parse_int(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise InvalidConfiguration(f"{name} must be an integer, got {raw!r}") from None
