# -*- coding: utf-8 -*-
"""
src/nwminimap/core/position_validator.py

Hysteresis filter that decides whether a parsed candidate becomes the new
validated position.

Single-frame OCR misreads show up as large jumps away from the last accepted
position and are rejected. A long run of consecutive jumps is taken as a
genuine teleport, after which the next candidate is accepted (subject only
to the map bounds) and becomes the new baseline.

The tracker memory is an explicit immutable value: `validate()` takes the
current `TrackerState` and returns the next one, so the state machine has no
hidden storage and can be tested in isolation.
"""

import dataclasses
import logging
import time
from dataclasses import dataclass
from typing import NamedTuple, Optional

from .position_parser import Candidate

logger = logging.getLogger(__name__)

# Consecutive rejected jumps after which the next reading is trusted.
MAX_INVALID_STREAK = 50

# Largest per-axis move between two readings that is not considered a jump.
JUMP_TOLERANCE = 30

# Playable area, in game units (inclusive).
MIN_X, MAX_X = 4468, 14260
MIN_Y, MAX_Y = 84, 9999

# Canonical coordinate space folding.
X_MODULUS = 100000
X_FOLD_STEP = 10000
Y_MODULUS = 10000


@dataclass(frozen=True)
class TrackerState:
    """
    Validator memory carried from one cycle to the next.

    A fresh state starts saturated so that the first reading of a session
    becomes the baseline without having to pass the jump check.
    """
    last_x: float = 0.0
    last_y: float = 0.0
    last_valid_at: Optional[float] = None
    invalid_streak: int = MAX_INVALID_STREAK


class ValidationResult(NamedTuple):
    accepted: bool
    state: TrackerState
    position: Optional[Candidate]


def normalize_candidate(candidate: Candidate) -> Candidate:
    """Folds raw coordinates back into the game's canonical range."""
    x = candidate.x % X_MODULUS
    while x > MAX_X:
        x -= X_FOLD_STEP
    y = candidate.y % Y_MODULUS
    return Candidate(x, y)


def is_within_bounds(position: Candidate) -> bool:
    return MIN_X <= position.x <= MAX_X and MIN_Y <= position.y <= MAX_Y


def validate(
    candidate: Candidate,
    state: TrackerState,
    now: Optional[float] = None,
) -> ValidationResult:
    """
    Runs one candidate through the hysteresis state machine.

    Args:
        candidate (Candidate): The parsed, unvalidated position.
        state (TrackerState): The memory produced by the previous call.
        now (Optional[float]): Acceptance timestamp; defaults to time.time().

    Returns:
        ValidationResult: `accepted`, the next state, and the accepted
        position in canonical space (the last accepted position for a jump
        rejection, None for an out-of-bounds rejection).
    """
    position = normalize_candidate(candidate)

    if state.invalid_streak >= MAX_INVALID_STREAK:
        logger.debug(f"Invalid streak saturated at {state.invalid_streak}; trusting {position}.")
        state = dataclasses.replace(state, invalid_streak=0)
    elif (abs(state.last_x - position.x) > JUMP_TOLERANCE
            or abs(state.last_y - position.y) > JUMP_TOLERANCE):
        state = dataclasses.replace(state, invalid_streak=state.invalid_streak + 1)
        logger.debug(
            f"Jump from ({state.last_x}, {state.last_y}) to {tuple(position)} rejected "
            f"(streak {state.invalid_streak}/{MAX_INVALID_STREAK})."
        )
        return ValidationResult(False, state, Candidate(state.last_x, state.last_y))

    if is_within_bounds(position):
        state = dataclasses.replace(
            state,
            last_x=position.x,
            last_y=position.y,
            last_valid_at=time.time() if now is None else now,
        )
        return ValidationResult(True, state, position)

    logger.debug(f"Position {tuple(position)} is outside the playable area.")
    return ValidationResult(False, state, None)
