# prizewheel/rotation.py
"""
Rotation solving for a wheel of N equal sectors.

Sector i spans [i*360/N, (i+1)*360/N) in wheel-local degrees. Turning the wheel
forward by R degrees carries a wheel-local angle `a` to `a + R`, so a segment
with center C sits under the pointer when (C + R) mod 360 == pointer mod 360.
"""
from __future__ import annotations

import logging
import math
import random
from typing import Optional

from .angles import FULL_TURN, angular_distance, forward_delta, normalize_angle
from .constants import DEFAULT_MIN_FULL_TURNS
from .errors import AlignmentValidationFailed
from .segments import center_angle

logger = logging.getLogger(__name__)

ALIGNMENT_TOLERANCE = 1e-3


def _check_finite(name: str, value: float) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        raise ValueError(f"{name} must be a finite number, got {value!r}")


def extra_turns(min_full_turns: int, turn_jitter_range: float = 0, rng: Optional[random.Random] = None) -> int:
    """Whole turns to add; fractional turns would break the alignment."""
    if not isinstance(min_full_turns, int) or isinstance(min_full_turns, bool) or min_full_turns < 1:
        raise ValueError(f"min_full_turns must be an integer >= 1, got {min_full_turns!r}")
    _check_finite("turn_jitter_range", turn_jitter_range)
    if turn_jitter_range < 0:
        raise ValueError(f"turn_jitter_range must be >= 0, got {turn_jitter_range!r}")

    jitter_cap = int(math.floor(turn_jitter_range))
    if jitter_cap == 0:
        return min_full_turns
    return min_full_turns + (rng or random).randint(0, jitter_cap)


def alignment_delta(segment_index: int, segment_count: int, current_rotation: float, pointer_angle: float) -> float:
    """Forward rotation in [0, 360) that parks the segment center under the pointer."""
    required = normalize_angle(pointer_angle - center_angle(segment_index, segment_count))
    return forward_delta(current_rotation, required)


def solve(
    segment_index: int,
    segment_count: int,
    current_rotation: float,
    pointer_angle: float,
    min_full_turns: int = DEFAULT_MIN_FULL_TURNS,
    turn_jitter_range: float = 0,
    rng: Optional[random.Random] = None,
) -> float:
    _check_finite("current_rotation", current_rotation)
    _check_finite("pointer_angle", pointer_angle)
    turns = extra_turns(min_full_turns, turn_jitter_range, rng)
    delta = alignment_delta(segment_index, segment_count, current_rotation, pointer_angle)
    return current_rotation + turns * FULL_TURN + delta


def landing_angle(target_rotation: float, segment_index: int, segment_count: int) -> float:
    """Screen angle where the segment center ends up after `target_rotation`."""
    return normalize_angle(center_angle(segment_index, segment_count) + target_rotation)


def verify_alignment(
    target_rotation: float,
    segment_index: int,
    segment_count: int,
    pointer_angle: float,
    tolerance: float = ALIGNMENT_TOLERANCE,
) -> float:
    """Raise AlignmentValidationFailed unless the segment lands on the pointer."""
    landed = landing_angle(target_rotation, segment_index, segment_count)
    error = angular_distance(landed, pointer_angle)
    if error > tolerance:
        logger.error(
            "alignment check failed: segment %s landed at %.6f, pointer at %.6f (error %.6f)",
            segment_index, landed, normalize_angle(pointer_angle), error,
        )
        raise AlignmentValidationFailed(segment_index, target_rotation, landed, normalize_angle(pointer_angle))
    return error


class RotationSolver:
    """Binds the wheel geometry and spin tunables to `solve`."""

    def __init__(
        self,
        segment_count: int,
        pointer_angle: float,
        min_full_turns: int = DEFAULT_MIN_FULL_TURNS,
        turn_jitter_range: float = 0,
        rng: Optional[random.Random] = None,
        tolerance: float = ALIGNMENT_TOLERANCE,
    ):
        self.segment_count = segment_count
        self.pointer_angle = pointer_angle
        self.min_full_turns = min_full_turns
        self.turn_jitter_range = turn_jitter_range
        self.rng = rng or random.Random()
        self.tolerance = tolerance

    def solve(self, segment_index: int, current_rotation: float) -> float:
        return solve(
            segment_index,
            self.segment_count,
            current_rotation,
            self.pointer_angle,
            self.min_full_turns,
            self.turn_jitter_range,
            self.rng,
        )

    def verify(self, target_rotation: float, segment_index: int) -> float:
        return verify_alignment(
            target_rotation, segment_index, self.segment_count, self.pointer_angle, self.tolerance
        )
