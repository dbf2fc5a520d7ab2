# prizewheel/angles.py
import math

FULL_TURN = 360.0


def normalize_angle(deg: float) -> float:
    """Wrap any angle into [0, 360)."""
    wrapped = math.fmod(deg, FULL_TURN)
    if wrapped < 0:
        wrapped += FULL_TURN
    # fmod of a tiny negative number can round back up to exactly 360
    if wrapped >= FULL_TURN:
        wrapped -= FULL_TURN
    return wrapped


def angular_distance(a: float, b: float) -> float:
    """Shortest distance between two angles, in [0, 180]."""
    d = normalize_angle(a - b)
    return min(d, FULL_TURN - d)


def forward_delta(start: float, end: float) -> float:
    """Forward rotation in [0, 360) that carries `start` onto `end`."""
    return normalize_angle(normalize_angle(end) - normalize_angle(start))
