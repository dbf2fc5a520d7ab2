import os


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return int(str(raw).strip())
    except Exception:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        return float(str(raw).strip())
    except Exception:
        return default


def _env_str(name: str, default: str) -> str:
    return (os.getenv(name) or "").strip() or default


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None:
        return list(default)
    items = [part.strip() for part in raw.split(",") if part.strip()]
    return items or list(default)


TSHIRT = "Base T-Shirt"
TOTE_BAG = "Tote Bag"
CAP = "Cap"
NO_WIN = "Better Luck Next Time"

# Clockwise from the zero reference, 12 slices
DEFAULT_LAYOUT = [
    TSHIRT, TOTE_BAG, NO_WIN,
    TSHIRT, CAP, NO_WIN,
    TSHIRT, TOTE_BAG, NO_WIN,
    TSHIRT, CAP, NO_WIN,
]

DEFAULT_MAJOR_CADENCE = 10
DEFAULT_MINOR_CADENCE = 5
DEFAULT_MAJOR_LABELS = [TSHIRT, CAP]
DEFAULT_MINOR_LABEL = TOTE_BAG
DEFAULT_FALLBACK_LABEL = NO_WIN

# Pillow measures angles clockwise from 3 o'clock, so 270 is the top of the wheel
DEFAULT_POINTER_ANGLE = 270.0
DEFAULT_TIE_BREAK = "deterministic"
DEFAULT_MIN_FULL_TURNS = 8
DEFAULT_TURN_JITTER = 8             # random mode only: 8-16 full turns
DEFAULT_REVEAL_SECONDS = 5.0

# rendering
WHEEL_SIZE = _env_int("WHEEL_SIZE", 384)
WHEEL_FPS = _env_int("WHEEL_FPS", 18)     # 5s * 18fps ≈ 90 frames
MIN_WHEEL_SIZE = 64


def wheel_settings() -> dict:
    """Read the wheel tunables from the environment (load_dotenv runs in bot.py)."""
    return {
        "segments": _env_list("WHEEL_SEGMENTS", DEFAULT_LAYOUT),
        "rules": {
            "major_cadence": _env_int("WHEEL_MAJOR_CADENCE", DEFAULT_MAJOR_CADENCE),
            "minor_cadence": _env_int("WHEEL_MINOR_CADENCE", DEFAULT_MINOR_CADENCE),
            "major_labels": _env_list("WHEEL_MAJOR_LABELS", DEFAULT_MAJOR_LABELS),
            "minor_label": _env_str("WHEEL_MINOR_LABEL", DEFAULT_MINOR_LABEL),
            "fallback_label": _env_str("WHEEL_FALLBACK_LABEL", DEFAULT_FALLBACK_LABEL),
        },
        "pointer_angle": _env_float("WHEEL_POINTER_ANGLE", DEFAULT_POINTER_ANGLE),
        "tie_break_mode": _env_str("WHEEL_TIE_BREAK", DEFAULT_TIE_BREAK).lower(),
        "min_full_turns": _env_int("WHEEL_MIN_FULL_TURNS", DEFAULT_MIN_FULL_TURNS),
        # unset: no jitter when deterministic, DEFAULT_TURN_JITTER when random
        "turn_jitter_range": _env_float("WHEEL_TURN_JITTER", 0.0) if os.getenv("WHEEL_TURN_JITTER") else None,
        "reveal_delay": _env_float("WHEEL_REVEAL_SECONDS", DEFAULT_REVEAL_SECONDS),
    }
