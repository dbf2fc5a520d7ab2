from dataclasses import dataclass
from enum import Enum
from typing import Optional


class SpinPhase(str, Enum):
    IDLE = "idle"
    RESOLVING = "resolving"
    ANIMATING = "animating"
    RESOLVED = "resolved"


@dataclass(frozen=True)
class SpinOutcome:
    spin_number: int
    segment_index: int
    prize_label: str
    start_rotation: float
    target_rotation: float
    generation: int


@dataclass(frozen=True)
class StateSnapshot:
    spin_number: int
    cumulative_rotation: float
    in_progress: bool


@dataclass
class SpinState:
    spin_number: int = 0
    cumulative_rotation: float = 0.0
    phase: SpinPhase = SpinPhase.IDLE
    generation: int = 0                      # epoch token; bumped on every spin and reset
    last_outcome: Optional[SpinOutcome] = None

    @property
    def in_progress(self) -> bool:
        return self.phase in (SpinPhase.RESOLVING, SpinPhase.ANIMATING)

    def snapshot(self) -> StateSnapshot:
        return StateSnapshot(self.spin_number, self.cumulative_rotation, self.in_progress)
