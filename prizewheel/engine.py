# prizewheel/engine.py
"""
Spin lifecycle for one wheel.

    Idle -> request_spin -> Resolving -> Animating -> (reveal) -> Resolved -> Idle

Each accepted spin and each reset bumps `generation`. A reveal only applies
when it carries the current generation, so a timer that fires after a reset
is discarded instead of showing a stale prize.
"""
from __future__ import annotations

import asyncio
import logging
import math
import random
from typing import Any, Iterable, Mapping, Optional, Tuple

from .constants import DEFAULT_MIN_FULL_TURNS, DEFAULT_REVEAL_SECONDS, DEFAULT_TURN_JITTER, wheel_settings
from .errors import InvalidConfig
from .policy import CadenceRules, SpinPolicy, TieBreakMode, _coerce_rules
from .rotation import RotationSolver
from .segments import Segment, build_segments
from .state import SpinOutcome, SpinPhase, SpinState, StateSnapshot

logger = logging.getLogger(__name__)


class WheelEngine:
    def __init__(
        self,
        segments: Tuple[Segment, ...],
        rules: CadenceRules,
        pointer_angle: float,
        tie_break: TieBreakMode = TieBreakMode.DETERMINISTIC,
        *,
        min_full_turns: int = DEFAULT_MIN_FULL_TURNS,
        turn_jitter_range: float = 0,
        reveal_delay: float = DEFAULT_REVEAL_SECONDS,
        rng: Optional[random.Random] = None,
    ):
        rng = rng or random.Random()
        self.segments = segments
        self.rules = rules
        self.pointer_angle = pointer_angle
        self.tie_break = tie_break
        self.reveal_delay = reveal_delay
        self.policy = SpinPolicy(segments, rules, tie_break, rng)
        self.solver = RotationSolver(len(segments), pointer_angle, min_full_turns, turn_jitter_range, rng)
        self.state = SpinState()
        self._pending: Optional[SpinOutcome] = None
        self._reveal_task: Optional[asyncio.Task] = None

    # ---------------- read side ----------------
    def segment(self, index: int) -> Segment:
        return self.segments[index]

    def get_state(self) -> StateSnapshot:
        return self.state.snapshot()

    @property
    def phase(self) -> SpinPhase:
        return self.state.phase

    @property
    def last_outcome(self) -> Optional[SpinOutcome]:
        return self.state.last_outcome

    # ---------------- lifecycle ----------------
    def request_spin(self) -> Optional[SpinOutcome]:
        """Resolve the next spin, or return None while one is already in flight."""
        st = self.state
        if st.in_progress:
            logger.debug("spin request ignored: %s in progress", st.phase.value)
            return None
        self.acknowledge()

        st.phase = SpinPhase.RESOLVING
        st.spin_number += 1
        spin_number = st.spin_number
        start = st.cumulative_rotation
        try:
            index = self.policy.select(spin_number)
            target = self.solver.solve(index, start)
            self.solver.verify(target, index)
        except Exception:
            st.phase = SpinPhase.IDLE
            raise

        st.generation += 1
        st.cumulative_rotation = target
        st.phase = SpinPhase.ANIMATING
        self._pending = SpinOutcome(
            spin_number=spin_number,
            segment_index=index,
            prize_label=self.segments[index].prize_label,
            start_rotation=start,
            target_rotation=target,
            generation=st.generation,
        )
        logger.info(
            "spin %s -> segment %s (%s), rotation %.2f -> %.2f",
            spin_number, index, self._pending.prize_label, start, target,
        )
        return self._pending

    def complete_spin(self, generation: int) -> Optional[SpinOutcome]:
        """Apply the reveal for `generation`; stale or duplicate reveals return None."""
        st = self.state
        pending = self._pending
        if pending is None or generation != st.generation or st.phase is not SpinPhase.ANIMATING:
            logger.info(
                "discarding stale reveal (token %s, current %s, phase %s)",
                generation, st.generation, st.phase.value,
            )
            return None

        st.phase = SpinPhase.RESOLVED
        st.last_outcome = pending
        self._pending = None
        return pending

    def acknowledge(self) -> None:
        """Mark a revealed result as consumed."""
        if self.state.phase is SpinPhase.RESOLVED:
            self.state.phase = SpinPhase.IDLE

    def reset(self) -> None:
        """Back to Idle with the counter and rotation zeroed; valid in any phase."""
        st = self.state
        st.spin_number = 0
        st.cumulative_rotation = 0.0
        st.phase = SpinPhase.IDLE
        st.last_outcome = None
        st.generation += 1
        self._pending = None
        task, self._reveal_task = self._reveal_task, None
        if task is not None and not task.done():
            task.cancel()
        logger.info("wheel reset (generation %s)", st.generation)

    # ---------------- timer-driven reveal ----------------
    async def _reveal_after(self, generation: int, delay: float) -> Optional[SpinOutcome]:
        await asyncio.sleep(delay)
        return self.complete_spin(generation)

    def start_spin(self, delay: Optional[float] = None) -> Optional[SpinOutcome]:
        """request_spin plus a reveal task; needs a running event loop."""
        loop = asyncio.get_running_loop()
        outcome = self.request_spin()
        if outcome is None:
            return None
        wait = self.reveal_delay if delay is None else delay
        self._reveal_task = loop.create_task(
            self._reveal_after(outcome.generation, wait),
            name=f"wheel-reveal-{outcome.generation}",
        )
        return outcome

    async def wait_for_reveal(self) -> Optional[SpinOutcome]:
        """Revealed outcome of the pending spin, or None if a reset got there first."""
        task = self._reveal_task
        if task is None:
            return None
        await asyncio.wait({task})
        if task.cancelled():
            return None
        if self._reveal_task is task:
            self._reveal_task = None
        return task.result()

    async def spin(self, delay: Optional[float] = None) -> Optional[SpinOutcome]:
        if self.start_spin(delay) is None:
            return None
        return await self.wait_for_reveal()


def _check_number(name: str, value: Any, *, minimum: float | None = None) -> None:
    if not isinstance(value, (int, float)) or isinstance(value, bool) or not math.isfinite(value):
        raise InvalidConfig(f"{name} must be a finite number, got {value!r}.")
    if minimum is not None and value < minimum:
        raise InvalidConfig(f"{name} must be >= {minimum}, got {value!r}.")


def configure(
    segments: Iterable[Any],
    rules: "CadenceRules | Mapping[str, Any]",
    pointer_angle: float,
    tie_break_mode: "TieBreakMode | str" = TieBreakMode.DETERMINISTIC,
    *,
    min_full_turns: int = DEFAULT_MIN_FULL_TURNS,
    turn_jitter_range: Optional[float] = None,
    reveal_delay: float = DEFAULT_REVEAL_SECONDS,
    rng: Optional[random.Random] = None,
) -> WheelEngine:
    """Validate a layout and rule set and build an engine; raises InvalidConfig."""
    layout = build_segments(segments)
    cadence = _coerce_rules(rules)
    cadence.validate(layout)
    mode = TieBreakMode.parse(tie_break_mode)

    _check_number("pointer_angle", pointer_angle)
    if not isinstance(min_full_turns, int) or isinstance(min_full_turns, bool) or min_full_turns < 1:
        raise InvalidConfig(f"min_full_turns must be an integer >= 1, got {min_full_turns!r}.")
    if turn_jitter_range is None:
        turn_jitter_range = DEFAULT_TURN_JITTER if mode is TieBreakMode.RANDOM else 0
    _check_number("turn_jitter_range", turn_jitter_range, minimum=0)
    _check_number("reveal_delay", reveal_delay, minimum=0)

    return WheelEngine(
        layout,
        cadence,
        float(pointer_angle),
        mode,
        min_full_turns=min_full_turns,
        turn_jitter_range=turn_jitter_range,
        reveal_delay=float(reveal_delay),
        rng=rng,
    )


def configure_from_env(rng: Optional[random.Random] = None) -> WheelEngine:
    settings = wheel_settings()
    return configure(
        settings["segments"],
        settings["rules"],
        settings["pointer_angle"],
        settings["tie_break_mode"],
        min_full_turns=settings["min_full_turns"],
        turn_jitter_range=settings["turn_jitter_range"],
        reveal_delay=settings["reveal_delay"],
        rng=rng,
    )


def request_spin(engine: WheelEngine) -> Optional[SpinOutcome]:
    return engine.request_spin()


def reset(engine: WheelEngine) -> None:
    engine.reset()


def get_state(engine: WheelEngine) -> StateSnapshot:
    return engine.get_state()
