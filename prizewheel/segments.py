# prizewheel/segments.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

from .angles import FULL_TURN
from .errors import InvalidConfig


@dataclass(frozen=True)
class Segment:
    index: int
    prize_label: str


def sector_width(count: int) -> float:
    if count < 1:
        raise ValueError("a wheel needs at least one segment")
    return FULL_TURN / count


def center_angle(index: int, count: int) -> float:
    """Wheel-local angle of the middle of sector `index`."""
    if not 0 <= index < count:
        raise ValueError(f"segment index {index} outside [0, {count})")
    width = sector_width(count)
    return index * width + width / 2


def sector_bounds(index: int, count: int) -> Tuple[float, float]:
    width = sector_width(count)
    return index * width, (index + 1) * width


def _label_of(raw: Mapping[str, Any]) -> Any:
    for key in ("prize_label", "prizeLabel", "label"):
        if key in raw:
            return raw[key]
    return None


def build_segments(raw_segments: Iterable[Any]) -> Tuple[Segment, ...]:
    """
    Accept Segment objects, {"index", "prize_label"} mappings or bare label
    strings, and return an immutable, index-ordered layout.
    """
    segments: List[Segment] = []
    for position, raw in enumerate(raw_segments):
        if isinstance(raw, Segment):
            seg = raw
        elif isinstance(raw, str):
            seg = Segment(index=position, prize_label=raw)
        elif isinstance(raw, Mapping):
            label = _label_of(raw)
            index = raw.get("index", position)
            if not isinstance(index, int) or isinstance(index, bool):
                raise InvalidConfig(f"Segment at position {position} has a non-integer index: {index!r}")
            seg = Segment(index=index, prize_label=label)
        else:
            raise InvalidConfig(f"Unsupported segment entry at position {position}: {raw!r}")

        if not isinstance(seg.prize_label, str) or not seg.prize_label.strip():
            raise InvalidConfig(f"Segment {position} has no prize label.")
        if seg.index != position:
            raise InvalidConfig(
                f"Segment indices must run 0..N-1 in order; position {position} has index {seg.index}."
            )
        segments.append(seg)

    if not segments:
        raise InvalidConfig("A wheel needs at least one segment.")
    return tuple(segments)


def indices_for_labels(segments: Sequence[Segment], labels: Iterable[str]) -> List[int]:
    wanted = set(labels)
    return [s.index for s in segments if s.prize_label in wanted]


def labels_on_wheel(segments: Sequence[Segment]) -> set[str]:
    return {s.prize_label for s in segments}
