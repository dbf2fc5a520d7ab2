# prizewheel/policy.py
from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import Any, FrozenSet, Iterable, Mapping, Optional, Sequence, Tuple

from .errors import InvalidConfig, NoMatchingSegment
from .segments import Segment, indices_for_labels, labels_on_wheel

logger = logging.getLogger(__name__)


class TieBreakMode(str, Enum):
    DETERMINISTIC = "deterministic"
    RANDOM = "random"

    @classmethod
    def parse(cls, value: "TieBreakMode | str") -> "TieBreakMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value or "").strip().lower())
        except ValueError:
            raise InvalidConfig(
                f"Unknown tie-break mode {value!r}; use 'deterministic' or 'random'."
            ) from None


@dataclass(frozen=True)
class CadenceRules:
    major_cadence: int
    minor_cadence: int
    major_labels: FrozenSet[str]
    minor_label: str
    fallback_label: str

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "CadenceRules":
        def pick(*keys):
            for key in keys:
                if key in raw:
                    return raw[key]
            raise InvalidConfig(f"Rules are missing '{keys[0]}'.")

        major_labels = pick("major_labels", "majorLabels")
        if isinstance(major_labels, str):
            major_labels = [major_labels]
        return cls(
            major_cadence=pick("major_cadence", "majorCadence"),
            minor_cadence=pick("minor_cadence", "minorCadence"),
            major_labels=frozenset(major_labels),
            minor_label=pick("minor_label", "minorLabel"),
            fallback_label=pick("fallback_label", "fallbackLabel"),
        )

    @property
    def referenced_labels(self) -> FrozenSet[str]:
        return self.major_labels | {self.minor_label, self.fallback_label}

    def validate(self, segments: Sequence[Segment]) -> None:
        for name in ("major_cadence", "minor_cadence"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise InvalidConfig(f"{name} must be a positive integer, got {value!r}.")
        if self.major_cadence % self.minor_cadence != 0:
            raise InvalidConfig(
                f"major_cadence ({self.major_cadence}) must be a multiple of "
                f"minor_cadence ({self.minor_cadence})."
            )
        if not self.major_labels:
            raise InvalidConfig("major_labels must name at least one prize.")

        missing = sorted(self.referenced_labels - labels_on_wheel(segments))
        if missing:
            raise InvalidConfig(f"No segment carries the prize label(s): {missing}.")

    def rule_for(self, spin_number: int) -> Tuple[str, FrozenSet[str]]:
        """Most specific cadence first."""
        if spin_number % self.major_cadence == 0:
            return "major", self.major_labels
        if spin_number % self.minor_cadence == 0:
            return "minor", frozenset({self.minor_label})
        return "fallback", frozenset({self.fallback_label})


def _coerce_rules(rules: "CadenceRules | Mapping[str, Any]") -> CadenceRules:
    if isinstance(rules, CadenceRules):
        return rules
    if isinstance(rules, Mapping):
        return CadenceRules.from_mapping(rules)
    raise InvalidConfig(f"Unsupported rules object: {rules!r}")


class SpinPolicy:
    """Maps a spin number onto one segment index using the cadence rules."""

    def __init__(
        self,
        segments: Sequence[Segment],
        rules: "CadenceRules | Mapping[str, Any]",
        tie_break: "TieBreakMode | str" = TieBreakMode.DETERMINISTIC,
        rng: Optional[random.Random] = None,
    ):
        self.segments = tuple(segments)
        self.rules = _coerce_rules(rules)
        self.tie_break = TieBreakMode.parse(tie_break)
        self.rng = rng or random.Random()

    def rule_for(self, spin_number: int) -> Tuple[str, FrozenSet[str]]:
        _check_spin_number(spin_number)
        return self.rules.rule_for(spin_number)

    def candidates(self, labels: Iterable[str]) -> list[int]:
        return indices_for_labels(self.segments, labels)

    def select(self, spin_number: int) -> int:
        rule, labels = self.rule_for(spin_number)
        matching = self.candidates(labels)
        if not matching:
            raise NoMatchingSegment(labels, spin_number)

        if self.tie_break is TieBreakMode.DETERMINISTIC:
            index = matching[spin_number % len(matching)]
        else:
            index = self.rng.choice(matching)

        logger.debug(
            "spin %s: %s rule -> segment %s (%s)",
            spin_number, rule, index, self.segments[index].prize_label,
        )
        return index


def _check_spin_number(spin_number: int) -> None:
    if not isinstance(spin_number, int) or isinstance(spin_number, bool) or spin_number < 1:
        raise ValueError(f"spin_number must be a positive integer, got {spin_number!r}")
