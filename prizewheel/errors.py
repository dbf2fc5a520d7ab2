# prizewheel/errors.py


class WheelError(RuntimeError):
    """Base class for every prize wheel failure."""


class InvalidConfig(WheelError, ValueError):
    """Segment layout or cadence rules are malformed; no engine is built."""


class NoMatchingSegment(WheelError):
    """A rule fired for a prize label that no segment carries."""

    def __init__(self, labels, spin_number: int | None = None):
        self.labels = tuple(sorted(labels))
        self.spin_number = spin_number
        where = f" (spin {spin_number})" if spin_number is not None else ""
        super().__init__(f"No segment carries any of {list(self.labels)}{where}.")


class AlignmentValidationFailed(WheelError):
    """Target rotation does not put the chosen segment under the pointer."""

    def __init__(self, segment_index: int, target_rotation: float, landed: float, pointer_angle: float):
        self.segment_index = segment_index
        self.target_rotation = target_rotation
        self.landed = landed
        self.pointer_angle = pointer_angle
        super().__init__(
            f"Segment {segment_index} lands at {landed:.4f}° for rotation {target_rotation:.4f}, "
            f"pointer sits at {pointer_angle:.4f}°."
        )
