"""Tool model for post-processing."""

from dataclasses import dataclass
from enum import Enum


class SpindleDirection(Enum):
    """Rotation direction of the spindle."""

    CLOCKWISE = "clockwise"  # M3
    COUNTER_CLOCKWISE = "counter_clockwise"  # M4


@dataclass(frozen=True)
class Tool:
    """Cutting tool used by one section.

    Attributes:
        number: Tool number as shown to the operator (T<number>)
        description: Free text description (e.g., "1/4in downcut endmill")
        spindle_rpm: Target spindle speed in revolutions per minute
        direction: Spindle rotation direction
    """

    number: int
    description: str = ""
    spindle_rpm: float = 18000.0
    direction: SpindleDirection = SpindleDirection.CLOCKWISE

    def __post_init__(self) -> None:
        """Validate tool parameters."""
        if self.number < 0:
            raise ValueError(f"number must be non-negative, got {self.number}")
        if self.spindle_rpm < 0:
            raise ValueError(f"spindle_rpm must be non-negative, got {self.spindle_rpm}")

    @property
    def is_clockwise(self) -> bool:
        return self.direction == SpindleDirection.CLOCKWISE
