"""Run-level job description supplied by the CAM host."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple

from router_post.models.tool import Tool


class Unit(Enum):
    """Measurement unit of the program."""

    MM = "mm"
    INCH = "in"


@dataclass(frozen=True)
class AxisRange:
    """Travel range of one machine axis in machine coordinates (mm)."""

    minimum: float
    maximum: float

    def __post_init__(self) -> None:
        """Validate that the range is not inverted."""
        if self.minimum > self.maximum:
            raise ValueError(
                f"minimum must not exceed maximum, got {self.minimum} > {self.maximum}"
            )

    @property
    def length(self) -> float:
        return self.maximum - self.minimum


@dataclass(frozen=True)
class MachineLimits:
    """Travel limits of the machine axes.

    Attributes:
        x: X axis travel range
        y: Y axis travel range
        z: Z axis travel range, used to derive the safe raise height
    """

    x: AxisRange = AxisRange(0.0, 816.0)
    y: AxisRange = AxisRange(0.0, 816.0)
    z: AxisRange = AxisRange(-133.0, 0.0)


@dataclass(frozen=True)
class Job:
    """Everything the host knows about the run before the first section.

    Attributes:
        unit: Measurement unit of the program; only millimeters are accepted
        program_name: Program name written to the header
        program_comment: Optional program comment written to the header
        vendor: Machine vendor, written to the header when set
        model: Machine model, written to the header when set
        limits: Machine travel limits
        tools: Tool table of the job, in first-use order
    """

    unit: Unit = Unit.MM
    program_name: str = ""
    program_comment: str = ""
    vendor: str = ""
    model: str = ""
    limits: MachineLimits = MachineLimits()
    tools: Tuple[Tool, ...] = field(default_factory=tuple)
