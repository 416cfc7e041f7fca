"""Toolpath records delivered to the post-processor, one callback each."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from router_post.commands import Command, MovementType


@dataclass(frozen=True)
class RapidMove:
    """Rapid positioning move (G0). Missing axes keep their value."""

    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None


@dataclass(frozen=True)
class LinearMove:
    """Linear cutting move (G1) at ``feed`` mm/min."""

    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None
    feed: float = 0.0

    def __post_init__(self) -> None:
        """Validate feed rate."""
        if self.feed < 0:
            raise ValueError(f"feed must be non-negative, got {self.feed}")


@dataclass(frozen=True)
class CircularMove:
    """Arc in the XY plane (G2/G3).

    Attributes:
        clockwise: True for G2, False for G3
        cx: Arc center X
        cy: Arc center Y
        x: End position X
        y: End position Y
        z: End position Z (a differing Z makes a helix)
        feed: Feed rate in mm/min
    """

    clockwise: bool
    cx: float
    cy: float
    x: float
    y: float
    z: Optional[float] = None
    feed: float = 0.0

    def __post_init__(self) -> None:
        """Validate feed rate."""
        if self.feed < 0:
            raise ValueError(f"feed must be non-negative, got {self.feed}")


@dataclass(frozen=True)
class Dwell:
    """Pause in seconds (G4)."""

    seconds: float


@dataclass(frozen=True)
class CommandRecord:
    """Abstract machine command from the host's fixed enumeration."""

    command: Command


@dataclass(frozen=True)
class CommentRecord:
    """Free text comment inside a section."""

    text: str


@dataclass(frozen=True)
class MovementChange:
    """Notification that the movement classification changed."""

    movement: MovementType


@dataclass(frozen=True)
class SpindleSpeed:
    """Spindle speed change inside a section."""

    rpm: float

    def __post_init__(self) -> None:
        """Validate spindle speed."""
        if self.rpm < 0:
            raise ValueError(f"rpm must be non-negative, got {self.rpm}")


class RadiusCompensationMode(Enum):
    """Cutter radius compensation requested by the host."""

    OFF = "off"
    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class RadiusCompensation:
    """Radius compensation change."""

    mode: RadiusCompensationMode


Record = Union[
    RapidMove,
    LinearMove,
    CircularMove,
    Dwell,
    CommandRecord,
    CommentRecord,
    MovementChange,
    SpindleSpeed,
    RadiusCompensation,
]

MOTION_RECORDS = (RapidMove, LinearMove, CircularMove)


def is_motion(record: Optional[Record]) -> bool:
    """Check whether a record moves the machine."""
    return isinstance(record, MOTION_RECORDS)
