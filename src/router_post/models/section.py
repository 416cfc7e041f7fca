"""Section model: one CAM operation's worth of toolpath."""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from router_post.models.records import Record
from router_post.models.tool import Tool


@dataclass(frozen=True)
class Position:
    """Absolute workplane position in millimeters. Unknown axes are None."""

    x: Optional[float] = None
    y: Optional[float] = None
    z: Optional[float] = None

    def offset_to(self, other: "Position") -> "Position":
        """Vector from this position to ``other``; unknown axes count as 0."""
        return Position(
            x=(other.x or 0.0) - (self.x or 0.0),
            y=(other.y or 0.0) - (self.y or 0.0),
            z=(other.z or 0.0) - (self.z or 0.0),
        )

    def merged(self, other: "Position") -> "Position":
        """Return this position with the known axes of ``other`` applied."""
        return Position(
            x=self.x if other.x is None else other.x,
            y=self.y if other.y is None else other.y,
            z=self.z if other.z is None else other.z,
        )


@dataclass(frozen=True)
class Section:
    """One operation as segmented by the CAM host.

    Attributes:
        tool: Tool used for the whole section
        records: Ordered motion and command records
        comment: Operation comment (e.g., "2D Contour1")
        force_tool_change: Treat the section as a tool change even when the
            tool number matches the previous section
    """

    tool: Tool
    records: Tuple[Record, ...] = field(default_factory=tuple)
    comment: str = ""
    force_tool_change: bool = False
