"""Core data models for post-processing.

This package contains the job, tool, section and record classes the
post-processor reads from.
"""

from router_post.models.job import AxisRange, Job, MachineLimits, Unit
from router_post.models.records import (
    CircularMove,
    CommandRecord,
    CommentRecord,
    Dwell,
    LinearMove,
    MovementChange,
    RadiusCompensation,
    RadiusCompensationMode,
    RapidMove,
    Record,
    SpindleSpeed,
    is_motion,
)
from router_post.models.section import Position, Section
from router_post.models.tool import SpindleDirection, Tool

__all__ = [
    "AxisRange",
    "CircularMove",
    "CommandRecord",
    "CommentRecord",
    "Dwell",
    "Job",
    "LinearMove",
    "MachineLimits",
    "MovementChange",
    "Position",
    "RadiusCompensation",
    "RadiusCompensationMode",
    "RapidMove",
    "Record",
    "Section",
    "SpindleDirection",
    "SpindleSpeed",
    "Tool",
    "Unit",
    "is_motion",
]
