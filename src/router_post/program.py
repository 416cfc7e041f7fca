"""End-to-end post-processing of a recorded CAM program.

A Program is what the CAM host hands over: the job description and the
ordered sections. ProgramRunner plays the host's part, answering the
post-processor's queries while it replays every record in order.

Example:
    >>> from router_post.program import Program, post_process
    >>> from router_post.models import Job, LinearMove, RapidMove, Section, Tool
    >>>
    >>> program = Program(
    ...     job=Job(program_name="1001"),
    ...     sections=[
    ...         Section(
    ...             tool=Tool(number=1, description="1/4in endmill", spindle_rpm=18000),
    ...             records=(RapidMove(0, 0, 5), LinearMove(z=-1, feed=300)),
    ...         )
    ...     ],
    ... )
    >>> gcode = post_process(program)
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from router_post.commands import Command, MovementType
from router_post.config import PostConfig
from router_post.models import (
    AxisRange,
    CircularMove,
    CommandRecord,
    CommentRecord,
    Dwell,
    Job,
    LinearMove,
    MachineLimits,
    MovementChange,
    Position,
    RadiusCompensation,
    RadiusCompensationMode,
    RapidMove,
    Record,
    Section,
    SpindleDirection,
    SpindleSpeed,
    Tool,
    Unit,
    is_motion,
)
from router_post.postprocessor import PostProcessor


@dataclass(frozen=True)
class Program:
    """A job and its sections, in execution order."""

    job: Job
    sections: List[Section] = field(default_factory=list)


class ProgramRunner:
    """
    Replay a Program through a PostProcessor.

    The runner tracks the tool position from the motion records so it can
    answer ``current_position``, and looks one record ahead for
    ``next_record_is_motion``. Warnings are logged and collected in
    ``warnings``.

    Args:
        program: Program to replay
        config: Post-processor configuration (default: PostConfig())
    """

    def __init__(self, program: Program, config: Optional[PostConfig] = None) -> None:
        self.program = program
        self.config = config if config is not None else PostConfig()
        self.warnings: List[str] = []
        self._position = Position()
        self._next: Optional[Record] = None

    # Host queries

    def current_position(self) -> Position:
        return self._position

    def machine_limits(self) -> MachineLimits:
        return self.program.job.limits

    def next_record_is_motion(self) -> bool:
        return is_motion(self._next)

    def warning(self, message: str) -> None:
        self.warnings.append(message)

    # Replay

    def run(self) -> str:
        """Post-process the whole program and return the G-code text."""
        post = PostProcessor(self.config, self)
        post.on_open(self.program.job)

        for section in self.program.sections:
            post.on_section(section)
            records = section.records
            for index, record in enumerate(records):
                self._next = records[index + 1] if index + 1 < len(records) else None
                post.dispatch(record)
                self._advance(record)
            self._next = None
            post.on_section_end()

        return post.on_close()

    def _advance(self, record: Record) -> None:
        if is_motion(record):
            self._position = self._position.merged(Position(record.x, record.y, record.z))


def post_process(program: Program, config: Optional[PostConfig] = None) -> str:
    """Post-process ``program`` with ``config`` and return the G-code text."""
    return ProgramRunner(program, config).run()


# JSON program files


def _tool_from_dict(data: Dict[str, Any]) -> Tool:
    return Tool(
        number=int(data["number"]),
        description=data.get("description", ""),
        spindle_rpm=float(data.get("spindle_rpm", 18000.0)),
        direction=SpindleDirection(data.get("direction", SpindleDirection.CLOCKWISE.value)),
    )


def _optional_float(data: Dict[str, Any], key: str) -> Optional[float]:
    value = data.get(key)
    return None if value is None else float(value)


def record_from_dict(data: Dict[str, Any]) -> Record:
    """Build a record from its JSON form, e.g. ``{"type": "rapid", "z": 5}``.

    Raises:
        ValueError: If the record type is unknown
    """
    kind = data.get("type")
    if kind == "rapid":
        return RapidMove(
            _optional_float(data, "x"), _optional_float(data, "y"), _optional_float(data, "z")
        )
    elif kind == "linear":
        return LinearMove(
            _optional_float(data, "x"),
            _optional_float(data, "y"),
            _optional_float(data, "z"),
            feed=float(data.get("feed", 0.0)),
        )
    elif kind == "circular":
        return CircularMove(
            clockwise=bool(data["clockwise"]),
            cx=float(data["cx"]),
            cy=float(data["cy"]),
            x=float(data["x"]),
            y=float(data["y"]),
            z=_optional_float(data, "z"),
            feed=float(data.get("feed", 0.0)),
        )
    elif kind == "dwell":
        return Dwell(float(data["seconds"]))
    elif kind == "command":
        return CommandRecord(Command(data["command"]))
    elif kind == "comment":
        return CommentRecord(str(data["text"]))
    elif kind == "movement":
        return MovementChange(MovementType(data["movement"]))
    elif kind == "spindle_speed":
        return SpindleSpeed(float(data["rpm"]))
    elif kind == "radius_compensation":
        return RadiusCompensation(RadiusCompensationMode(data["mode"]))
    else:
        raise ValueError(f"Unknown record type: {kind}")


def _limits_from_dict(data: Dict[str, Any]) -> MachineLimits:
    defaults = MachineLimits()
    ranges = {}
    for axis in ("x", "y", "z"):
        if axis in data:
            minimum, maximum = data[axis]
            ranges[axis] = AxisRange(float(minimum), float(maximum))
        else:
            ranges[axis] = getattr(defaults, axis)
    return MachineLimits(**ranges)


def program_from_dict(data: Dict[str, Any]) -> Program:
    """Build a Program from its JSON form."""
    job_data = data.get("job", {})
    job = Job(
        unit=Unit(job_data.get("unit", Unit.MM.value)),
        program_name=job_data.get("program_name", ""),
        program_comment=job_data.get("program_comment", ""),
        vendor=job_data.get("vendor", ""),
        model=job_data.get("model", ""),
        limits=_limits_from_dict(job_data.get("limits", {})),
        tools=tuple(_tool_from_dict(t) for t in job_data.get("tools", [])),
    )
    sections = [
        Section(
            tool=_tool_from_dict(s["tool"]),
            records=tuple(record_from_dict(r) for r in s.get("records", [])),
            comment=s.get("comment", ""),
            force_tool_change=bool(s.get("force_tool_change", False)),
        )
        for s in data.get("sections", [])
    ]
    return Program(job=job, sections=sections)


def load_program(path: Union[str, Path]) -> Program:
    """Read a JSON program file."""
    with open(path, encoding="utf-8") as f:
        return program_from_dict(json.load(f))
