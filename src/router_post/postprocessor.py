"""Callback driven G-code emission.

The CAM host drives a PostProcessor by calling its ``on_*`` methods in a
fixed order::

    on_open(job)
    for each section:
        on_section(section)
        on_rapid / on_linear / on_circular / on_command / ... per record
        on_section_end()
    on_close()

Every call turns into zero or more output lines. All modal state lives in a
RunState created by ``on_open``, so a PostProcessor can be reused for
several runs.

Example:
    >>> from router_post.models import Job, Section, Tool
    >>> post = PostProcessor(PostConfig(), host)
    >>> post.on_open(Job(program_name="sign"))
    >>> post.on_section(Section(tool=Tool(number=1, spindle_rpm=18000)))
    >>> post.on_rapid(0.0, 0.0, 5.0)
    >>> text = post.on_close()
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from router_post.commands import M_CODES, Command, CommandAction, MovementType, command_action
from router_post.config import PostConfig
from router_post.errors import RadiusCompensationError, UnsupportedUnitError
from router_post.formatting import ModalGroup, ModalVariable, NumberFormat
from router_post.host import Host
from router_post.models import (
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
    SpindleSpeed,
    Tool,
    Unit,
)
from router_post.toolchange import ToolChangeSequence, ToolChangeState, detect_tool_change
from router_post.writer import BlockWriter

log = logging.getLogger(__name__)

XYZ_FORMAT = NumberFormat(decimals=3)
FEED_FORMAT = NumberFormat(decimals=1)
RPM_FORMAT = NumberFormat(decimals=0)
SECONDS_FORMAT = NumberFormat(decimals=3)

# Dwell range accepted by the controller (seconds)
MIN_DWELL = 0.001
MAX_DWELL = 99999.999


@dataclass
class RunState:
    """Mutable state of one post-processing run.

    Attributes:
        writer: Output lines of the run
        x, y, z: Axis words
        i, j: Arc center offset words, written on every arc
        feed: F word
        speed: S word
        dwell: P word of G4
        motion: G0/G1/G2/G3 group
        distance: G90/G91 group
        units: G20/G21 group
        tool_change: Raise and tool change writer bound to this run
        section: Section being processed
        previous_section: Section processed before it
    """

    writer: BlockWriter
    tool_change: ToolChangeSequence
    motion: ModalGroup
    distance: ModalGroup
    units: ModalGroup
    x: ModalVariable = field(default_factory=lambda: ModalVariable("X", XYZ_FORMAT))
    y: ModalVariable = field(default_factory=lambda: ModalVariable("Y", XYZ_FORMAT))
    z: ModalVariable = field(default_factory=lambda: ModalVariable("Z", XYZ_FORMAT))
    i: ModalVariable = field(default_factory=lambda: ModalVariable("I", XYZ_FORMAT, force=True))
    j: ModalVariable = field(default_factory=lambda: ModalVariable("J", XYZ_FORMAT, force=True))
    feed: ModalVariable = field(default_factory=lambda: ModalVariable("F", FEED_FORMAT))
    speed: ModalVariable = field(default_factory=lambda: ModalVariable("S", RPM_FORMAT))
    dwell: ModalVariable = field(
        default_factory=lambda: ModalVariable("P", SECONDS_FORMAT, force=True)
    )
    section: Optional[Section] = None
    previous_section: Optional[Section] = None

    @classmethod
    def create(cls, config: PostConfig, limits: MachineLimits) -> "RunState":
        """Fresh state for a run with ``config`` on a machine with ``limits``."""
        writer = BlockWriter(
            separate_words=config.separate_words,
            sequence_numbers=config.sequence_numbers,
            sequence_start=config.sequence_start,
            sequence_increment=config.sequence_increment,
        )
        motion = ModalGroup("G")
        distance = ModalGroup("G")
        return cls(
            writer=writer,
            tool_change=ToolChangeSequence(
                config, writer, limits, motion=motion, distance=distance, number_format=XYZ_FORMAT
            ),
            motion=motion,
            distance=distance,
            units=ModalGroup("G"),
        )

    @property
    def tool(self) -> Optional[Tool]:
        return self.section.tool if self.section is not None else None

    def reset_axes(self) -> None:
        self.x.reset()
        self.y.reset()
        self.z.reset()

    def reset_all(self) -> None:
        """Force every modal word and motion code to be restated."""
        self.reset_axes()
        self.feed.reset()
        self.speed.reset()
        self.motion.reset()


class PostProcessor:
    """
    Translate host callbacks into G-code for the router.

    Args:
        config: Post-processor configuration
        host: Host answering position, limit and look-ahead queries
    """

    def __init__(self, config: PostConfig, host: Host) -> None:
        self.config = config
        self.host = host
        self.state: Optional[RunState] = None

    def _run(self) -> RunState:
        if self.state is None:
            raise RuntimeError("on_open must be called before any other callback")
        return self.state

    # Run boundaries

    def on_open(self, job: Job) -> None:
        """Start a run: validate the unit and write the program header.

        Raises:
            UnsupportedUnitError: If the job is not in millimeters. Nothing
                is written in that case.
        """
        if job.unit != Unit.MM:
            self.state = None
            log.error("Program unit is %s, only mm is supported", job.unit.value)
            raise UnsupportedUnitError(
                f"Program unit must be mm, got {job.unit.value}. "
                "Change the unit of the setup and post again."
            )

        self.state = state = RunState.create(self.config, self.host.machine_limits())
        writer = state.writer

        if self.config.output_comments:
            if job.program_name:
                writer.write_comment(job.program_name)
            if job.program_comment:
                writer.write_comment(job.program_comment)
            machine = " ".join(part for part in (job.vendor, job.model) if part)
            if machine:
                writer.write_comment(f"Machine: {machine}")

            written = set()
            for tool in job.tools:
                if tool.number in written:
                    continue
                written.add(tool.number)
                writer.write_comment(f"T{tool.number} {tool.description}")

        writer.write_block(state.distance.format(90), state.units.format(21))

    def on_close(self) -> str:
        """Finish the run: raise Z, stop the spindle, end the program.

        Returns:
            The complete program text
        """
        state = self._run()
        state.tool_change.write_raise()
        state.writer.write_block(f"M{M_CODES[Command.STOP_SPINDLE]}")
        state.writer.write_block(f"M{M_CODES[Command.END]}")
        log.debug("Program finished with %d lines", len(state.writer))
        return state.writer.getvalue()

    # Sections

    def on_section(self, section: Section) -> None:
        """Start a section, running the tool change sequence when needed."""
        state = self._run()
        state.previous_section, state.section = state.section, section

        if self.config.output_comments and section.comment:
            state.writer.write_comment(section.comment)

        change = detect_tool_change(section, state.previous_section)
        log.debug("Section %r: %s", section.comment, change.value)
        if change == ToolChangeState.TOOL_CHANGE_REQUIRED and self.config.tool_change_prompt:
            state.tool_change.write(section.tool)
            state.reset_all()

        state.speed.reset()
        state.writer.write_block(
            state.speed.format(section.tool.spindle_rpm), self._spindle_code(section.tool)
        )

    def on_section_end(self) -> None:
        """Close a section; the next one restates every modal word."""
        self._run().reset_all()

    # Non-motion records

    def on_comment(self, text: str) -> None:
        if self.config.output_comments:
            self._run().writer.write_comment(text)

    def on_movement(self, movement: MovementType) -> None:
        """Label the motion that follows with a comment."""
        if self.config.output_comments:
            self._run().writer.write_comment(f"Movement: {movement.label}")

    def on_command(self, command: Command) -> None:
        """Write the M-code for ``command``; commands without one are ignored."""
        state = self._run()
        action = command_action(command)

        if action == CommandAction.IGNORED:
            log.debug("Ignoring unsupported command %s", command.value)
        elif action == CommandAction.SPINDLE_START:
            tool = state.tool
            if tool is None:
                log.debug("Ignoring %s outside of a section", command.value)
                return
            state.writer.write_block(state.speed.format(tool.spindle_rpm), self._spindle_code(tool))
        elif action == CommandAction.EMIT:
            state.writer.write_block(f"M{M_CODES[command]}")

    def on_spindle_speed(self, rpm: float) -> None:
        state = self._run()
        state.writer.write_block(state.speed.format(rpm))

    def on_dwell(self, seconds: float) -> None:
        """Write ``G4 P<seconds>``, clamping the time into the accepted range."""
        state = self._run()
        if not MIN_DWELL <= seconds <= MAX_DWELL:
            clamped = min(max(seconds, MIN_DWELL), MAX_DWELL)
            message = f"Dwell time {seconds}s out of range, using {clamped}s"
            log.warning(message)
            self.host.warning(message)
            seconds = clamped
        state.writer.write_block("G4", state.dwell.format(seconds))

    def on_radius_compensation(self, mode: RadiusCompensationMode) -> None:
        """Reject radius compensation.

        Raises:
            RadiusCompensationError: For any mode other than OFF
        """
        if mode != RadiusCompensationMode.OFF:
            log.error("Radius compensation %s requested", mode.value)
            raise RadiusCompensationError(
                "Radius compensation is not supported by the controller. "
                "Use compensation in computer instead."
            )

    # Motion

    def on_rapid(
        self, x: Optional[float] = None, y: Optional[float] = None, z: Optional[float] = None
    ) -> None:
        """Rapid move; the next feed move restates its feed rate."""
        state = self._run()
        words = (state.x.format(x), state.y.format(y), state.z.format(z))
        if any(words):
            state.writer.write_block(state.motion.format(0), *words)
            state.feed.reset()

    def on_linear(
        self,
        x: Optional[float] = None,
        y: Optional[float] = None,
        z: Optional[float] = None,
        feed: float = 0.0,
    ) -> None:
        """Linear feed move.

        A feed change without axis motion is carried over to the next block
        when that block is a move, so the controller never gets a lone F.
        """
        state = self._run()
        words = (state.x.format(x), state.y.format(y), state.z.format(z))
        f = state.feed.format(feed)
        if any(words):
            state.writer.write_block(state.motion.format(1), *words, f)
        elif f:
            if self.host.next_record_is_motion():
                state.feed.reset()
            else:
                state.writer.write_block(state.motion.format(1), f)

    def on_circular(
        self,
        clockwise: bool,
        cx: float,
        cy: float,
        x: float,
        y: float,
        z: Optional[float] = None,
        feed: float = 0.0,
    ) -> None:
        """Arc in the XY plane with I/J center offsets from the start point."""
        state = self._run()
        start = self.host.current_position()
        if start.x is None or start.y is None:
            message = "Arc starts before the XY position is known, I/J measured from X0 Y0"
            log.warning(message)
            self.host.warning(message)
        offset = start.offset_to(Position(cx, cy))
        state.writer.write_block(
            state.motion.format(2 if clockwise else 3),
            state.x.format(x),
            state.y.format(y),
            state.z.format(z),
            state.i.format(offset.x, 0.0),
            state.j.format(offset.y, 0.0),
            state.feed.format(feed),
        )

    # Record routing

    def dispatch(self, record: Record) -> None:
        """Route a record to its callback."""
        if isinstance(record, RapidMove):
            self.on_rapid(record.x, record.y, record.z)
        elif isinstance(record, LinearMove):
            self.on_linear(record.x, record.y, record.z, record.feed)
        elif isinstance(record, CircularMove):
            self.on_circular(
                record.clockwise, record.cx, record.cy, record.x, record.y, record.z, record.feed
            )
        elif isinstance(record, CommandRecord):
            self.on_command(record.command)
        elif isinstance(record, CommentRecord):
            self.on_comment(record.text)
        elif isinstance(record, MovementChange):
            self.on_movement(record.movement)
        elif isinstance(record, Dwell):
            self.on_dwell(record.seconds)
        elif isinstance(record, SpindleSpeed):
            self.on_spindle_speed(record.rpm)
        elif isinstance(record, RadiusCompensation):
            self.on_radius_compensation(record.mode)
        else:
            raise ValueError(f"Unknown record type: {type(record).__name__}")

    @staticmethod
    def _spindle_code(tool: Tool) -> str:
        command = Command.SPINDLE_CLOCKWISE if tool.is_clockwise else Command.SPINDLE_COUNTERCLOCKWISE
        return f"M{M_CODES[command]}"

    def __repr__(self) -> str:
        return f"PostProcessor(config={self.config!r})"
