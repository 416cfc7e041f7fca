"""Tool change detection and the operator guided tool change sequence.

A tool change runs in five steps:

1. Raise Z to the safe height in machine coordinates
2. Ask the operator to insert the tool, then attach the probe (or get
   ready for a manual touch-off)
3. Probe down and apply the touch plate thickness, or zero Z at the
   touched surface
4. Raise again so the operator can reattach the dust shoe
5. Ask the operator to set the router speed and start the spindle
"""

import logging
from enum import Enum
from typing import Optional

from router_post.config import PostConfig
from router_post.dial import create_speed_table, dial_setting
from router_post.formatting import ModalGroup, NumberFormat
from router_post.models import MachineLimits, Section, Tool
from router_post.writer import BlockWriter

log = logging.getLogger(__name__)


class ToolChangeState(Enum):
    """Outcome of comparing a section's tool with the previous section's."""

    NO_TOOL_CHANGE = "no_tool_change"
    TOOL_CHANGE_REQUIRED = "tool_change_required"


def detect_tool_change(section: Section, previous: Optional[Section]) -> ToolChangeState:
    """
    Decide whether a tool change happens at the start of ``section``.

    The first section of a run and sections flagged with
    ``force_tool_change`` always require a change. Otherwise a change is
    required when the tool number differs from the previous section's.

    Args:
        section: Section about to start
        previous: Section before it, or None for the first section

    Returns:
        ToolChangeState for the section
    """
    if previous is None or section.force_tool_change:
        return ToolChangeState.TOOL_CHANGE_REQUIRED
    if section.tool.number != previous.tool.number:
        return ToolChangeState.TOOL_CHANGE_REQUIRED
    return ToolChangeState.NO_TOOL_CHANGE


class ToolChangeSequence:
    """
    Writes the raise moves and the operator guided tool change.

    Args:
        config: Post-processor configuration
        writer: Output writer of the run
        limits: Machine travel limits, for the safe height
        motion: Motion modal group of the run; set to G0 by every raise
        distance: Distance mode modal group of the run; set to G90 by every raise
        number_format: Formatter for coordinates
    """

    def __init__(
        self,
        config: PostConfig,
        writer: BlockWriter,
        limits: MachineLimits,
        motion: ModalGroup,
        distance: ModalGroup,
        number_format: NumberFormat,
    ) -> None:
        self.config = config
        self.writer = writer
        self.limits = limits
        self.motion = motion
        self.distance = distance
        self.number_format = number_format
        self.speed_table = create_speed_table(config.router_model)

    @property
    def safe_height(self) -> float:
        """Machine Z of the safe height: Z travel maximum minus the safety margin."""
        return self.limits.z.maximum - self.config.safety_margin

    @property
    def probe_depth(self) -> float:
        """Distance from the safe height down to the Z travel minimum."""
        return self.safe_height - self.limits.z.minimum

    def write_raise(self) -> None:
        """Switch to absolute positioning and raise Z in machine coordinates."""
        self.distance.reset()
        self.writer.write_block(self.distance.format(90))
        self.motion.reset()
        self.writer.write_block(
            "G53", self.motion.format(0), "Z" + self.number_format.format(self.safe_height)
        )

    def write(self, tool: Tool) -> None:
        """Write the complete tool change sequence for ``tool``."""
        prompts = self.config.prompts
        log.debug("Tool change to T%d (%s)", tool.number, tool.description)

        self.write_raise()

        self.writer.write_message(prompts.format_insert_tool(tool.number, tool.description))
        if self.config.probing_tool:
            self.writer.write_message(prompts.attach_probe)
        else:
            self.writer.write_message(prompts.manual_touch)
        self.writer.write_block("M0")

        if self.config.probing_tool:
            # Incremental from the safe height, independent of the work offset
            self.writer.write_block(self.distance.format(91))
            self.writer.write_block(
                "G38.2",
                "Z" + self.number_format.format(-self.probe_depth),
                "F" + self.number_format.format(self.config.probe_feed),
            )
            self.writer.write_block(self.distance.format(90))
            offset = self.config.probe_offset
        else:
            offset = 0.0
        self.writer.write_block("G10", "L20", "P1", "Z" + self.number_format.format(offset))

        self.write_raise()

        dial = dial_setting(tool.spindle_rpm, self.speed_table)
        self.writer.write_message(prompts.format_start_spindle(tool.spindle_rpm, dial))
        self.writer.write_block("M0")
