"""Tests for tool change detection and the tool change sequence."""

import pytest

from router_post.config import PostConfig
from router_post.dial import RouterModel
from router_post.formatting import ModalGroup, NumberFormat
from router_post.models import AxisRange, MachineLimits, Section, Tool
from router_post.toolchange import ToolChangeSequence, ToolChangeState, detect_tool_change
from router_post.writer import BlockWriter


def make_sequence(config=None, limits=None):
    """Build a ToolChangeSequence with its own writer and modal groups."""
    writer = BlockWriter()
    sequence = ToolChangeSequence(
        config or PostConfig(),
        writer,
        limits or MachineLimits(z=AxisRange(-133.0, 0.0)),
        motion=ModalGroup("G"),
        distance=ModalGroup("G"),
        number_format=NumberFormat(decimals=3),
    )
    return sequence, writer


class TestDetectToolChange:
    """Tests for detect_tool_change."""

    def test_first_section_requires_change(self):
        """Test that the first section always loads its tool."""
        section = Section(tool=Tool(number=1))
        assert detect_tool_change(section, None) == ToolChangeState.TOOL_CHANGE_REQUIRED

    def test_same_tool(self):
        """Test that the same tool number needs no change."""
        previous = Section(tool=Tool(number=1))
        section = Section(tool=Tool(number=1, spindle_rpm=12000))
        assert detect_tool_change(section, previous) == ToolChangeState.NO_TOOL_CHANGE

    def test_different_tool(self):
        """Test that a new tool number requires a change."""
        previous = Section(tool=Tool(number=1))
        section = Section(tool=Tool(number=2))
        assert detect_tool_change(section, previous) == ToolChangeState.TOOL_CHANGE_REQUIRED

    def test_forced_change(self):
        """Test that the force flag requires a change with the same tool."""
        previous = Section(tool=Tool(number=1))
        section = Section(tool=Tool(number=1), force_tool_change=True)
        assert detect_tool_change(section, previous) == ToolChangeState.TOOL_CHANGE_REQUIRED


class TestToolChangeSequence:
    """Tests for ToolChangeSequence."""

    @pytest.fixture
    def tool(self):
        """Quarter inch endmill at 18000 RPM."""
        return Tool(number=2, description="1/4in endmill", spindle_rpm=18000)

    def test_safe_height(self):
        """Test safe height from Z travel maximum and safety margin."""
        sequence, _ = make_sequence(PostConfig(safety_margin=2.0))
        assert sequence.safe_height == -2.0

    def test_raise(self):
        """Test the raise writes absolute mode and a machine coordinate move."""
        sequence, writer = make_sequence()
        sequence.write_raise()
        sequence.write_raise()
        assert writer.lines == ["G90", "G53 G0 Z-1", "G90", "G53 G0 Z-1"]

    def test_probing_sequence(self, tool):
        """Test the complete sequence with a probing tool."""
        sequence, writer = make_sequence()
        sequence.write(tool)
        assert writer.lines == [
            "G90",
            "G53 G0 Z-1",
            "(MSG, Insert tool T2 1/4in endmill)",
            "(MSG, Attach the probe clip and place the touch plate under the tool)",
            "M0",
            "G91",
            "G38.2 Z-132 F100",
            "G90",
            "G10 L20 P1 Z0.5",
            "G90",
            "G53 G0 Z-1",
            "(MSG, Reattach the dust shoe. Set the router to 18000 RPM and start it)",
            "M0",
        ]

    def test_manual_touch_sequence(self, tool):
        """Test the sequence without a probing tool."""
        sequence, writer = make_sequence(PostConfig(probing_tool=False))
        sequence.write(tool)
        lines = writer.lines
        assert "(MSG, Jog the tool down until it touches the top of the stock)" in lines
        assert "G10 L20 P1 Z0" in lines
        assert not any(line.startswith("G38.2") for line in lines)

    def test_custom_probe_settings(self, tool):
        """Test probe feed and touch plate thickness."""
        sequence, writer = make_sequence(PostConfig(probe_feed=50.0, probe_offset=12.7))
        sequence.write(tool)
        assert "G38.2 Z-132 F50" in writer.lines
        assert "G10 L20 P1 Z12.7" in writer.lines

    def test_dial_hint(self):
        """Test the dial setting in the spindle prompt."""
        sequence, writer = make_sequence(PostConfig(router_model=RouterModel.MAKITA_RT0701C))
        sequence.write(Tool(number=1, spindle_rpm=14500))
        assert (
            "(MSG, Reattach the dust shoe. Set the router to 14500 RPM on dial 2.5 and start it)"
            in writer.lines
        )

    def test_raise_sets_modal_groups(self, tool):
        """Test that the raise leaves the run in G90 and G0."""
        sequence, _ = make_sequence()
        sequence.write_raise()
        assert sequence.distance.active == 90
        assert sequence.motion.active == 0

    def test_probe_depth(self):
        """Test the probing distance reaches the Z travel minimum from the safe height."""
        sequence, _ = make_sequence(
            PostConfig(safety_margin=5.0), MachineLimits(z=AxisRange(-80.0, 10.0))
        )
        assert sequence.safe_height == 5.0
        assert sequence.probe_depth == 85.0

    def test_probe_is_incremental(self, tool):
        """Test the probing move is relative to the raised position."""
        sequence, writer = make_sequence(
            PostConfig(safety_margin=5.0), MachineLimits(z=AxisRange(-80.0, 10.0))
        )
        sequence.write(tool)
        lines = writer.lines
        probe = lines.index("G38.2 Z-85 F100")
        assert lines[probe - 1] == "G91"
        assert lines[probe + 1] == "G90"
        assert sequence.distance.active == 90
