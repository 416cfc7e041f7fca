"""Tests for the callback driven post-processor."""

import pytest

from router_post.commands import Command, MovementType
from router_post.config import PostConfig
from router_post.errors import RadiusCompensationError, UnsupportedUnitError
from router_post.models import (
    Job,
    LinearMove,
    MachineLimits,
    Position,
    RadiusCompensationMode,
    Section,
    SpindleDirection,
    Tool,
    Unit,
)
from router_post.postprocessor import PostProcessor


class FakeHost:
    """Host with a settable position and look-ahead answer."""

    def __init__(self):
        self.position = Position(0.0, 0.0, 0.0)
        self.next_is_motion = False
        self.warnings = []

    def current_position(self):
        return self.position

    def machine_limits(self):
        return MachineLimits()

    def next_record_is_motion(self):
        return self.next_is_motion

    def warning(self, message):
        self.warnings.append(message)


@pytest.fixture
def host():
    return FakeHost()


@pytest.fixture
def tool():
    return Tool(number=1, description="1/4in endmill", spindle_rpm=18000)


def open_section(host, tool, config=None):
    """Open a run and start one section without tool change prompts."""
    post = PostProcessor(config or PostConfig(tool_change_prompt=False), host)
    post.on_open(Job())
    post.on_section(Section(tool=tool))
    return post


def lines_after(post, marker):
    """Lines written after the last occurrence of ``marker``."""
    lines = post.state.writer.lines
    index = len(lines) - 1 - lines[::-1].index(marker)
    return lines[index + 1 :]


class TestOpenAndClose:
    """Test run boundaries."""

    def test_header(self, host):
        """Test program header comments and modal setup."""
        post = PostProcessor(PostConfig(), host)
        job = Job(
            program_name="1001",
            program_comment="Sign blank",
            vendor="Acme",
            model="Router 32",
            tools=(Tool(number=1, description="1/4in endmill"), Tool(number=1), Tool(number=2)),
        )
        post.on_open(job)
        assert post.state.writer.lines == [
            "(1001)",
            "(Sign blank)",
            "(Machine: Acme Router 32)",
            "(T1 1/4in endmill)",
            "(T2)",
            "G90 G21",
        ]

    def test_header_without_comments(self, host):
        """Test that disabling comments leaves only the modal setup."""
        post = PostProcessor(PostConfig(output_comments=False), host)
        post.on_open(Job(program_name="1001"))
        assert post.state.writer.lines == ["G90 G21"]

    def test_non_metric_unit_is_fatal(self, host):
        """Test that an inch program is rejected before any output."""
        post = PostProcessor(PostConfig(), host)
        with pytest.raises(UnsupportedUnitError, match="must be mm"):
            post.on_open(Job(unit=Unit.INCH))
        assert post.state is None

    def test_rejected_run_drops_previous_state(self, host, tool):
        """Test that a rejected second run leaves no state from the first run."""
        post = open_section(host, tool)
        post.on_close()
        with pytest.raises(UnsupportedUnitError):
            post.on_open(Job(unit=Unit.INCH))
        assert post.state is None
        with pytest.raises(RuntimeError, match="on_open must be called"):
            post.on_rapid(0.0, 0.0, 5.0)

    def test_callback_before_open(self, host):
        """Test that callbacks require an open run."""
        post = PostProcessor(PostConfig(), host)
        with pytest.raises(RuntimeError, match="on_open must be called"):
            post.on_rapid(0.0, 0.0, 5.0)

    def test_close(self, host, tool):
        """Test the program end."""
        post = open_section(host, tool)
        text = post.on_close()
        assert text.endswith("G90\nG53 G0 Z-1\nM5\nM2\n")

    def test_open_resets_state(self, host, tool):
        """Test that a second run starts from fresh state."""
        post = open_section(host, tool)
        post.on_rapid(0.0, 0.0, 5.0)
        first = post.on_close()

        post.on_open(Job())
        post.on_section(Section(tool=tool))
        post.on_rapid(0.0, 0.0, 5.0)
        assert post.on_close() == first


class TestSectionStart:
    """Test section start and tool changes."""

    def test_spindle_start_always_written(self, host, tool):
        """Test that every section starts the spindle at the tool's RPM."""
        post = PostProcessor(PostConfig(tool_change_prompt=False), host)
        post.on_open(Job())
        post.on_section(Section(tool=tool))
        post.on_section_end()
        post.on_section(Section(tool=tool))
        assert post.state.writer.lines.count("S18000 M3") == 2

    def test_counter_clockwise_tool(self, host):
        """Test M4 for a counter-clockwise tool."""
        tool = Tool(number=1, spindle_rpm=12000, direction=SpindleDirection.COUNTER_CLOCKWISE)
        post = open_section(host, tool)
        assert post.state.writer.lines[-1] == "S12000 M4"

    def test_section_comment(self, host, tool):
        """Test that the operation comment is written."""
        post = PostProcessor(PostConfig(tool_change_prompt=False), host)
        post.on_open(Job())
        post.on_section(Section(tool=tool, comment="2D Contour (outside)"))
        assert "(2D Contour outside)" in post.state.writer.lines

    def test_tool_change_on_first_section(self, host, tool):
        """Test that the first section runs the tool change sequence."""
        post = PostProcessor(PostConfig(), host)
        post.on_open(Job())
        post.on_section(Section(tool=tool))
        lines = post.state.writer.lines
        assert "(MSG, Insert tool T1 1/4in endmill)" in lines
        assert lines[-1] == "S18000 M3"

    def test_no_tool_change_for_same_tool(self, host, tool):
        """Test that the same tool in consecutive sections is not changed."""
        post = PostProcessor(PostConfig(), host)
        post.on_open(Job())
        post.on_section(Section(tool=tool))
        post.on_section_end()
        post.on_section(Section(tool=tool))
        lines = post.state.writer.lines
        assert sum(line.startswith("G38.2") for line in lines) == 1

    def test_motion_restated_after_tool_change(self, host, tool):
        """Test that the first move after a tool change restates every word."""
        post = PostProcessor(PostConfig(), host)
        post.on_open(Job())
        post.on_section(Section(tool=tool))
        post.on_rapid(0.0, 0.0, 5.0)
        post.on_section_end()
        post.on_section(Section(tool=Tool(number=2, spindle_rpm=18000)))
        post.on_rapid(0.0, 0.0, 5.0)
        assert post.state.writer.lines[-1] == "G0 X0 Y0 Z5"


class TestMotion:
    """Test motion callbacks."""

    def test_rapid(self, host, tool):
        """Test rapid move with modal suppression."""
        post = open_section(host, tool)
        post.on_rapid(0.0, 0.0, 5.0)
        post.on_rapid(10.0, 0.0, 5.0)
        post.on_rapid(10.0, 0.0, 5.0)
        assert lines_after(post, "S18000 M3") == ["G0 X0 Y0 Z5", "X10"]

    def test_repeated_coordinates_are_suppressed(self, host, tool):
        """Test that an unchanged position writes nothing for any axis."""
        post = open_section(host, tool)
        post.on_linear(1.0, 2.0, 3.0, 100.0)
        count = len(post.state.writer)
        post.on_linear(1.0, 2.0, 3.0, 100.0)
        assert len(post.state.writer) == count

    def test_linear_after_rapid_restates_feed(self, host, tool):
        """Test that a rapid forces the feed rate on the next feed move."""
        post = open_section(host, tool)
        post.on_linear(0.0, 0.0, -1.0, 300.0)
        post.on_rapid(z=5.0)
        post.on_linear(z=-1.0, feed=300.0)
        assert lines_after(post, "S18000 M3") == [
            "G1 X0 Y0 Z-1 F300",
            "G0 Z5",
            "G1 Z-1 F300",
        ]

    def test_linear_feed_change(self, host, tool):
        """Test that only a changed feed is written."""
        post = open_section(host, tool)
        post.on_linear(x=1.0, feed=300.0)
        post.on_linear(x=2.0, feed=300.0)
        post.on_linear(x=3.0, feed=450.0)
        assert lines_after(post, "S18000 M3") == ["G1 X1 F300", "X2", "X3 F450"]

    def test_feed_only_change_deferred_to_next_move(self, host, tool):
        """Test that a lone feed change joins the following move."""
        post = open_section(host, tool)
        post.on_linear(x=1.0, feed=300.0)
        host.next_is_motion = True
        post.on_linear(x=1.0, feed=200.0)
        post.on_linear(x=2.0, feed=200.0)
        assert lines_after(post, "S18000 M3") == ["G1 X1 F300", "X2 F200"]

    def test_feed_only_change_written_alone(self, host, tool):
        """Test that a lone feed change is written when no move follows."""
        post = open_section(host, tool)
        post.on_linear(x=1.0, feed=300.0)
        host.next_is_motion = False
        post.on_linear(x=1.0, feed=200.0)
        assert lines_after(post, "S18000 M3") == ["G1 X1 F300", "F200"]

    def test_circular(self, host, tool):
        """Test clockwise and counter-clockwise arcs."""
        post = open_section(host, tool)
        post.on_rapid(0.0, 0.0, -1.0)
        host.position = Position(0.0, 0.0, -1.0)
        post.on_circular(True, 5.0, 0.0, 10.0, 0.0, feed=300.0)
        host.position = Position(10.0, 0.0, -1.0)
        post.on_circular(False, 5.0, 0.0, 0.0, 0.0, feed=300.0)
        assert lines_after(post, "S18000 M3")[1:] == [
            "G2 X10 I5 J0 F300",
            "G3 X0 I-5 J0",
        ]

    def test_arc_offsets_never_suppressed(self, host, tool):
        """Test that consecutive arcs with the same offset both write I and J."""
        post = open_section(host, tool)
        host.position = Position(0.0, 0.0, 0.0)
        post.on_circular(True, 5.0, 5.0, 10.0, 0.0, feed=300.0)
        post.on_circular(True, 5.0, 5.0, 10.0, 0.0, feed=300.0)
        first, second = lines_after(post, "S18000 M3")
        for line in (first, second):
            assert "I5" in line
            assert "J5" in line

    def test_arc_with_unknown_start_warns(self, host, tool):
        """Test that an arc before any XY position is known is reported."""
        post = open_section(host, tool)
        host.position = Position()
        post.on_circular(True, 5.0, 0.0, 10.0, 0.0, feed=300.0)
        assert post.state.writer.lines[-1] == "G2 X10 Y0 I5 J0 F300"
        assert len(host.warnings) == 1
        assert "XY position is known" in host.warnings[0]

    def test_arc_with_known_start_does_not_warn(self, host, tool):
        """Test that arcs from a known position raise no warning."""
        post = open_section(host, tool)
        host.position = Position(0.0, 0.0)
        post.on_circular(True, 5.0, 0.0, 10.0, 0.0, feed=300.0)
        assert host.warnings == []

    def test_helix(self, host, tool):
        """Test that an arc with a Z change writes Z."""
        post = open_section(host, tool)
        post.on_rapid(0.0, 0.0, 0.0)
        host.position = Position(0.0, 0.0, 0.0)
        post.on_circular(False, 5.0, 0.0, 0.0, 0.0, z=-1.0, feed=200.0)
        assert post.state.writer.lines[-1] == "G3 Z-1 I5 J0 F200"

    def test_word_separation_off(self, host, tool):
        """Test blocks without spaces."""
        post = open_section(host, tool, PostConfig(tool_change_prompt=False, separate_words=False))
        post.on_rapid(0.0, 0.0, 5.0)
        assert post.state.writer.lines[-1] == "G0X0Y0Z5"


class TestCommands:
    """Test command, dwell and notification callbacks."""

    def test_mapped_commands(self, host, tool):
        """Test commands with an M code."""
        post = open_section(host, tool)
        post.on_command(Command.STOP)
        post.on_command(Command.OPTIONAL_STOP)
        post.on_command(Command.STOP_SPINDLE)
        post.on_command(Command.END)
        assert lines_after(post, "S18000 M3") == ["M0", "M1", "M5", "M2"]

    def test_ignored_commands(self, host, tool):
        """Test that unsupported commands write nothing."""
        post = open_section(host, tool)
        count = len(post.state.writer)
        for command in (Command.CHANGE_PALLET, Command.MAIN_CHUCK_OPEN, Command.COOLANT_ON):
            post.on_command(command)
        assert len(post.state.writer) == count

    def test_start_spindle_uses_tool_direction(self, host):
        """Test spindle start from the section's tool."""
        tool = Tool(number=1, spindle_rpm=16000, direction=SpindleDirection.COUNTER_CLOCKWISE)
        post = open_section(host, tool)
        post.on_command(Command.START_SPINDLE)
        assert post.state.writer.lines[-1] == "M4"

    def test_spindle_speed(self, host, tool):
        """Test spindle speed changes inside a section."""
        post = open_section(host, tool)
        post.on_spindle_speed(18000)
        post.on_spindle_speed(20000)
        assert lines_after(post, "S18000 M3") == ["S20000"]

    def test_dwell(self, host, tool):
        """Test a dwell inside the accepted range."""
        post = open_section(host, tool)
        post.on_dwell(1.5)
        post.on_dwell(1.5)
        assert lines_after(post, "S18000 M3") == ["G4 P1.5", "G4 P1.5"]
        assert host.warnings == []

    def test_dwell_clamped_with_warning(self, host, tool):
        """Test that out of range dwell times are clamped and reported."""
        post = open_section(host, tool)
        post.on_dwell(0.0)
        post.on_dwell(200000.0)
        assert lines_after(post, "S18000 M3") == ["G4 P0.001", "G4 P99999.999"]
        assert len(host.warnings) == 2
        assert "out of range" in host.warnings[0]

    def test_movement_comment(self, host, tool):
        """Test movement classification comments."""
        post = open_section(host, tool)
        post.on_movement(MovementType.LEAD_IN)
        assert post.state.writer.lines[-1] == "(Movement: lead in)"

    def test_comment(self, host, tool):
        """Test free text comments and their suppression."""
        post = open_section(host, tool)
        post.on_comment("check clamps")
        assert post.state.writer.lines[-1] == "(check clamps)"

        quiet = open_section(
            host, tool, PostConfig(tool_change_prompt=False, output_comments=False)
        )
        count = len(quiet.state.writer)
        quiet.on_comment("check clamps")
        quiet.on_movement(MovementType.CUTTING)
        assert len(quiet.state.writer) == count

    def test_comment_line_breaks_stay_in_comment(self, host, tool):
        """Test that line breaks in section and record comments do not start new blocks."""
        post = PostProcessor(PostConfig(tool_change_prompt=False), host)
        post.on_open(Job())
        post.on_section(Section(tool=tool, comment="Pocket\nG0 Z-50"))
        post.on_comment("a\nM2")
        lines = post.on_close().splitlines()
        assert "(Pocket G0 Z-50)" in lines
        assert "(a M2)" in lines
        assert "G0 Z-50)" not in lines
        assert "M2)" not in lines

    def test_radius_compensation_is_fatal(self, host, tool):
        """Test that radius compensation aborts the run."""
        post = open_section(host, tool)
        post.on_radius_compensation(RadiusCompensationMode.OFF)
        with pytest.raises(RadiusCompensationError, match="not supported"):
            post.on_radius_compensation(RadiusCompensationMode.LEFT)

    def test_dispatch(self, host, tool):
        """Test routing a record to its callback."""
        post = open_section(host, tool)
        post.dispatch(LinearMove(x=1.0, feed=100.0))
        assert post.state.writer.lines[-1] == "G1 X1 F100"

    def test_dispatch_unknown_record(self, host, tool):
        """Test that unknown records raise ValueError."""
        post = open_section(host, tool)
        with pytest.raises(ValueError, match="Unknown record type"):
            post.dispatch("G0 X0")
