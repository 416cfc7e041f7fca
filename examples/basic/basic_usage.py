"""Basic usage example.

This example demonstrates:
- Describing a job, its tools and sections
- Configuring the post-processor
- Producing G-code with tool change prompts
- Plotting the toolpath

This is the simplest way to use the post-processor.
"""

import os
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from plot_helper import save_dial_plot, save_toolpath_plot

from router_post import Job, PostConfig, Program, RouterModel, Section, Tool, post_process
from router_post.commands import MovementType
from router_post.models import CircularMove, LinearMove, MovementChange, RapidMove


def main():
    """Post-process a sign with an outline and an engraved circle."""

    print("=" * 80)
    print("BASIC POST-PROCESSOR USAGE")
    print("=" * 80)

    endmill = Tool(number=1, description="1/4in downcut endmill", spindle_rpm=18000)
    vbit = Tool(number=2, description="60deg v-bit", spindle_rpm=22000)

    outline = Section(
        tool=endmill,
        comment="Outline",
        records=(
            MovementChange(MovementType.RAPID),
            RapidMove(0.0, 0.0, 5.0),
            MovementChange(MovementType.PLUNGE),
            LinearMove(z=-3.0, feed=250.0),
            MovementChange(MovementType.CUTTING),
            LinearMove(x=200.0, feed=1500.0),
            LinearMove(y=100.0, feed=1500.0),
            LinearMove(x=0.0, feed=1500.0),
            LinearMove(y=0.0, feed=1500.0),
            RapidMove(z=5.0),
        ),
    )

    engraving = Section(
        tool=vbit,
        comment="Engrave circle",
        records=(
            RapidMove(70.0, 50.0, 5.0),
            LinearMove(z=-1.0, feed=300.0),
            CircularMove(True, 100.0, 50.0, 130.0, 50.0, feed=1200.0),
            CircularMove(True, 100.0, 50.0, 70.0, 50.0, feed=1200.0),
            RapidMove(z=5.0),
        ),
    )

    program = Program(
        job=Job(program_name="Sign", tools=(endmill, vbit)),
        sections=[outline, engraving],
    )

    # Guide the operator through probing, show the Makita dial setting
    config = PostConfig(router_model=RouterModel.MAKITA_RT0701C)
    gcode = post_process(program, config)

    print(gcode)

    output_dir = os.path.dirname(os.path.abspath(__file__))
    save_toolpath_plot(program, os.path.join(output_dir, "basic_usage_toolpath.png"))
    save_dial_plot(RouterModel.MAKITA_RT0701C, output_dir)


if __name__ == "__main__":
    main()
