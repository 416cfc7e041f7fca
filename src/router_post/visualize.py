"""Visualization utilities for router programs.

This module provides functions to plot a router's speed dial calibration
curve and the XY toolpath of a program before it is sent to the machine.
"""

from typing import List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from router_post.dial import RouterModel, create_speed_table, dial_setting
from router_post.models import CircularMove, LinearMove, Position, RapidMove
from router_post.program import Program

# Points per full turn when sampling arcs for plotting
ARC_SAMPLES_PER_TURN = 72


def _arc_points(
    start: Position, move: CircularMove
) -> Tuple[np.ndarray, np.ndarray]:
    """Sample an arc from ``start`` to the end of ``move``.

    Args:
        start: Arc start position
        move: Arc record with center and end point

    Returns:
        Arrays of X and Y coordinates, start and end included
    """
    sx, sy = start.x or 0.0, start.y or 0.0
    radius = np.hypot(sx - move.cx, sy - move.cy)
    a0 = np.arctan2(sy - move.cy, sx - move.cx)
    a1 = np.arctan2(move.y - move.cy, move.x - move.cx)

    sweep = a1 - a0
    if move.clockwise and sweep >= 0:
        sweep -= 2 * np.pi
    elif not move.clockwise and sweep <= 0:
        sweep += 2 * np.pi

    samples = max(2, int(abs(sweep) / (2 * np.pi) * ARC_SAMPLES_PER_TURN) + 1)
    angles = a0 + np.linspace(0.0, sweep, samples)
    return move.cx + radius * np.cos(angles), move.cy + radius * np.sin(angles)


def toolpath_polylines(program: Program) -> List[Tuple[np.ndarray, np.ndarray, bool]]:
    """Convert a program's motion records into XY polylines.

    Args:
        program: Program to convert

    Returns:
        List of ``(xs, ys, is_rapid)`` tuples, one per move that changes XY.
        Moves before the first known XY position are skipped.
    """
    polylines = []
    position = Position()

    for section in program.sections:
        for record in section.records:
            if isinstance(record, (RapidMove, LinearMove)):
                end = position.merged(Position(record.x, record.y, record.z))
                if position.x is not None and position.y is not None and (
                    end.x != position.x or end.y != position.y
                ):
                    polylines.append(
                        (
                            np.array([position.x, end.x]),
                            np.array([position.y, end.y]),
                            isinstance(record, RapidMove),
                        )
                    )
                position = end
            elif isinstance(record, CircularMove):
                xs, ys = _arc_points(position, record)
                polylines.append((xs, ys, False))
                position = position.merged(Position(record.x, record.y, record.z))

    return polylines


def plot_toolpath(
    program: Program,
    title: Optional[str] = None,
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the XY toolpath of a program.

    Rapid moves are drawn dashed, feed moves and arcs solid.

    Args:
        program: Program to plot
        title: Optional custom title (default: program name)
        show: Whether to display the plot (default: True)
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object
    """
    polylines = toolpath_polylines(program)
    if not polylines:
        raise ValueError("Program has no XY motion to plot")

    fig, ax = plt.subplots(figsize=(8, 8))

    rapid_labeled = cut_labeled = False
    for xs, ys, is_rapid in polylines:
        if is_rapid:
            ax.plot(
                xs, ys, color="gray", linestyle="--", linewidth=0.8, alpha=0.7,
                label=None if rapid_labeled else "Rapid",
            )
            rapid_labeled = True
        else:
            ax.plot(
                xs, ys, color="tab:blue", linewidth=1.5,
                label=None if cut_labeled else "Cut",
            )
            cut_labeled = True

    if title is None:
        title = program.job.program_name or "Toolpath"

    ax.set_title(title)
    ax.set_xlabel("X (mm)")
    ax.set_ylabel("Y (mm)")
    ax.set_aspect("equal", adjustable="datalim")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig


def plot_dial_curve(
    model: RouterModel,
    title: Optional[str] = None,
    show: bool = True,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Plot the RPM to dial setting curve of a router.

    Args:
        model: Router model to plot (not RouterModel.NONE)
        title: Optional custom title
        show: Whether to display the plot
        save_path: Optional path to save the figure

    Returns:
        matplotlib Figure object
    """
    table = create_speed_table(model)
    if table is None:
        raise ValueError("Cannot plot dial curve without a router model")

    rpms = np.linspace(table[0] * 0.8, table[-1] * 1.1, 200)
    settings = np.array([dial_setting(rpm, table) for rpm in rpms])

    fig, ax = plt.subplots(figsize=(10, 4))
    ax.plot(rpms, settings, linewidth=2, label="Interpolated setting")
    ax.scatter(table, np.arange(1, len(table) + 1), color="red", zorder=3, label="Calibration")
    ax.set_xlabel("Spindle speed (RPM)")
    ax.set_ylabel("Dial setting")
    ax.set_title(title or f"Speed dial: {model.value}")
    ax.legend()
    ax.grid(True, alpha=0.3)

    plt.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")

    if show:
        plt.show()

    return fig
