"""Helper functions for saving matplotlib plots in examples."""

import os
from typing import Optional

from router_post.dial import RouterModel
from router_post.program import Program
from router_post.visualize import plot_dial_curve, plot_toolpath


def save_toolpath_plot(program: Program, filename: str, title: Optional[str] = None) -> None:
    """Save a toolpath plot to file.

    Args:
        program: Program to plot
        filename: Output filename (e.g., "my_plot.png")
        title: Optional custom title
    """
    if not filename.endswith((".png", ".jpg", ".pdf")):
        filename += ".png"

    plot_toolpath(program, title=title, show=False, save_path=filename)
    print(f"  Plot saved: {filename}")


def save_dial_plot(model: RouterModel, output_dir: str) -> None:
    """Save the dial calibration curve of ``model`` next to the example."""
    filename = os.path.join(output_dir, f"{model.value}_dial.png")
    plot_dial_curve(model, show=False, save_path=filename)
    print(f"  Plot saved: {filename}")
