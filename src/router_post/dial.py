"""Router speed dial presets and RPM to dial setting interpolation.

Trim routers used as spindles have no speed control from the controller.
The operator sets a speed dial by hand, so the tool change prompt shows the
dial setting that approximates the tool's target RPM.
"""

from enum import Enum
from typing import Optional, Sequence, Tuple

import numpy as np


class RouterModel(Enum):
    """Routers with a known speed dial calibration."""

    NONE = "none"  # no dial hint
    MAKITA_RT0701C = "makita_rt0701c"  # dial 1-6, 10,000-30,000 RPM
    DEWALT_DWP611 = "dewalt_dwp611"  # dial 1-6, 16,000-27,000 RPM


def create_speed_table(model: RouterModel) -> Optional[Tuple[float, ...]]:
    """
    Create the calibration table for a router model.

    Entry ``i`` of the table is the RPM at dial setting ``i + 1``.

    Args:
        model: Router model to use

    Returns:
        Tuple of strictly increasing RPM values, or None for RouterModel.NONE

    Examples:
        >>> create_speed_table(RouterModel.MAKITA_RT0701C)
        (10000.0, 12000.0, 17000.0, 22000.0, 27000.0, 30000.0)
    """
    if model == RouterModel.NONE:
        return None
    elif model == RouterModel.MAKITA_RT0701C:
        return (10000.0, 12000.0, 17000.0, 22000.0, 27000.0, 30000.0)
    elif model == RouterModel.DEWALT_DWP611:
        return (16000.0, 18200.0, 20400.0, 22600.0, 24800.0, 27000.0)
    else:
        raise ValueError(f"Unknown router model: {model}")


def dial_setting(rpm: float, table: Optional[Sequence[float]]) -> Optional[float]:
    """Map a target RPM to a continuous dial setting.

    Settings are 1-based: ``table[0]`` is setting 1 and ``table[-1]`` is
    setting ``len(table)``. Between calibration points the setting is
    interpolated linearly; outside the table it clamps to the end settings.

    The table must hold at least two strictly increasing values. Other
    tables are not checked and give undefined results.

    Args:
        rpm: Target spindle speed
        table: Calibration table, or None when no router model is selected

    Returns:
        Dial setting in ``[1, len(table)]``, or None if ``table`` is None

    Examples:
        >>> table = (10000, 12000, 17000, 22000, 27000, 30000)
        >>> dial_setting(14500, table)
        2.5
        >>> dial_setting(5000, table)
        1.0
    """
    if table is None:
        return None

    settings = np.arange(1, len(table) + 1, dtype=float)
    return float(np.interp(rpm, np.asarray(table, dtype=float), settings))


def dial_setting_for_model(rpm: float, model: RouterModel) -> Optional[float]:
    """Convenience wrapper: dial setting for ``rpm`` on a preset router."""
    return dial_setting(rpm, create_speed_table(model))
