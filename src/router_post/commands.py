"""Abstract host commands, movement classifications and their G-code meaning."""

from enum import Enum
from typing import Dict


class Command(Enum):
    """Abstract command identifiers issued by the CAM host."""

    STOP = "stop"
    OPTIONAL_STOP = "optional_stop"
    END = "end"
    SPINDLE_CLOCKWISE = "spindle_clockwise"
    SPINDLE_COUNTERCLOCKWISE = "spindle_counterclockwise"
    START_SPINDLE = "start_spindle"
    STOP_SPINDLE = "stop_spindle"
    ORIENTATE_SPINDLE = "orientate_spindle"
    LOAD_TOOL = "load_tool"
    COOLANT_ON = "coolant_on"
    COOLANT_OFF = "coolant_off"
    OPEN_DOOR = "open_door"
    CLOSE_DOOR = "close_door"
    PROBE_ON = "probe_on"
    PROBE_OFF = "probe_off"
    CHANGE_PALLET = "change_pallet"
    MAIN_CHUCK_OPEN = "main_chuck_open"
    MAIN_CHUCK_CLOSE = "main_chuck_close"
    POWER_ON = "power_on"
    POWER_OFF = "power_off"
    BREAK_CONTROL = "break_control"
    TOOL_MEASURE = "tool_measure"
    CALIBRATE = "calibrate"
    VERIFY = "verify"
    CLEAN = "clean"
    ALARM = "alarm"
    ALERT = "alert"
    EXACT_STOP = "exact_stop"
    START_CHIP_TRANSPORT = "start_chip_transport"
    STOP_CHIP_TRANSPORT = "stop_chip_transport"
    LOCK_MULTI_AXIS = "lock_multi_axis"
    UNLOCK_MULTI_AXIS = "unlock_multi_axis"


class CommandAction(Enum):
    """What the post-processor does with a command."""

    EMIT = "emit"  # write the mapped M-code
    SPINDLE_START = "spindle_start"  # M3/M4 depending on the section's tool
    IGNORED = "ignored"  # the machine has no such capability


# Every Command member appears exactly once.
COMMAND_ACTIONS: Dict[Command, CommandAction] = {
    Command.STOP: CommandAction.EMIT,
    Command.OPTIONAL_STOP: CommandAction.EMIT,
    Command.END: CommandAction.EMIT,
    Command.SPINDLE_CLOCKWISE: CommandAction.EMIT,
    Command.SPINDLE_COUNTERCLOCKWISE: CommandAction.EMIT,
    Command.START_SPINDLE: CommandAction.SPINDLE_START,
    Command.STOP_SPINDLE: CommandAction.EMIT,
    Command.ORIENTATE_SPINDLE: CommandAction.IGNORED,
    Command.LOAD_TOOL: CommandAction.IGNORED,  # handled at section start
    Command.COOLANT_ON: CommandAction.IGNORED,
    Command.COOLANT_OFF: CommandAction.IGNORED,
    Command.OPEN_DOOR: CommandAction.IGNORED,
    Command.CLOSE_DOOR: CommandAction.IGNORED,
    Command.PROBE_ON: CommandAction.IGNORED,
    Command.PROBE_OFF: CommandAction.IGNORED,
    Command.CHANGE_PALLET: CommandAction.IGNORED,
    Command.MAIN_CHUCK_OPEN: CommandAction.IGNORED,
    Command.MAIN_CHUCK_CLOSE: CommandAction.IGNORED,
    Command.POWER_ON: CommandAction.IGNORED,
    Command.POWER_OFF: CommandAction.IGNORED,
    Command.BREAK_CONTROL: CommandAction.IGNORED,
    Command.TOOL_MEASURE: CommandAction.IGNORED,
    Command.CALIBRATE: CommandAction.IGNORED,
    Command.VERIFY: CommandAction.IGNORED,
    Command.CLEAN: CommandAction.IGNORED,
    Command.ALARM: CommandAction.IGNORED,
    Command.ALERT: CommandAction.IGNORED,
    Command.EXACT_STOP: CommandAction.IGNORED,
    Command.START_CHIP_TRANSPORT: CommandAction.IGNORED,
    Command.STOP_CHIP_TRANSPORT: CommandAction.IGNORED,
    Command.LOCK_MULTI_AXIS: CommandAction.IGNORED,
    Command.UNLOCK_MULTI_AXIS: CommandAction.IGNORED,
}

M_CODES: Dict[Command, int] = {
    Command.STOP: 0,
    Command.OPTIONAL_STOP: 1,
    Command.END: 2,
    Command.SPINDLE_CLOCKWISE: 3,
    Command.SPINDLE_COUNTERCLOCKWISE: 4,
    Command.STOP_SPINDLE: 5,
}


def command_action(command: Command) -> CommandAction:
    """Look up how a command is handled.

    Raises:
        ValueError: If ``command`` is not a Command member
    """
    if not isinstance(command, Command):
        raise ValueError(f"Unknown command: {command}")
    return COMMAND_ACTIONS[command]


class MovementType(Enum):
    """Movement classification of the motion that follows."""

    RAPID = "rapid"
    LEAD_IN = "lead_in"
    CUTTING = "cutting"
    LEAD_OUT = "lead_out"
    LINK_TRANSITION = "link_transition"
    LINK_DIRECT = "link_direct"
    RAMP_HELIX = "ramp_helix"
    RAMP_PROFILE = "ramp_profile"
    RAMP_ZIG_ZAG = "ramp_zig_zag"
    RAMP = "ramp"
    PLUNGE = "plunge"
    PREDRILL = "predrill"
    EXTENDED = "extended"
    REDUCED = "reduced"
    FINISH_CUTTING = "finish_cutting"
    HIGH_FEED = "high_feed"

    @property
    def label(self) -> str:
        """Human readable name used in output comments."""
        return self.value.replace("_", " ")
