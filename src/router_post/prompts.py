"""Operator message templates.

Templates are ``str.format`` strings. Available fields:

- ``tool_number``, ``tool_description``: the new tool
- ``rpm``: target spindle speed, already rounded to an integer
- ``dial``: dial setting text (only in ``dial_hint``)
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PromptTemplates:
    """Text of the messages shown to the operator during a tool change."""

    insert_tool: str = "Insert tool T{tool_number} {tool_description}"
    attach_probe: str = "Attach the probe clip and place the touch plate under the tool"
    manual_touch: str = "Jog the tool down until it touches the top of the stock"
    start_spindle: str = "Reattach the dust shoe. Set the router to {rpm} RPM{dial_hint} and start it"
    dial_hint: str = " on dial {dial}"

    def format_insert_tool(self, tool_number: int, tool_description: str) -> str:
        return self.insert_tool.format(
            tool_number=tool_number, tool_description=tool_description
        ).strip()

    def format_start_spindle(self, rpm: float, dial: Optional[float] = None) -> str:
        hint = "" if dial is None else self.dial_hint.format(dial=f"{dial:.1f}")
        return self.start_spindle.format(rpm=int(round(rpm)), dial_hint=hint)
