"""Queries the post-processor makes back into the CAM host."""

from typing import Protocol

from router_post.models import MachineLimits, Position


class Host(Protocol):
    """What the post-processor needs from whoever drives the callbacks."""

    def current_position(self) -> Position:
        """Tool position at the start of the record being processed."""
        ...

    def machine_limits(self) -> MachineLimits:
        """Travel limits of the machine."""
        ...

    def next_record_is_motion(self) -> bool:
        """Whether the record after the current one moves the machine."""
        ...

    def warning(self, message: str) -> None:
        """Show a non-fatal warning to the operator."""
        ...
