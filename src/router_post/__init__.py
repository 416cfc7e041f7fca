"""G-code post-processor for hobby CNC routers with operator guided tool changes."""

from .config import PostConfig
from .dial import RouterModel, dial_setting
from .models import Job, Section, Tool
from .postprocessor import PostProcessor
from .program import Program, post_process

__all__ = [
    "Job",
    "PostConfig",
    "PostProcessor",
    "Program",
    "RouterModel",
    "Section",
    "Tool",
    "dial_setting",
    "post_process",
]
