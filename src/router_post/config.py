"""User settable post-processor configuration."""

import argparse
from dataclasses import dataclass, field
from typing import List, Optional

from router_post.dial import RouterModel
from router_post.prompts import PromptTemplates


@dataclass(frozen=True)
class PostConfig:
    """Post-processor properties set before a run.

    Attributes:
        sequence_numbers: Prefix blocks with N numbers
        sequence_start: First N number
        sequence_increment: Step between N numbers
        separate_words: Separate words in a block with a space
        output_comments: Write header, section and movement comments
        tool_change_prompt: Guide the operator through tool changes
        probing_tool: Zero Z with a touch plate instead of a manual touch-off
        router_model: Router whose speed dial is shown in the RPM prompt
        safety_margin: Distance below the Z travel maximum for safe raises (mm)
        probe_feed: Feed rate of the Z probing move (mm/min)
        probe_offset: Touch plate thickness applied after probing (mm)
        prompts: Operator message templates
    """

    sequence_numbers: bool = False
    sequence_start: int = 10
    sequence_increment: int = 1
    separate_words: bool = True
    output_comments: bool = True
    tool_change_prompt: bool = True
    probing_tool: bool = True
    router_model: RouterModel = RouterModel.NONE
    safety_margin: float = 1.0
    probe_feed: float = 100.0
    probe_offset: float = 0.5
    prompts: PromptTemplates = field(default_factory=PromptTemplates)

    def __post_init__(self) -> None:
        """Validate numeric settings."""
        if self.sequence_start < 0:
            raise ValueError(f"sequence_start must be non-negative, got {self.sequence_start}")
        if self.sequence_increment < 1:
            raise ValueError(f"sequence_increment must be >= 1, got {self.sequence_increment}")
        if self.safety_margin < 0:
            raise ValueError(f"safety_margin must be non-negative, got {self.safety_margin}")
        if self.probe_feed <= 0:
            raise ValueError(f"probe_feed must be positive, got {self.probe_feed}")
        if self.probe_offset < 0:
            raise ValueError(f"probe_offset must be non-negative, got {self.probe_offset}")


def build_arg_parser(prog: str = "router-post") -> argparse.ArgumentParser:
    """Create a parser with one option per PostConfig property."""
    parser = argparse.ArgumentParser(
        prog=prog, description="Post-process a CAM program into router G-code."
    )
    parser.add_argument("program", help="JSON program file written by the CAM host")
    parser.add_argument("-o", "--output", help="output file, default: stdout")
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")

    parser.add_argument("--line-numbers", action="store_true", help="prefix blocks with N numbers")
    parser.add_argument("--line-start", type=int, default=10, help="first line number, default=10")
    parser.add_argument(
        "--line-increment", type=int, default=1, help="line number increment, default=1"
    )
    parser.add_argument(
        "--no-word-separation", action="store_true", help="do not put spaces between words"
    )
    parser.add_argument("--no-comments", action="store_true", help="suppress comment output")
    parser.add_argument(
        "--no-tool-change-prompt",
        action="store_true",
        help="do not guide the operator through tool changes",
    )
    parser.add_argument(
        "--no-probe", action="store_true", help="zero Z by manual touch-off instead of probing"
    )
    parser.add_argument(
        "--router",
        choices=[m.value for m in RouterModel],
        default=RouterModel.NONE.value,
        help="router model for the speed dial hint, default=none",
    )
    parser.add_argument(
        "--safety-margin", type=float, default=1.0, help="mm below Z travel maximum, default=1.0"
    )
    parser.add_argument(
        "--probe-feed", type=float, default=100.0, help="probing feed in mm/min, default=100"
    )
    parser.add_argument(
        "--probe-offset", type=float, default=0.5, help="touch plate thickness in mm, default=0.5"
    )
    return parser


def config_from_args(args: argparse.Namespace) -> PostConfig:
    """Build a PostConfig from parsed command line arguments."""
    return PostConfig(
        sequence_numbers=args.line_numbers,
        sequence_start=args.line_start,
        sequence_increment=args.line_increment,
        separate_words=not args.no_word_separation,
        output_comments=not args.no_comments,
        tool_change_prompt=not args.no_tool_change_prompt,
        probing_tool=not args.no_probe,
        router_model=RouterModel(args.router),
        safety_margin=args.safety_margin,
        probe_feed=args.probe_feed,
        probe_offset=args.probe_offset,
    )


def parse_config(argv: Optional[List[str]] = None) -> PostConfig:
    """Parse ``argv`` (the program argument included) into a PostConfig."""
    return config_from_args(build_arg_parser().parse_args(argv))
