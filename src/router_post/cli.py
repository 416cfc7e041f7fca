"""Command line entry point: ``router-post PROGRAM.json [-o OUT]``."""

import logging
import sys
from typing import List, Optional

from router_post.config import build_arg_parser, config_from_args
from router_post.errors import PostProcessorError
from router_post.program import load_program, post_process

log = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Post-process a JSON program file and write the G-code.

    Returns:
        Exit status: 0 on success, 1 on a fatal post-processing error
    """
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = config_from_args(args)
    program = load_program(args.program)

    try:
        gcode = post_process(program, config)
    except PostProcessorError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    if args.output:
        with open(args.output, "w", encoding="ascii", newline="\n") as f:
            f.write(gcode)
        log.info("G-code written to %s", args.output)
    else:
        sys.stdout.write(gcode)
    return 0


if __name__ == "__main__":
    sys.exit(main())
