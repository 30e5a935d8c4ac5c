"""
vectorpose command line

    python -m vectorpose plan walker.yaml shuffle --from left --iterations 2
    python -m vectorpose play walker.svg walker.yaml shuffle --out posed.svg --instant
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from vectorpose.engine.expander import expand_action
from vectorpose.engine.pose_engine import PoseEngine
from vectorpose.engine.tick_source import AsyncioTickSource, ImmediateTickSource
from vectorpose.managers.config_manager import load_config
from vectorpose.models.enums import LogCategory, LogLevel
from vectorpose.models.errors import UnknownActionError, VectorPoseError
from vectorpose.utils.logger import configure_logger, get_logger

log = get_logger().for_category(LogCategory.SYSTEM)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="vectorpose", description="Route-driven SVG pose transitions")
    parser.add_argument(
        "--log-level",
        choices=[level.name for level in LogLevel],
        default=LogLevel.WARN.name,
        help="Minimum log level (default: WARN)",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable ANSI colors in log output")

    commands = parser.add_subparsers(dest="command", required=True)

    plan = commands.add_parser("plan", help="Print the steps an action expands to (no SVG needed)")
    plan.add_argument("config", help="Configuration file (.yaml/.yml/.json)")
    plan.add_argument("action", help="Action name")
    plan.add_argument("--from", dest="from_state", default=None, help="Start state (default: initial_state)")
    plan.add_argument("--iterations", type=int, default=1, help="Loop iterations to show (default: 1)")

    play = commands.add_parser("play", help="Play an action against an SVG and write the result")
    play.add_argument("svg", help="SVG file with state_* groups")
    play.add_argument("config", help="Configuration file (.yaml/.yml/.json)")
    play.add_argument("action", help="Action name")
    play.add_argument("--out", default=None, help="Output SVG file (default: stdout)")
    play.add_argument("--fps", type=int, default=60, help="Tween frame rate (default: 60)")
    play.add_argument("--instant", action="store_true", help="Skip timing, jump to each step's end pose")

    return parser


def _plan(args: argparse.Namespace) -> int:
    config = load_config(Path(args.config))
    action = config.action(args.action)
    if action is None:
        raise UnknownActionError(args.action)

    current = args.from_state or config.initial_state
    iterations = max(1, min(args.iterations, action.iterations))

    print(f"{args.action} ({action.kind.name.lower()}, {action.mode.name.lower()}) from {current}")
    for iteration in range(iterations):
        expansion = expand_action(action, current, config.routes, config.ms)
        if action.iterations > 1:
            print(f"  iteration {iteration + 1}:")
        if not expansion.steps:
            print("    (no steps)")
        for step in expansion.steps:
            print(f"    -> {step.state:<16} {step.ms:g}ms")
        current = expansion.final_state

    print(f"final state: {current}")
    return 0


def _play(args: argparse.Namespace) -> int:
    tick_source = ImmediateTickSource() if args.instant else AsyncioTickSource(fps=args.fps)
    engine = PoseEngine(svg=Path(args.svg), config=Path(args.config), tick_source=tick_source)
    engine.on("state_change", lambda state: print(f"state: {state}", file=sys.stderr))

    asyncio.run(engine.play(args.action))

    document = engine.to_svg()
    if args.out:
        Path(args.out).write_text(document, encoding="utf-8")
        print(f"wrote {args.out} (state: {engine.current_state})", file=sys.stderr)
    else:
        print(document)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    configure_logger(min_level=LogLevel[args.log_level], use_colors=not args.no_color)

    handler = _plan if args.command == "plan" else _play
    try:
        return handler(args)
    except VectorPoseError as e:
        log.error(str(e), error_type=type(e).__name__)
        return 1
    except KeyboardInterrupt:
        log.info("Keyboard interrupt received")
        return 130


if __name__ == "__main__":
    sys.exit(main())
