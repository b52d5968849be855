#!/usr/bin/env python3

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

# Project paths
ALGOPLAY_ROOT = Path(__file__).resolve().parent

# Ensure the local packages are importable when running as a script
if str(ALGOPLAY_ROOT) not in sys.path:
    sys.path.insert(0, str(ALGOPLAY_ROOT))

from playback.config import PlaybackConfig
from playback.controller import PlaybackController
from playback.entities import Frame
from playback.errors import InvalidParameterError
from producers.registry import DOMAINS, build_domain


STATE_MARKS = {
    "comparing": "?", "swapping": "~", "sorted": "=",
    "searching": "?", "found": "!", "not-found": "x",
    "visiting": "?", "visited": "=", "path": "#",
    "computing": "?", "computed": "=", "result": "!",
    "active": ">", "completed": ".",
}


def parse_param(raw: str) -> Dict[str, Any]:
    """Parse ``key=value``; values are read as JSON, falling back to plain strings."""
    if "=" not in raw:
        raise argparse.ArgumentTypeError(f"expected key=value, got '{raw}'")
    key, value = raw.split("=", 1)
    try:
        parsed = json.loads(value)
    except ValueError:
        parsed = value
    return {key.strip(): parsed}


def _mark(item) -> str:
    return STATE_MARKS.get(getattr(item, "state", "default"), "")


def describe_frame(frame: Frame) -> str:
    parts: List[str] = []
    views = frame.views

    if views.get("cells"):
        parts.append(" ".join(f"{c.value}{_mark(c)}" for c in views["cells"]))
    if views.get("nodes") and "edges" in views:
        parts.append("nodes " + " ".join(f"{n.id}{_mark(n)}" for n in views["nodes"]))
        parts.append("edges " + " ".join(f"{e.source}-{e.target}:{e.weight}{_mark(e)}" for e in views["edges"]))
    elif views.get("nodes"):
        parts.append("bst " + " ".join(f"{n.value}{_mark(n)}" for n in views["nodes"]))
        if views.get("path"):
            parts.append("path " + ",".join(map(str, views["path"])))
    if views.get("table"):
        rows = views["table"]
        last = rows[-1]
        parts.append(f"table {len(rows)}x{len(last)} last row: " + " ".join(f"{c.label}{_mark(c)}" for c in last))
    if views.get("towers"):
        parts.append("towers " + " | ".join(",".join(map(str, peg)) or "-" for peg in views["towers"]))
    if views.get("board"):
        parts.append("board " + "/".join("".join("Q" if q else "." for q in row) for row in views["board"]))
    if views.get("results"):
        parts.append("results " + ",".join(views["results"]))
    if views.get("call_stack"):
        parts.append("stack " + " ".join(f"{f.function}({f.params}){_mark(f)}" for f in views["call_stack"]))
    return "; ".join(parts)


async def play(args: argparse.Namespace) -> int:
    domain = build_domain(args.domain, size=args.size, seed=args.seed)
    controller = PlaybackController(domain, PlaybackConfig.from_env())

    params: Dict[str, Any] = {}
    for item in args.param or []:
        params.update(item)

    frame_count = 0

    def on_frame(frame: Frame) -> None:
        nonlocal frame_count
        frame_count += 1
        if args.stop_after and frame_count >= args.stop_after:
            controller.cancel()
        if args.quiet:
            return
        if args.json:
            print(json.dumps(frame.to_dict(), ensure_ascii=False))
        else:
            print(f"[frame {frame.seq:>4}] {describe_frame(frame)}")

    controller.subscribe(on_frame=on_frame)

    try:
        run = controller.start(args.algorithm, params, speed=args.speed)
    except InvalidParameterError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        return 2

    print(f"[run] {args.domain}/{run.algorithm} started with params {run.params}", file=sys.stderr)
    await controller.wait()

    print(f"[run] {run.state.value} after {frame_count} frame(s)", file=sys.stderr)
    if controller.result is not None:
        print(controller.result)
    return 0 if run.error is None else 1


def main() -> None:
    parser = argparse.ArgumentParser(
        description=(
            "Play one algorithm run in the terminal: each published frame is printed "
            "as it becomes the timeline head, followed by the result summary."
        )
    )
    parser.add_argument("--domain", choices=sorted(DOMAINS), required=True,
                        help="Algorithm family to run")
    parser.add_argument("--algorithm", required=True,
                        help="Algorithm within the family (e.g. bubble, binary, dijkstra, lcs, hanoi)")
    parser.add_argument("--param", action="append", type=parse_param,
                        help="Run parameter as key=value (value parsed as JSON), repeatable")
    parser.add_argument("--speed", type=int, default=None,
                        help="Speed 1..100, higher is faster (default: ALGOPLAY_DEFAULT_SPEED or 50)")
    parser.add_argument("--size", type=int, default=None,
                        help="Array length or node count for generated structures")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for generated arrays and graphs")
    parser.add_argument("--json", action="store_true",
                        help="Print each frame as one JSON object per line")
    parser.add_argument("--stop-after", type=int, default=0,
                        help="Cancel the run once this many frames have been published")
    parser.add_argument("--quiet", action="store_true",
                        help="Only print the final summary")

    args = parser.parse_args()

    try:
        code = asyncio.run(play(args))
    except KeyboardInterrupt:
        print("[run] interrupted", file=sys.stderr)
        code = 130
    sys.exit(code)


if __name__ == "__main__":
    main()
