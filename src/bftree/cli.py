from __future__ import annotations

import argparse
import sys
import time
from typing import List, Optional

from .api import TranslateOptions, translate_file
from .commands import commands, to_source
from .engine import Engine
from .errors import BFError, nesting_guard
from .optimizer import DEFAULT_PASSES
from .tree import count_nodes, dumps


def _dump_tape(engine: Engine, width: int) -> None:
    cells = engine.snapshot(0, width)
    print(f"pointer={engine.state.pointer} steps={engine.state.steps}")
    for i in range(0, len(cells), 8):
        print(f"{i:5d}: " + " ".join(f"{int(v):3d}" for v in cells[i:i + 8]))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bftree",
        description="Brainfuck tree optimizer and interpreter.",
    )
    parser.add_argument("file", help="program source file")
    parser.add_argument("--passes", type=int, default=DEFAULT_PASSES, help=f"optimizer passes (default {DEFAULT_PASSES})")
    parser.add_argument("--fixed-point", action="store_true", help="optimize until the tree stops changing")
    parser.add_argument("--no-optimize", action="store_true", help="run the unoptimized tree")
    parser.add_argument("--strict", action="store_true", help="treat an unterminated '[' as an error")
    parser.add_argument("--no-tree", action="store_true", help="do not print the optimized tree before running")
    parser.add_argument("--max-steps", type=int, default=None, help="abort after N evaluation steps")
    parser.add_argument("--dump-tape", type=int, default=0, metavar="N", help="print the first N tape cells after the run")
    parser.add_argument("--time", action="store_true", help="report timings on stderr")
    parser.add_argument("--strip", action="store_true", help="print the program without comments and exit")
    return parser


def _translate_and_run(args: argparse.Namespace, options: TranslateOptions) -> None:
    start = time.time()
    result = translate_file(args.file, options=options)
    end = time.time()
    if args.time:
        print(
            f"Translation took {(end - start) * 1000:.2f} ms "
            f"({result.passes_run} passes, {count_nodes(result.raw)} -> {count_nodes(result.tree)} nodes)",
            file=sys.stderr,
        )

    if not args.no_tree:
        print(dumps(result.tree))
        sys.stdout.flush()

    engine = Engine(sys.stdin.buffer, sys.stdout.buffer, max_steps=options.max_steps)
    start = time.time()
    engine.execute(result.tree)
    end = time.time()
    if args.time:
        print(f"Execution took {(end - start) * 1000:.2f} ms ({engine.state.steps} steps)", file=sys.stderr)

    if args.dump_tape > 0:
        print()
        _dump_tape(engine, args.dump_tape)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.passes < 0:
        args.passes = 0

    options = TranslateOptions(
        passes=None if args.fixed_point else args.passes,
        strict=args.strict,
        optimize=not args.no_optimize,
        max_steps=args.max_steps,
    )

    try:
        if args.strip:
            with open(args.file, encoding="utf-8") as f:
                print(to_source(commands(f.read())))
            return 0

        with nesting_guard():
            _translate_and_run(args, options)
    except FileNotFoundError:
        print(f"Couldn't find file: {args.file}", file=sys.stderr)
        return 1
    except BFError as e:
        sys.stdout.flush()
        print(e, file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
