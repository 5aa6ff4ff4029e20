from __future__ import annotations

import io
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .commands import Command, Token, tokenize
from .engine import Engine
from .errors import make_parse_error, nesting_guard
from .optimizer import DEFAULT_PASSES, optimize_passes
from .tree import Block, Node, build_tree


@dataclass(frozen=True)
class TranslateOptions:
    passes: Optional[int] = DEFAULT_PASSES  # None iterates to a fixed point
    strict: bool = False
    optimize: bool = True
    max_steps: Optional[int] = None


@dataclass(frozen=True)
class TranslateResult:
    raw: Block
    tree: Node
    passes_run: int


@dataclass(frozen=True)
class RunResult:
    output: bytes
    tree: Node
    pointer: int
    steps: int


def parse_string(source: str, *, strict: bool = False) -> Block:
    tokens = tokenize(source)
    consumed: List[Token] = []
    open_loops: List[Token] = []  # '[' tokens not yet closed, innermost last

    def stream():
        for tok in tokens:
            consumed.append(tok)
            if tok.command is Command.LOOP_BEGIN:
                open_loops.append(tok)
            elif tok.command is Command.LOOP_END and open_loops:
                open_loops.pop()
            yield tok.command

    try:
        with nesting_guard():
            return build_tree(stream(), strict=strict)
    except ValueError as e:
        # an unmatched ']' is only raised with no loop open
        at = open_loops[-1] if open_loops else (consumed[-1] if consumed else None)
        if at is not None:
            line, column = at.line, at.column
        else:
            line, column = 1, 0
        raise make_parse_error(message=str(e), source=source, line=line, column=column) from e


def translate_string(source: str, *, options: Optional[TranslateOptions] = None) -> TranslateResult:
    opts = options or TranslateOptions()
    raw = parse_string(source, strict=opts.strict)
    if not opts.optimize:
        return TranslateResult(raw=raw, tree=raw, passes_run=0)
    with nesting_guard():
        tree, ran = optimize_passes(raw, opts.passes)
    return TranslateResult(raw=raw, tree=tree, passes_run=ran)


def translate_file(path: str | Path, *, options: Optional[TranslateOptions] = None, encoding: str = "utf-8") -> TranslateResult:
    p = Path(path)
    return translate_string(p.read_text(encoding=encoding), options=options)


def run_tree(tree: Node, input_data: bytes = b"", *, max_steps: Optional[int] = None) -> RunResult:
    reader = io.BytesIO(input_data)
    writer = io.BytesIO()
    engine = Engine(reader, writer, max_steps=max_steps)
    with nesting_guard():
        engine.execute(tree)
    return RunResult(output=writer.getvalue(), tree=tree, pointer=engine.state.pointer, steps=engine.state.steps)


def run_string(source: str, input_data: bytes = b"", *, options: Optional[TranslateOptions] = None) -> RunResult:
    opts = options or TranslateOptions()
    result = translate_string(source, options=opts)
    return run_tree(result.tree, input_data, max_steps=opts.max_steps)
