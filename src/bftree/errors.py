from __future__ import annotations

import sys
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional

# Each loop level costs a few frames in the builder, optimizer and engine.
RECURSION_LIMIT = 10 ** 4


def _build_context(lines: List[str], line_no_1: int, column: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx and column > 0:
            out.append(f"       | {' ' * (column - 1)}^")
    return "\n".join(out)


def _hint_for(message: str) -> Optional[str]:
    msg = message.lower()
    if "unmatched ']'" in msg:
        return 'Every "]" needs an earlier "[" at the same nesting depth. Remove the extra "]" or add the missing "[".'
    if "unmatched '['" in msg:
        return 'Close the loop with "]" or run without --strict to close it implicitly at end of input.'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BFParseError(BFError):
    line: int
    column: int
    context: str


@dataclass
class BFIOError(BFError):
    pass


@dataclass
class BFStepLimitError(BFError):
    steps: int


def make_parse_error(*, message: str, source: str, line: int, column: int = 0) -> BFParseError:
    lines = source.split('\n')
    ctx = _build_context(lines, line, column)
    hint = _hint_for(message)
    hint_block = f"\nHint: {hint}" if hint else ""
    where = f"line {line}, column {column}" if column else f"line {line}"
    return BFParseError(
        message=f"ParseError: {message} ({where})\n{ctx}{hint_block}",
        line=line,
        column=column,
        context=ctx,
    )


@dataclass
class BFNestingError(BFError):
    pass


@contextmanager
def nesting_guard() -> Iterator[None]:
    """Raise the recursion limit for deep loop nesting, failing as BFNestingError past it."""
    old = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old, RECURSION_LIMIT))
    try:
        yield
    except RecursionError as e:
        raise BFNestingError(message="NestingError: loops are nested too deeply to process") from e
    finally:
        sys.setrecursionlimit(old)
