from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Iterator, List, Optional


class Command(Enum):
    """The eight primitive commands, valued by their source symbol."""

    MOVE_RIGHT = '>'
    MOVE_LEFT = '<'
    INCREMENT = '+'
    DECREMENT = '-'
    PRINT = '.'
    READ = ','
    LOOP_BEGIN = '['
    LOOP_END = ']'

    @classmethod
    def from_char(cls, ch: str) -> Optional["Command"]:
        """Map a source character to its command, or None for comment text."""
        return _BY_CHAR.get(ch)

    @property
    def char(self) -> str:
        return self.value

    def __str__(self) -> str:
        return self.value


_BY_CHAR = {c.value: c for c in Command}
BF_OPS = frozenset(_BY_CHAR)


@dataclass(frozen=True)
class Token:
    command: Command
    line: int    # 1-based
    column: int  # 1-based


def tokenize(source: str) -> List[Token]:
    tokens: List[Token] = []
    line, column = 1, 0
    for ch in source:
        if ch == '\n':
            line += 1
            column = 0
            continue
        column += 1
        command = Command.from_char(ch)
        if command is not None:
            tokens.append(Token(command, line, column))
    return tokens


def commands(source: str) -> Iterator[Command]:
    for ch in source:
        command = Command.from_char(ch)
        if command is not None:
            yield command


def to_source(cmds: Iterable[Command]) -> str:
    return "".join(c.char for c in cmds)
