from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Iterator, Tuple, Union

from .commands import Command

CELL_SIZE = 256


# ---------------- Tree nodes ----------------
@dataclass(frozen=True)
class MovePointer:
    delta: int  # net >/<


@dataclass(frozen=True)
class AddValue:
    delta: int  # net +/- on current cell, mod CELL_SIZE


@dataclass(frozen=True)
class SetValue:
    value: int


@dataclass(frozen=True)
class Print:
    pass


@dataclass(frozen=True)
class Read:
    pass


@dataclass(frozen=True)
class Block:
    children: Tuple["Node", ...] = ()


@dataclass(frozen=True)
class Jump:
    body: "Node"


@dataclass(frozen=True)
class AddTo:
    offset: int  # cell[p + offset] += cell[p]


Node = Union[MovePointer, AddValue, SetValue, Print, Read, Block, Jump, AddTo]

_SIMPLE = {
    Command.MOVE_RIGHT: MovePointer(1),
    Command.MOVE_LEFT: MovePointer(-1),
    Command.INCREMENT: AddValue(1),
    Command.DECREMENT: AddValue(CELL_SIZE - 1),
    Command.PRINT: Print(),
    Command.READ: Read(),
}


# ---------------- Builder: commands -> tree ----------------
def build_tree(cmds: Iterable[Command], in_loop: bool = False, *, strict: bool = False) -> Block:
    """
    Translate a command stream into a Block, descending into loop bodies.

    A ']' outside any loop raises ValueError. Running out of input inside a
    loop closes it implicitly unless strict is set.
    """
    return _build(iter(cmds), in_loop, strict)


def _build(it: Iterator[Command], in_loop: bool, strict: bool) -> Block:
    children = []
    for command in it:
        if command is Command.LOOP_BEGIN:
            children.append(Jump(_build(it, True, strict)))
        elif command is Command.LOOP_END:
            if not in_loop:
                raise ValueError("Unmatched ']'")
            return Block(tuple(children))
        else:
            children.append(_SIMPLE[command])

    if in_loop and strict:
        raise ValueError("Unmatched '['")
    return Block(tuple(children))


# ---------------- Serialization ----------------
def to_data(node: Node) -> Any:
    """JSON-compatible, externally tagged form of a tree."""
    if isinstance(node, MovePointer):
        return {"move_pointer": node.delta}
    if isinstance(node, AddValue):
        return {"add_value": node.delta}
    if isinstance(node, SetValue):
        return {"set_value": node.value}
    if isinstance(node, Print):
        return "print"
    if isinstance(node, Read):
        return "read"
    if isinstance(node, Block):
        return {"list": [to_data(c) for c in node.children]}
    if isinstance(node, Jump):
        return {"jump": to_data(node.body)}
    if isinstance(node, AddTo):
        return {"add_to": node.offset}
    raise TypeError(f"Not a tree node: {node!r}")


def dumps(node: Node, indent: int = 2) -> str:
    return json.dumps(to_data(node), indent=indent)


def count_nodes(node: Node) -> int:
    if isinstance(node, Block):
        return 1 + sum(count_nodes(c) for c in node.children)
    if isinstance(node, Jump):
        return 1 + count_nodes(node.body)
    return 1
