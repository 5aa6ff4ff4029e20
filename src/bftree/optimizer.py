#
# Peephole / idiom optimizer over the instruction tree.
#
#   - drops zero moves and zero adds
#   - folds adjacent Add/Add, Move/Move, Set/Add and Set/Set pairs
#   - flattens nested blocks, unwraps singleton blocks
#   - rewrites clear loops ([-], [+]) and one/two target transfer loops
#
# One pass is not a fixed point: a loop rewritten into Set/AddTo nodes is only
# merged with its neighbours on the next pass. optimize_program() runs two
# passes by default, or iterates until the tree stops changing.
#
from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from .tree import CELL_SIZE, AddTo, AddValue, Block, Jump, MovePointer, Node, SetValue

DEFAULT_PASSES = 2
MAX_PASSES = 16
DEC = CELL_SIZE - 1


def _is_noop(node: Node) -> bool:
    return (isinstance(node, MovePointer) and node.delta == 0) or (isinstance(node, AddValue) and node.delta == 0)


# ---------------- Single node ----------------
def optimize(node: Node) -> Optional[Node]:
    """Optimize one node bottom-up. None means the node can be erased."""
    if _is_noop(node):
        return None
    if isinstance(node, Block):
        children = optimize_sequence(node.children)
        if not children:
            return None
        if len(children) == 1:
            return children[0]
        return Block(tuple(children))
    if isinstance(node, Jump):
        return optimize_jump(node.body)
    return node


# ---------------- Pair folding ----------------
def fold_pair(first: Node, second: Node) -> Optional[Node]:
    """Merge two adjacent nodes into one, or None if they do not commute into one."""
    if isinstance(first, AddValue) and isinstance(second, AddValue):
        return AddValue((first.delta + second.delta) % CELL_SIZE)
    if isinstance(first, MovePointer) and isinstance(second, MovePointer):
        return MovePointer(first.delta + second.delta)
    if isinstance(first, SetValue) and isinstance(second, AddValue):
        return SetValue((first.value + second.delta) % CELL_SIZE)
    if isinstance(first, SetValue) and isinstance(second, SetValue):
        return second
    return None


# ---------------- Sequences ----------------
def optimize_sequence(nodes: Iterable[Node]) -> List[Node]:
    """
    Fold a sequence left to right holding one pending node, optimizing each
    node as it is flushed, then splice child blocks into the result.
    """
    out: List[Node] = []
    holding: Optional[Node] = None

    for node in nodes:
        if holding is None:
            holding = node
            continue
        if _is_noop(node):
            continue
        merged = fold_pair(holding, node)
        if merged is not None:
            holding = optimize(merged)
            continue
        flushed = optimize(holding)
        if flushed is not None:
            out.append(flushed)
        holding = node

    if holding is not None:
        flushed = optimize(holding)
        if flushed is not None:
            out.append(flushed)

    compacted: List[Node] = []
    for node in out:
        if isinstance(node, Block):
            compacted.extend(node.children)
        else:
            compacted.append(node)
    return compacted


# ---------------- Loops ----------------
def _is_add(node: Node, delta: int) -> bool:
    return isinstance(node, AddValue) and node.delta == delta


def match_transfer_loop(body: Sequence[Node]) -> Optional[Block]:
    """
    Recognize [-<a>+<b>] with a == -b, and [-<a>+<b>+<s>] with a + b == -s,
    as transfers of the current cell into one or two other cells.
    """
    if len(body) == 4:
        dec, move_a, inc, move_b = body
        if (_is_add(dec, DEC) and _is_add(inc, 1)
                and isinstance(move_a, MovePointer) and isinstance(move_b, MovePointer)
                and move_a.delta == -move_b.delta):
            return Block((AddTo(move_a.delta), SetValue(0)))

    if len(body) == 6:
        dec, move_a, inc_a, move_b, inc_b, move_s = body
        if (_is_add(dec, DEC) and _is_add(inc_a, 1) and _is_add(inc_b, 1)
                and isinstance(move_a, MovePointer) and isinstance(move_b, MovePointer)
                and isinstance(move_s, MovePointer)
                and move_a.delta + move_b.delta == -move_s.delta):
            a, b = move_a.delta, move_b.delta
            return Block((AddTo(a), AddTo(a + b), SetValue(0)))

    return None


def optimize_jump(body: Node) -> Optional[Node]:
    inner = optimize(body)
    if inner is None:
        # a body with no effect either never runs or never ends
        return None
    if _is_add(inner, 1) or _is_add(inner, DEC):
        return SetValue(0)
    if isinstance(inner, Block):
        transfer = match_transfer_loop(inner.children)
        if transfer is not None:
            return transfer
    return Jump(inner)


# ---------------- Pass driver ----------------
def optimize_passes(tree: Node, passes: Optional[int] = DEFAULT_PASSES) -> Tuple[Node, int]:
    """
    Apply optimize() `passes` times, or until nothing changes when passes is
    None (at most MAX_PASSES). Returns the tree and the number of passes run.
    An erased program comes back as an empty Block.
    """
    limit = MAX_PASSES if passes is None else passes
    current: Node = tree
    ran = 0
    while ran < limit:
        result = optimize(current)
        ran += 1
        if result is None:
            result = Block()
        if passes is None and result == current:
            break
        current = result
    return current, ran


def optimize_program(tree: Node, passes: Optional[int] = DEFAULT_PASSES) -> Node:
    return optimize_passes(tree, passes)[0]


def optimize_to_fixed_point(tree: Node) -> Node:
    return optimize_passes(tree, None)[0]
