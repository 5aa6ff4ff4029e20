from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO, Dict, Optional

import numpy as np

from .errors import BFIOError, BFStepLimitError
from .tree import CELL_SIZE, AddTo, AddValue, Block, Jump, MovePointer, Node, Print, Read, SetValue


@dataclass
class TapeState:
    cells: Dict[int, int] = field(default_factory=dict)  # address -> byte, missing means 0
    pointer: int = 0
    steps: int = 0

    def reset(self) -> None:
        self.cells.clear()
        self.pointer = 0
        self.steps = 0


class Engine:
    """
    Tree-walking interpreter over an unbounded sparse tape.

    reader must provide read(n) -> bytes and writer write(bytes)/flush();
    every printed byte is flushed before the next node runs.
    """

    def __init__(self, reader: BinaryIO, writer: BinaryIO, *, max_steps: Optional[int] = None):
        self.state = TapeState()
        self.reader = reader
        self.writer = writer
        self.max_steps = max_steps

    # ===== Tape primitives =====

    def move(self, delta: int) -> None:
        self.state.pointer += delta

    def get(self) -> int:
        return self.state.cells.get(self.state.pointer, 0)

    def get_rel(self, offset: int) -> int:
        return self.state.cells.get(self.state.pointer + offset, 0)

    def set(self, value: int) -> None:
        self.state.cells[self.state.pointer] = value

    def set_rel(self, offset: int, value: int) -> None:
        self.state.cells[self.state.pointer + offset] = value

    # ===== I/O =====

    def write(self, value: int) -> None:
        try:
            self.writer.write(bytes((value,)))
            self.writer.flush()
        except OSError as e:
            raise BFIOError(message=f"IOError: write failed: {e}") from e

    def read(self) -> int:
        try:
            data = self.reader.read(1)
        except OSError as e:
            raise BFIOError(message=f"IOError: read failed: {e}") from e
        if not data:
            raise BFIOError(message="IOError: unexpected end of input")
        return data[0]

    # ===== Evaluation =====

    def _tick(self) -> None:
        self.state.steps += 1
        if self.max_steps is not None and self.state.steps > self.max_steps:
            raise BFStepLimitError(
                message=f"StepLimitError: exceeded {self.max_steps} steps",
                steps=self.state.steps,
            )

    def execute(self, node: Node) -> None:
        self._tick()
        if isinstance(node, MovePointer):
            self.move(node.delta)
        elif isinstance(node, AddValue):
            self.set((self.get() + node.delta) % CELL_SIZE)
        elif isinstance(node, SetValue):
            self.set(node.value)
        elif isinstance(node, Print):
            self.write(self.get())
        elif isinstance(node, Read):
            self.set(self.read())
        elif isinstance(node, Block):
            for child in node.children:
                self.execute(child)
        elif isinstance(node, Jump):
            while self.get() != 0:
                self._tick()
                self.execute(node.body)
        elif isinstance(node, AddTo):
            self.set_rel(node.offset, (self.get_rel(node.offset) + self.get()) % CELL_SIZE)
        else:
            raise TypeError(f"Not a tree node: {node!r}")

    def snapshot(self, start: int = 0, stop: Optional[int] = None) -> np.ndarray:
        """Materialize tape cells [start, stop) as a uint8 array."""
        if stop is None:
            stop = start + 1
        window = np.zeros(max(0, stop - start), dtype=np.uint8)
        for addr, value in self.state.cells.items():
            if start <= addr < stop:
                window[addr - start] = value
        return window
