from array import array
from enum import IntEnum
from typing import Iterator, List, NamedTuple, Tuple

import numpy as np

from tile_maze.core.errors import GridFrozenError


class CellState(IntEnum):
    WALL = 0
    FLOOR = 1
    START = 2
    EXIT = 3
    # Odd/odd interior cell that the carver has not reached yet
    UNCARVED = 4


class Coordinate(NamedTuple):
    x: int
    y: int


class TileGrid:
    """
    Row-major tile grid, one byte per cell.
    Cells hold a CellState value; the grid is mutable until freeze() is called.
    """

    # 4-neighborhood offsets (W, E, N, S)
    OFFSETS = ((-1, 0), (1, 0), (0, -1), (0, 1))

    __slots__ = ('width', 'height', 'cells', '_frozen')

    def __init__(self, width: int, height: int, fill: CellState = CellState.WALL):
        self.width = width
        self.height = height
        self.cells = array('B', [int(fill)] * (width * height))
        self._frozen = False

    def get_index(self, x: int, y: int) -> int:
        if 0 <= x < self.width and 0 <= y < self.height:
            return y * self.width + x
        raise IndexError(f"Coordinate ({x}, {y}) out of bounds")

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def is_border(self, x: int, y: int) -> bool:
        return x == 0 or y == 0 or x == self.width - 1 or y == self.height - 1

    def get(self, x: int, y: int) -> CellState:
        return CellState(self.cells[self.get_index(x, y)])

    def set(self, x: int, y: int, state: CellState):
        if self._frozen:
            raise GridFrozenError(f"Cannot set ({x}, {y}): grid is read-only")
        self.cells[self.get_index(x, y)] = int(state)

    def __getitem__(self, coord: Tuple[int, int]) -> CellState:
        x, y = coord
        return self.get(x, y)

    def __eq__(self, other) -> bool:
        if not isinstance(other, TileGrid):
            return NotImplemented
        return (self.width, self.height) == (other.width, other.height) and self.cells == other.cells

    def __repr__(self) -> str:
        return f"TileGrid({self.width}x{self.height}{', frozen' if self._frozen else ''})"

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> "TileGrid":
        self._frozen = True
        return self

    def copy(self) -> "TileGrid":
        """Returns a mutable copy that shares nothing with this grid."""
        clone = TileGrid.__new__(TileGrid)
        clone.width = self.width
        clone.height = self.height
        clone.cells = array('B', self.cells)
        clone._frozen = False
        return clone

    def neighbors(self, x: int, y: int) -> Iterator[Coordinate]:
        """Yields the in-bounds 4-neighbors of (x, y)."""
        for dx, dy in self.OFFSETS:
            nx, ny = x + dx, y + dy
            if 0 <= nx < self.width and 0 <= ny < self.height:
                yield Coordinate(nx, ny)

    def border_cells(self) -> List[Coordinate]:
        """
        Every cell of the outer ring exactly once, walking clockwise from (0, 0).
        """
        w, h = self.width, self.height
        ring = [Coordinate(x, 0) for x in range(w)]
        ring += [Coordinate(w - 1, y) for y in range(1, h)]
        if h > 1:
            ring += [Coordinate(x, h - 1) for x in range(w - 2, -1, -1)]
        if w > 1:
            ring += [Coordinate(0, y) for y in range(h - 2, 0, -1)]
        return ring

    def count(self, state: CellState) -> int:
        return self.cells.count(int(state))

    def coords_of(self, state: CellState) -> Iterator[Coordinate]:
        value = int(state)
        for idx, cell in enumerate(self.cells):
            if cell == value:
                yield Coordinate(idx % self.width, idx // self.width)

    def to_numpy(self) -> np.ndarray:
        # Copy so callers never alias the grid buffer
        return np.frombuffer(self.cells.tobytes(), dtype=np.uint8).reshape(self.height, self.width).copy()
