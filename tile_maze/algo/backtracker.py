import logging
import random
from dataclasses import dataclass
from typing import Iterator, List, Optional

from tile_maze.algo.base import Generator
from tile_maze.algo.placement import place_start_and_exit
from tile_maze.core.events import (
    EVT_BACKTRACK, EVT_CARVE, EVT_EXIT, EVT_START, EVT_VISIT, StepEvent, log_event,
)
from tile_maze.core.grid import CellState, Coordinate, TileGrid

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MazeResult:
    grid: TileGrid
    start: Coordinate
    exit: Coordinate
    seed: Optional[int] = None

    @property
    def width(self) -> int:
        return self.grid.width

    @property
    def height(self) -> int:
        return self.grid.height


class MazeGenerator(Generator):
    """
    Randomized depth-first backtracker over the odd/odd lattice.

    Rooms sit at odd coordinates; the even cells between two rooms are the
    walls that get opened when the carver moves from one room to the next.
    """

    # Distance-2 moves to neighboring rooms (W, E, N, S)
    MOVES = ((-2, 0), (2, 0), (0, -2), (0, 2))

    def init_grid(self, width: int, height: int) -> TileGrid:
        grid = TileGrid(width, height, fill=CellState.WALL)
        for y in range(1, height - 1, 2):
            for x in range(1, width - 1, 2):
                grid.cells[y * width + x] = CellState.UNCARVED
        return grid

    def unvisited_neighbors(self, grid: TileGrid, x: int, y: int) -> List[Coordinate]:
        found = []
        for dx, dy in self.MOVES:
            nx, ny = x + dx, y + dy
            if 1 <= nx <= grid.width - 2 and 1 <= ny <= grid.height - 2:
                if grid.cells[ny * grid.width + nx] == CellState.UNCARVED:
                    found.append(Coordinate(nx, ny))
        return found

    def carve(self, grid: TileGrid, rng: random.Random) -> Iterator[StepEvent]:
        start = Coordinate(1, 1)
        grid.set(start.x, start.y, CellState.FLOOR)
        yield StepEvent(EVT_VISIT, start.x, start.y)

        stack: List[Coordinate] = [start]

        while stack:
            cx, cy = stack[-1]
            neighbors = self.unvisited_neighbors(grid, cx, cy)

            if neighbors:
                nx, ny = rng.choice(neighbors)

                # Open the wall halfway between the two rooms
                wx, wy = (cx + nx) // 2, (cy + ny) // 2
                grid.set(wx, wy, CellState.FLOOR)
                yield StepEvent(EVT_CARVE, wx, wy)

                grid.set(nx, ny, CellState.FLOOR)
                yield StepEvent(EVT_VISIT, nx, ny)

                stack.append(Coordinate(nx, ny))
            else:
                stack.pop()
                yield StepEvent(EVT_BACKTRACK, cx, cy)

    def run(self, width: int, height: int, rng: random.Random) -> Iterator[StepEvent]:
        """
        Builds a maze into a fresh grid, yielding every step. The finished
        grid is returned as the generator's return value.
        """
        grid = self.init_grid(width, height)
        logger.debug("Initialized %dx%d grid", width, height)

        yield from self.carve(grid, rng)
        logger.debug("Carving done: %d floor cells", grid.count(CellState.FLOOR))

        start, exit_ = place_start_and_exit(grid, rng)
        yield StepEvent(EVT_START, start.x, start.y)
        yield StepEvent(EVT_EXIT, exit_.x, exit_.y)

        return grid.freeze(), start, exit_

    def generate(self, width: int, height: int, seed: Optional[int] = None,
                 event_writer=None, rng: Optional[random.Random] = None) -> MazeResult:
        w, h = self.normalize_dimensions(width, height)
        rng, seed = self.make_rng(seed, rng)

        if event_writer is not None:
            event_writer.write_header(w, h)

        steps = self.run(w, h, rng)
        while True:
            try:
                event = next(steps)
            except StopIteration as done:
                grid, start, exit_ = done.value
                break
            if event_writer is not None:
                log_event(event_writer, event)

        logger.info("Maze generation finished: %dx%d, seed=%s, start=%s, exit=%s",
                    w, h, seed, tuple(start), tuple(exit_))
        return MazeResult(grid, start, exit_, seed)

    def steps(self, width: int, height: int, seed: Optional[int] = None,
              rng: Optional[random.Random] = None) -> Iterator[StepEvent]:
        """
        Instrumented variant of generate(): yields each visit, carve,
        backtrack and placement event in order.
        """
        w, h = self.normalize_dimensions(width, height)
        rng, _ = self.make_rng(seed, rng)
        yield from self.run(w, h, rng)


_default = MazeGenerator()


def generate(width: int, height: int, seed: Optional[int] = None, event_writer=None) -> MazeResult:
    return _default.generate(width, height, seed=seed, event_writer=event_writer)
