import logging
import random
from typing import Iterable, List, Tuple

from tile_maze.core.errors import NoValidBoundaryCell
from tile_maze.core.grid import CellState, Coordinate, TileGrid

logger = logging.getLogger(__name__)


def is_adjacent_to_floor(grid: TileGrid, x: int, y: int) -> bool:
    for nx, ny in grid.neighbors(x, y):
        if grid.cells[ny * grid.width + nx] == CellState.FLOOR:
            return True
    return False


def valid_boundary_cells(grid: TileGrid, cells: Iterable[Coordinate]) -> List[Coordinate]:
    """Keeps the cells that open directly onto a floor cell, in order."""
    return [c for c in cells if is_adjacent_to_floor(grid, c.x, c.y)]


def _pick(grid: TileGrid, candidates: List[Coordinate], rng: random.Random, role: str) -> Coordinate:
    valid = valid_boundary_cells(grid, candidates)
    if not valid:
        raise NoValidBoundaryCell(role, grid.width, grid.height)
    logger.debug("%d valid %s candidates", len(valid), role)
    return rng.choice(valid)


def place_start_and_exit(grid: TileGrid, rng: random.Random) -> Tuple[Coordinate, Coordinate]:
    """
    Picks the start and exit among the outer wall cells and marks them.
    Both are guaranteed to touch a floor cell and to be distinct.
    """
    # Both corner rooms are floor so each end of the maze has an opening nearby
    grid.set(1, 1, CellState.FLOOR)
    grid.set(grid.width - 2, grid.height - 2, CellState.FLOOR)

    candidates = grid.border_cells()

    start = _pick(grid, candidates, rng, "start")
    candidates = [c for c in candidates if c != start]
    grid.set(start.x, start.y, CellState.START)

    exit_ = _pick(grid, candidates, rng, "exit")
    grid.set(exit_.x, exit_.y, CellState.EXIT)

    return start, exit_
