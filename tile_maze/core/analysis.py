from collections import deque
from typing import Dict, List, Optional, Tuple

from tile_maze.core.grid import CellState, Coordinate, TileGrid

FLOOR = int(CellState.FLOOR)
OPEN = (int(CellState.FLOOR), int(CellState.START), int(CellState.EXIT))


def _floor_degree(grid: TileGrid, x: int, y: int) -> int:
    c = 0
    for nx, ny in grid.neighbors(x, y):
        if grid.cells[ny * grid.width + nx] == FLOOR:
            c += 1
    return c


def is_perfect(grid: TileGrid) -> bool:
    """
    True when the floor cells form a tree: a flood fill from (1, 1) reaches
    every floor cell and there is exactly one fewer adjacent floor pair
    than floor cells.
    """
    floor_count = grid.count(CellState.FLOOR)
    if floor_count == 0 or grid.get(1, 1) != CellState.FLOOR:
        return False

    # Count right/down pairs only so each edge is seen once
    edges = 0
    w = grid.width
    for y in range(grid.height):
        for x in range(w):
            if grid.cells[y * w + x] != FLOOR:
                continue
            if x + 1 < w and grid.cells[y * w + x + 1] == FLOOR:
                edges += 1
            if y + 1 < grid.height and grid.cells[(y + 1) * w + x] == FLOOR:
                edges += 1
    if edges != floor_count - 1:
        return False

    seen = {(1, 1)}
    queue = deque([(1, 1)])
    while queue:
        cx, cy = queue.popleft()
        for n in grid.neighbors(cx, cy):
            if n not in seen and grid.cells[n.y * w + n.x] == FLOOR:
                seen.add(n)
                queue.append(n)
    return len(seen) == floor_count


def check_invariants(result) -> List[str]:
    """
    Returns a message per violated maze invariant; an empty list means the
    result is a well-formed perfect maze.
    """
    grid, start, exit_ = result.grid, result.start, result.exit
    problems = []

    if grid.width % 2 == 0 or grid.height % 2 == 0 or grid.width < 3 or grid.height < 3:
        problems.append(f"bad dimensions {grid.width}x{grid.height}")
        return problems

    if grid.count(CellState.UNCARVED):
        problems.append(f"{grid.count(CellState.UNCARVED)} uncarved cells left")
    if grid.count(CellState.START) != 1:
        problems.append(f"expected one start cell, found {grid.count(CellState.START)}")
    if grid.count(CellState.EXIT) != 1:
        problems.append(f"expected one exit cell, found {grid.count(CellState.EXIT)}")

    for c in grid.border_cells():
        state = grid.get(c.x, c.y)
        if c == start:
            if state != CellState.START:
                problems.append(f"start {tuple(c)} is {state.name}")
        elif c == exit_:
            if state != CellState.EXIT:
                problems.append(f"exit {tuple(c)} is {state.name}")
        elif state != CellState.WALL:
            problems.append(f"border cell {tuple(c)} is {state.name}")

    for y in range(1, grid.height - 1):
        for x in range(1, grid.width - 1):
            if (x % 2 == 0 and y % 2 == 0) and grid.get(x, y) != CellState.WALL:
                problems.append(f"pillar {x, y} is {grid.get(x, y).name}")

    if start == exit_:
        problems.append("start and exit coincide")
    for name, c in (("start", start), ("exit", exit_)):
        if not grid.is_border(c.x, c.y):
            problems.append(f"{name} {tuple(c)} is not on the border")
        elif _floor_degree(grid, c.x, c.y) == 0:
            problems.append(f"{name} {tuple(c)} does not touch a floor cell")

    if not is_perfect(grid):
        problems.append("floor cells do not form a spanning tree")
    return problems


def solve(grid: TileGrid, start: Tuple[int, int], end: Tuple[int, int]) -> List[Coordinate]:
    """
    Shortest path from start to end through open cells, both ends included.
    Returns [] when end is unreachable.
    """
    start, end = Coordinate(*start), Coordinate(*end)
    parents: Dict[Coordinate, Optional[Coordinate]] = {start: None}
    queue = deque([start])

    while queue:
        current = queue.popleft()
        if current == end:
            break
        for n in grid.neighbors(current.x, current.y):
            if n not in parents and grid.cells[n.y * grid.width + n.x] in OPEN:
                parents[n] = current
                queue.append(n)

    if end not in parents:
        return []

    path = []
    node = end
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def calculate_stats(grid: TileGrid) -> Dict[str, float]:
    dead_ends = 0
    corridors = 0
    junctions = 0

    floor = 0
    for idx, cell in enumerate(grid.cells):
        if cell != FLOOR:
            continue
        floor += 1
        degree = _floor_degree(grid, idx % grid.width, idx // grid.width)
        if degree <= 1: dead_ends += 1
        elif degree == 2: corridors += 1
        else: junctions += 1

    return {
        "floor": floor,
        "walls": grid.count(CellState.WALL),
        "dead_ends": dead_ends,
        "corridors": corridors,
        "junctions": junctions,
        "dead_end_percent": (dead_ends / floor) * 100 if floor > 0 else 0,
    }
