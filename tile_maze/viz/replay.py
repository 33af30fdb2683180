from typing import Iterable, Iterator, Optional

from tile_maze.core.events import (
    EVT_BACKTRACK, EVT_CARVE, EVT_EXIT, EVT_START, EVT_VISIT, StepEvent,
)
from tile_maze.core.grid import CellState, Coordinate, TileGrid


class EventAdapter:
    """
    Replays a recorded step stream onto a grid for the renderer.
    Applies one batch of events per iteration of run().
    """
    def __init__(self, grid: TileGrid, events: Iterable[StepEvent], batch: int = 1):
        self.grid = grid
        self.events = events
        self.batch = max(1, batch)

        self.head: Optional[Coordinate] = None
        self.start: Optional[Coordinate] = None
        self.exit: Optional[Coordinate] = None
        self.applied = 0

    @classmethod
    def blank(cls, width: int, height: int, events: Iterable[StepEvent], batch: int = 1) -> "EventAdapter":
        """Starts from an all-wall grid of the recorded size."""
        return cls(TileGrid(width, height), events, batch)

    def apply(self, event: StepEvent):
        kind, x, y = event
        if kind in (EVT_VISIT, EVT_CARVE):
            self.grid.set(x, y, CellState.FLOOR)
            self.head = Coordinate(x, y)
        elif kind == EVT_BACKTRACK:
            self.head = Coordinate(x, y)
        elif kind == EVT_START:
            self.grid.set(x, y, CellState.START)
            self.start = Coordinate(x, y)
        elif kind == EVT_EXIT:
            self.grid.set(x, y, CellState.EXIT)
            self.exit = Coordinate(x, y)
        self.applied += 1

    def run(self) -> Iterator[str]:
        count = 0
        for event in self.events:
            self.apply(event)
            count += 1
            if count % self.batch == 0:
                yield "Replay"
        self.head = None
        yield "Done"
