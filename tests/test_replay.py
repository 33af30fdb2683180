import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tile_maze.algo.backtracker import MazeGenerator
from tile_maze.core.events import StepRecorder
from tile_maze.core.grid import CellState, TileGrid
from tile_maze.viz.renderer import PALETTE, grid_to_rgb
from tile_maze.viz.replay import EventAdapter


class TestReplay(unittest.TestCase):
    def test_replay_rebuilds_grid(self):
        recorder = StepRecorder()
        result = MazeGenerator().generate(17, 13, seed=31, event_writer=recorder)

        adapter = EventAdapter.blank(recorder.width, recorder.height, recorder, batch=10)
        statuses = list(adapter.run())

        self.assertEqual(statuses[-1], "Done")
        self.assertEqual(adapter.applied, len(recorder))
        self.assertEqual(adapter.grid, result.grid)
        self.assertEqual((adapter.start, adapter.exit), (result.start, result.exit))
        self.assertIsNone(adapter.head)

    def test_replay_is_incremental(self):
        events = list(MazeGenerator().steps(9, 9, seed=3))
        adapter = EventAdapter.blank(9, 9, events)
        steps = adapter.run()

        next(steps)
        self.assertEqual(adapter.applied, 1)
        self.assertEqual(adapter.grid.count(CellState.FLOOR), 1)
        self.assertEqual(adapter.head, (1, 1))


class TestRendererColors(unittest.TestCase):
    def test_grid_to_rgb(self):
        grid = TileGrid(4, 3)
        grid.set(2, 1, CellState.FLOOR)
        grid.set(3, 0, CellState.EXIT)
        rgb = grid_to_rgb(grid)

        # Surfarray order: (x, y, channel)
        self.assertEqual(rgb.shape, (4, 3, 3))
        self.assertEqual(tuple(rgb[2, 1]), tuple(PALETTE[CellState.FLOOR]))
        self.assertEqual(tuple(rgb[3, 0]), tuple(PALETTE[CellState.EXIT]))
        self.assertEqual(tuple(rgb[0, 0]), tuple(PALETTE[CellState.WALL]))


if __name__ == '__main__':
    unittest.main()
