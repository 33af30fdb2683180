import unittest
import sys
import os

# Add project root to path so we can import tile_maze
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import numpy as np

from tile_maze.core.errors import GridFrozenError
from tile_maze.core.grid import CellState, Coordinate, TileGrid


class TestGrid(unittest.TestCase):
    def test_initialization(self):
        w, h = 7, 5
        grid = TileGrid(w, h)
        self.assertEqual(len(grid.cells), w * h)
        self.assertEqual(grid.count(CellState.WALL), w * h)

    def test_coordinates(self):
        grid = TileGrid(5, 5)
        self.assertEqual(grid.get_index(2, 2), 12)  # 2 * 5 + 2

        with self.assertRaises(IndexError):
            grid.get_index(-1, 0)
        with self.assertRaises(IndexError):
            grid.get_index(0, 5)

    def test_get_set(self):
        grid = TileGrid(3, 3)
        grid.set(1, 1, CellState.FLOOR)
        self.assertEqual(grid.get(1, 1), CellState.FLOOR)
        self.assertEqual(grid[1, 1], CellState.FLOOR)
        self.assertEqual(grid[Coordinate(1, 1)], CellState.FLOOR)
        self.assertIsInstance(grid.get(0, 0), CellState)

    def test_coordinate_value_semantics(self):
        self.assertEqual(Coordinate(1, 2), (1, 2))
        self.assertEqual(hash(Coordinate(1, 2)), hash((1, 2)))
        self.assertEqual(len({Coordinate(1, 2), Coordinate(1, 2)}), 1)

    def test_border_cells(self):
        grid = TileGrid(5, 3)
        ring = grid.border_cells()
        self.assertEqual(len(ring), 2 * 5 + 2 * 3 - 4)
        self.assertEqual(len(set(ring)), len(ring))
        self.assertEqual(ring[0], (0, 0))
        for x, y in ring:
            self.assertTrue(grid.is_border(x, y))
        self.assertFalse(grid.is_border(1, 1))

    def test_neighbors(self):
        grid = TileGrid(3, 3)
        self.assertEqual(len(list(grid.neighbors(1, 1))), 4)

        corner = list(grid.neighbors(0, 0))
        self.assertEqual(len(corner), 2)
        self.assertIn((1, 0), corner)
        self.assertIn((0, 1), corner)

    def test_freeze(self):
        grid = TileGrid(3, 3).freeze()
        self.assertTrue(grid.frozen)
        with self.assertRaises(GridFrozenError):
            grid.set(1, 1, CellState.FLOOR)

    def test_copy_is_independent(self):
        grid = TileGrid(3, 3).freeze()
        clone = grid.copy()
        self.assertFalse(clone.frozen)
        self.assertEqual(grid, clone)

        clone.set(1, 1, CellState.FLOOR)
        self.assertEqual(grid.get(1, 1), CellState.WALL)
        self.assertNotEqual(grid, clone)

    def test_to_numpy(self):
        grid = TileGrid(5, 3)
        grid.set(3, 1, CellState.FLOOR)
        arr = grid.to_numpy()
        self.assertEqual(arr.shape, (3, 5))
        self.assertEqual(arr.dtype, np.uint8)
        self.assertEqual(arr[1, 3], CellState.FLOOR)

        arr[0, 0] = CellState.EXIT
        self.assertEqual(grid.get(0, 0), CellState.WALL)


if __name__ == '__main__':
    unittest.main()
