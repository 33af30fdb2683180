import unittest
import sys
import os
import random
from unittest import mock

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tile_maze.algo import placement
from tile_maze.algo.placement import is_adjacent_to_floor, place_start_and_exit, valid_boundary_cells
from tile_maze.core.errors import GridFrozenError, NoValidBoundaryCell
from tile_maze.core.grid import CellState, TileGrid


class TestPlacement(unittest.TestCase):
    def single_room(self):
        grid = TileGrid(3, 3)
        grid.set(1, 1, CellState.FLOOR)
        return grid

    def test_adjacency(self):
        grid = self.single_room()
        self.assertTrue(is_adjacent_to_floor(grid, 1, 0))
        self.assertTrue(is_adjacent_to_floor(grid, 0, 1))
        # Corners only touch other border cells
        self.assertFalse(is_adjacent_to_floor(grid, 0, 0))
        self.assertFalse(is_adjacent_to_floor(grid, 2, 2))

    def test_valid_boundary_cells(self):
        grid = self.single_room()
        valid = valid_boundary_cells(grid, grid.border_cells())
        self.assertEqual(sorted(valid), [(0, 1), (1, 0), (1, 2), (2, 1)])

    def test_place_marks_cells(self):
        grid = self.single_room()
        start, exit_ = place_start_and_exit(grid, random.Random(3))
        self.assertNotEqual(start, exit_)
        self.assertEqual(grid[start], CellState.START)
        self.assertEqual(grid[exit_], CellState.EXIT)
        self.assertEqual(grid.count(CellState.START), 1)
        self.assertEqual(grid.count(CellState.EXIT), 1)

    def test_corner_rooms_are_forced_open(self):
        # Only the two corner rooms get opened, giving candidates at both ends
        grid = TileGrid(7, 7)
        start, exit_ = place_start_and_exit(grid, random.Random(0))
        self.assertEqual(grid.get(1, 1), CellState.FLOOR)
        self.assertEqual(grid.get(5, 5), CellState.FLOOR)
        near = {(1, 0), (0, 1), (5, 6), (6, 5)}
        self.assertIn(start, near)
        self.assertIn(exit_, near)

    def test_frozen_grid_is_rejected(self):
        grid = self.single_room().freeze()
        with self.assertRaises(GridFrozenError):
            place_start_and_exit(grid, random.Random(0))

    def test_no_candidates(self):
        grid = self.single_room()
        real = placement.valid_boundary_cells
        calls = []

        def only_first(g, cells):
            calls.append(cells)
            return real(g, cells) if len(calls) == 1 else []

        with mock.patch.object(placement, "valid_boundary_cells", side_effect=only_first):
            with self.assertRaises(NoValidBoundaryCell) as ctx:
                place_start_and_exit(grid, random.Random(0))
        self.assertEqual(ctx.exception.role, "exit")
        self.assertEqual(len(calls), 2)


if __name__ == '__main__':
    unittest.main()
