import unittest
import sys
import os

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tile_maze.algo.backtracker import MazeResult, generate
from tile_maze.core.analysis import calculate_stats, check_invariants, is_perfect, solve
from tile_maze.core.grid import CellState
from tile_maze.io.serializer import MazeSerializer


class TestAnalysis(unittest.TestCase):
    def test_cycle_is_not_perfect(self):
        # Ring of floor around a pillar
        result = MazeSerializer.from_text(
            "#S###\n"
            "#...#\n"
            "#.#.#\n"
            "#...#\n"
            "###E#"
        )
        self.assertFalse(is_perfect(result.grid))
        self.assertIn("floor cells do not form a spanning tree", check_invariants(result))

    def test_disconnected_is_not_perfect(self):
        result = MazeSerializer.from_text(
            "#S###\n"
            "#.#.#\n"
            "#####\n"
            "#...#\n"
            "###E#"
        )
        self.assertFalse(is_perfect(result.grid))

    def test_generated_is_perfect(self):
        result = generate(41, 23, seed=77)
        self.assertTrue(is_perfect(result.grid))

    def test_border_violation_reported(self):
        result = generate(9, 9, seed=2)
        grid = result.grid.copy()
        corner = grid.border_cells()[0]
        grid.set(corner.x, corner.y, CellState.FLOOR)
        problems = check_invariants(MazeResult(grid, result.start, result.exit))
        self.assertTrue(any("border cell" in p for p in problems))

    def test_solve(self):
        result = generate(21, 21, seed=10)
        path = solve(result.grid, result.start, result.exit)
        self.assertEqual(path[0], result.start)
        self.assertEqual(path[-1], result.exit)
        for (ax, ay), (bx, by) in zip(path, path[1:]):
            self.assertEqual(abs(ax - bx) + abs(ay - by), 1)
        for c in path[1:-1]:
            self.assertEqual(result.grid[c], CellState.FLOOR)

    def test_solve_unreachable(self):
        result = MazeSerializer.from_text(
            "#S###\n"
            "#.#.#\n"
            "#####\n"
            "#...#\n"
            "###E#"
        )
        self.assertEqual(solve(result.grid, result.start, result.exit), [])

    def test_stats(self):
        result = generate(31, 31, seed=42)
        stats = calculate_stats(result.grid)
        self.assertEqual(stats["floor"], result.grid.count(CellState.FLOOR))
        self.assertEqual(stats["dead_ends"] + stats["corridors"] + stats["junctions"], stats["floor"])
        self.assertGreater(stats["dead_ends"], 0)
        self.assertEqual(stats["walls"] + stats["floor"] + 2, 31 * 31)


if __name__ == '__main__':
    unittest.main()
