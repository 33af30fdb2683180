import sys
import os
import time

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tile_maze.algo.backtracker import MazeGenerator
from tile_maze.core.analysis import calculate_stats, is_perfect


def benchmark_size(width: int, height: int, verify: bool = True):
    print(f"\n--- Benchmarking {width}x{height} ({width*height/1e6:.2f}M cells) ---")
    generator = MazeGenerator()

    gen_start = time.time()
    result = generator.generate(width, height, seed=42)
    gen_time = time.time() - gen_start

    cells = result.width * result.height
    print(f"Generation Time: {gen_time:.4f}s")
    print(f"Speed: {cells / gen_time:,.0f} cells/sec")
    print(f"Start: {tuple(result.start)}  Exit: {tuple(result.exit)}")

    if verify:
        t0 = time.time()
        perfect = is_perfect(result.grid)
        stats = calculate_stats(result.grid)
        print(f"Verify: {'perfect' if perfect else 'BROKEN'} in {time.time() - t0:.4f}s")
        print(f"Dead ends: {stats['dead_ends']} ({stats['dead_end_percent']:.1f}% of floor)")


def run_suite():
    sizes = [
        (101, 101),
        (501, 501),
        (1001, 1001),   # 1M
        (2001, 2001),   # 4M, verification alone takes a while
    ]

    for w, h in sizes:
        benchmark_size(w, h, verify=w * h <= 1_100_000)


if __name__ == "__main__":
    run_suite()
