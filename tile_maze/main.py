import argparse
import logging
import os
import sys

# Ensure project root is in path so we can import 'tile_maze' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from tile_maze.core.errors import MazeError

logger = logging.getLogger("tile_maze")


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Tile Maze: perfect maze generator")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    gen_parser = subparsers.add_parser("generate", help="Generate a new maze")
    gen_parser.add_argument("--width", type=int, default=21, help="Maze width (even values are rounded up)")
    gen_parser.add_argument("--height", type=int, default=21, help="Maze height (even values are rounded up)")
    gen_parser.add_argument("--seed", type=int, default=None, help="Random seed")
    gen_parser.add_argument("--strict", action="store_true", help="Reject sizes below 3 instead of clamping")
    gen_parser.add_argument("--out", type=str, help="Output .maze file")
    gen_parser.add_argument("--compress", action="store_true", help="zlib-compress the saved cells")
    gen_parser.add_argument("--seed-only", action="store_true", help="Save only the seed and size")
    gen_parser.add_argument("--text", action="store_true", help="Print the maze as text")
    gen_parser.add_argument("--record-events", type=str, help="Save carve steps to a binary event log")
    gen_parser.add_argument("--visual", action="store_true", help="Show the maze being carved")
    gen_parser.add_argument("--delay", type=float, default=0.02, help="Seconds per replayed step")
    gen_parser.add_argument("--instant", action="store_true", help="Skip the carve animation")

    show_parser = subparsers.add_parser("show", help="Show a saved maze")
    show_parser.add_argument("input_file", help="Path to .maze file")
    show_parser.add_argument("--text", action="store_true", help="Print as text instead of opening a window")

    replay_parser = subparsers.add_parser("replay", help="Replay an event log")
    replay_parser.add_argument("event_file", help="Path to event log file")
    replay_parser.add_argument("--delay", type=float, default=0.02, help="Seconds per replayed step")

    stats_parser = subparsers.add_parser("stats", help="Verify a saved maze and print statistics")
    stats_parser.add_argument("input_file", help="Path to .maze file")
    return parser


def cmd_generate(args) -> int:
    from tile_maze.algo.backtracker import MazeGenerator
    from tile_maze.core.events import EventFanout, EventWriter, StepRecorder

    generator = MazeGenerator(strict=args.strict)
    logger.info(f"Generating {args.width}x{args.height} maze...")

    recorder = StepRecorder() if args.visual else None
    evt_writer = None
    if args.record_events:
        evt_writer = EventWriter(args.record_events)
        logger.info(f"Recording events to {args.record_events}...")

    sink = None
    if evt_writer is not None or recorder is not None:
        sink = EventFanout(evt_writer, recorder)
    try:
        result = generator.generate(args.width, args.height, seed=args.seed, event_writer=sink)
    finally:
        if sink is not None:
            sink.close()

    if args.out:
        from tile_maze.io.serializer import MazeSerializer
        logger.info(f"Saving maze to {args.out}...")
        MazeSerializer.save(result, args.out, meta={"algo": "backtracker"},
                            seed_only=args.seed_only, compress=args.compress)
        logger.info("Save complete.")

    if args.text:
        from tile_maze.io.serializer import MazeSerializer
        print(MazeSerializer.to_text(result))

    if args.visual:
        from tile_maze.viz.renderer import Renderer
        from tile_maze.viz.replay import EventAdapter
        adapter = EventAdapter.blank(recorder.width, recorder.height, recorder)
        renderer = Renderer(adapter.grid, replay=adapter, delay=args.delay, instant=args.instant)
        renderer.init_window()
        renderer.run_loop()
    return 0


def cmd_show(args) -> int:
    from tile_maze.io.serializer import MazeSerializer
    result, meta = MazeSerializer.load(args.input_file)
    logger.info(f"Loaded {result.width}x{result.height} maze. Meta: {meta}")

    if args.text:
        print(MazeSerializer.to_text(result))
    else:
        from tile_maze.viz.renderer import Renderer
        renderer = Renderer(result.grid)
        renderer.init_window()
        renderer.run_loop()
    return 0


def cmd_replay(args) -> int:
    from tile_maze.core.events import EventReader
    from tile_maze.viz.renderer import Renderer
    from tile_maze.viz.replay import EventAdapter

    with EventReader(args.event_file) as reader:
        w, h = reader.read_header()
        logger.info(f"Log Header: {w}x{h}")
        adapter = EventAdapter.blank(w, h, reader.stream_events())
        renderer = Renderer(adapter.grid, replay=adapter, delay=args.delay)
        renderer.init_window()
        renderer.run_loop()
    return 0


def cmd_stats(args) -> int:
    from tile_maze.core.analysis import calculate_stats, check_invariants, solve
    from tile_maze.io.serializer import MazeSerializer

    result, _ = MazeSerializer.load(args.input_file)
    problems = check_invariants(result)
    for p in problems:
        logger.warning(p)

    stats = calculate_stats(result.grid)
    path = solve(result.grid, result.start, result.exit)
    print(f"Size: {result.width}x{result.height}  Start: {tuple(result.start)}  Exit: {tuple(result.exit)}")
    for key, value in stats.items():
        print(f"{key:<18} {value:.2f}" if isinstance(value, float) else f"{key:<18} {value}")
    print(f"{'solution_length':<18} {len(path)}")
    print("Perfect maze" if not problems else f"{len(problems)} problem(s) found")
    return 0 if not problems else 2


COMMANDS = {
    "generate": cmd_generate,
    "show": cmd_show,
    "replay": cmd_replay,
    "stats": cmd_stats,
}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")
    try:
        return COMMANDS[args.command](args)
    except MazeError as e:
        logger.error(str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
