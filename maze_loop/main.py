import argparse
import sys
import os
import time
import logging

# Ensure project root is in path so we can import 'maze_loop' package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from maze_loop.core.config import MazeConfig
from maze_loop.core.errors import ConfigError
from maze_loop.core.scheduler import drive

def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Maze Loop: endless maze generation and solving")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Run Command (window)
    run_parser = subparsers.add_parser("run", help="Open a window and loop forever")
    run_parser.add_argument("--width", type=int, default=1280, help="Window width in pixels")
    run_parser.add_argument("--height", type=int, default=720, help="Window height in pixels")
    run_parser.add_argument("--difficulty", type=int, default=5, help="Difficulty (1-10)")
    run_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    run_parser.add_argument("--solve-delay", type=float, default=0.02, help="Seconds per solver step")
    run_parser.add_argument("--batch-size", type=int, default=20, help="Frontier walls per generation step")
    run_parser.add_argument("--record", action="store_true", help="Record video")

    # Headless Command
    headless_parser = subparsers.add_parser("headless", help="Run cycles without a window")
    headless_parser.add_argument("--rows", type=int, default=31, help="Grid rows (forced odd)")
    headless_parser.add_argument("--cols", type=int, default=51, help="Grid columns (forced odd)")
    headless_parser.add_argument("--cycles", type=int, default=5, help="Stop after this many solved mazes")
    headless_parser.add_argument("--difficulty", type=int, default=5, help="Difficulty (1-10)")
    headless_parser.add_argument("--seed", type=int, default=None, help="Random Seed")
    headless_parser.add_argument("--realtime", action="store_true", help="Honour animation delays")

    # Benchmark Command
    bench_parser = subparsers.add_parser("benchmark", help="Time generation and solving")
    bench_parser.add_argument("--size", type=int, default=301, help="Grid size (square, forced odd)")
    bench_parser.add_argument("--difficulty", type=int, default=5, help="Difficulty (1-10)")
    bench_parser.add_argument("--seed", type=int, default=123, help="Random Seed")

    return parser

def headless_ticks(orchestrator, cycles: int, logger):
    """Steps the orchestrator, logging each solved maze and stopping after 'cycles'."""
    last_reported = 0
    while True:
        tick = orchestrator.step()
        if tick is None:
            return
        yield tick

        if orchestrator.cycles_completed != last_reported:
            last_reported = orchestrator.cycles_completed
            solver = orchestrator.solver
            logger.info(f"Cycle {last_reported}: {orchestrator.start} -> {orchestrator.end}, "
                        f"path {len(solver.path)}, expanded {solver.visited_count}")
            if last_reported >= cycles:
                orchestrator.stop()

def run_headless(args, logger) -> int:
    from maze_loop.core.orchestrator import MazeOrchestrator
    from maze_loop.core.complexity import MazeAnalyzer

    config = MazeConfig(difficulty=args.difficulty, seed=args.seed)
    if not args.realtime:
        config = config.instant()

    orchestrator = MazeOrchestrator(args.rows, args.cols, config=config)
    logger.info(f"Headless run on {orchestrator.grid.rows}x{orchestrator.grid.cols}, {args.cycles} cycles...")
    orchestrator.start_cycle()

    ticks = drive(headless_ticks(orchestrator, args.cycles, logger), realtime=args.realtime)
    logger.debug(f"Consumed {ticks} ticks")

    stats = MazeAnalyzer.calculate_stats(orchestrator.grid)
    logger.info(f"Stats: {stats}")
    print(f"Done. Cycles: {orchestrator.cycles_completed}")
    return 0 if orchestrator.cycles_completed >= args.cycles else 1

def run_benchmark(args, logger) -> int:
    import random
    from maze_loop.core.grid import Grid
    from maze_loop.algo.prim import PrimsAlgorithm
    from maze_loop.algo.solvers import AStar
    from maze_loop.algo.endpoints import select_points, manhattan

    config = MazeConfig(difficulty=args.difficulty, seed=args.seed)
    rng = random.Random(args.seed)

    grid = Grid(args.size, args.size)
    logger.info(f"Generating {grid.rows}x{grid.cols} maze (Prim)...")
    t0 = time.time()
    PrimsAlgorithm(grid, rng=rng, batch_size=config.batch_size).run_all()
    gen_time = time.time() - t0
    logger.info(f"Generation complete in {gen_time:.4f}s")

    start, end = select_points(grid, rng, samples=config.point_samples)
    solver = AStar(grid)
    t0 = time.time()
    solver.run_all(start, end)
    solve_time = time.time() - t0

    print(f"\n{'STAGE':<12} | {'TIME (s)':<10} | {'DETAIL':<30}")
    print("-" * 58)
    print(f"{'Generate':<12} | {gen_time:<10.4f} | {grid.rows * grid.cols:,} cells")
    print(f"{'A*':<12} | {solve_time:<10.4f} | path {len(solver.path)}, expanded {solver.visited_count}, "
          f"manhattan {manhattan(start, end)}")
    return 0 if solver.found else 1

def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger("maze_loop")

    if args.command is None:
        parser.print_help()
        return 0

    logger.info(f"Running command: {args.command}")

    try:
        if args.command == "run":
            config = MazeConfig(
                difficulty=args.difficulty,
                seed=args.seed,
                solve_delay=args.solve_delay,
                batch_size=args.batch_size,
            )
            from maze_loop.viz.renderer import Renderer
            renderer = Renderer(config, width=args.width, height=args.height, record=args.record)
            if args.record:
                logger.info(f"Recording video to {renderer.recorder.output_file}")
            renderer.init_window()
            renderer.run_loop()
            return 0

        elif args.command == "headless":
            return run_headless(args, logger)

        elif args.command == "benchmark":
            return run_benchmark(args, logger)

    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2

    return 0

if __name__ == "__main__":
    sys.exit(main())
