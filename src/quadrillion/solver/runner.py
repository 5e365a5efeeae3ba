"""Solver runner: solve every board of a puzzle set and report the results."""

import sys
from dataclasses import dataclass
from pathlib import Path
from pprint import pprint
from time import perf_counter
from typing import TextIO

from sortedcontainers import SortedKeyList

from quadrillion.board import Board
from quadrillion.pieces import PieceCatalog
from quadrillion.puzzle_config import PuzzleConfig, validate_solution
from quadrillion.solver.config import config as solver_config
from quadrillion.solver.search import SearchAborted, SolveStats, solve

NANOSECONDS_PER_SECOND = 1_000_000_000


@dataclass
class BoardReport:
    """Outcome of solving one board."""

    board_idx: int
    """1-based index of the board in its file."""

    n_solutions: int | None
    """Number of solutions, or None if the search was aborted."""

    stats: SolveStats
    """Search counters."""

    elapsed_sec: float
    """Wall-clock time spent in the search."""


def run(puzzle_config: PuzzleConfig) -> list[BoardReport]:
    """Run the solver on every board of the puzzle set, logging to a file.

    Args:
        puzzle_config (PuzzleConfig): The pieces and boards to solve.
    """
    print(f"config: {puzzle_config}")

    logfile = Path(solver_config.log_dir) / f"{puzzle_config.name}.log"
    print(f"Log file: {logfile}")

    logfile.parent.mkdir(parents=True, exist_ok=True)

    with open(logfile, "w", encoding="utf-8") as logf:
        try:
            reports = solve_all(puzzle_config, logf=logf)
        except KeyboardInterrupt:
            print("Solver interrupted by user.", file=logf, flush=True)
            print("Solver interrupted by user.")
            sys.exit(1)
    print()
    return reports


def solve_all(puzzle_config: PuzzleConfig, *, logf: TextIO) -> list[BoardReport]:
    """Solve each board in turn, then log the totals.

    Args:
        puzzle_config (PuzzleConfig): The pieces and boards to solve.
        logf: File object to log the solving process.
    """
    print("Solver config:", file=logf, flush=True)
    pprint(solver_config.model_dump(), stream=logf, width=120)
    print(f"Puzzle set: {puzzle_config}", file=logf, flush=True)
    print("", file=logf, flush=True)

    n_boards = len(puzzle_config.boards)
    print(f"input boards: {n_boards}", file=logf, flush=True)
    print(f"input boards: {n_boards}")

    reports = [
        solve_one(board, puzzle_config.catalog, board_idx=board_idx, n_boards=n_boards, logf=logf)
        for board_idx, board in enumerate(puzzle_config.boards, start=1)
    ]

    total_nodes = sum(report.stats.nodes_expanded for report in reports)
    total_elapsed = sum(report.elapsed_sec for report in reports)
    print(f"total board states tested: {total_nodes:,}", file=logf, flush=True)
    print(f"total time taken: {total_elapsed:.5f} seconds", file=logf, flush=True)
    if total_nodes:
        ns_per_state = NANOSECONDS_PER_SECOND * total_elapsed / total_nodes
        print(f"average time per board state: {ns_per_state:.5f} ns", file=logf, flush=True)
    return reports


def solve_one(
    board: Board,
    catalog: PieceCatalog,
    *,
    board_idx: int,
    n_boards: int,
    logf: TextIO,
) -> BoardReport:
    """Solve a single board, logging the board, its solutions and the search counters.

    Args:
        board (Board): The initial board.
        catalog (PieceCatalog): Canonicalized pieces.
        board_idx (int): 1-based index of the board, for reporting.
        n_boards (int): Number of boards in the set, for reporting.
        logf: File object to log the solving process.
    """
    print(f"board {board_idx}/{n_boards}:", file=logf, flush=True)
    print(board.render(), file=logf, flush=True)
    print("", file=logf, flush=True)
    print(f"Solving board {board_idx}/{n_boards}...")

    def report_progress(stats: SolveStats) -> None:
        print(
            f"  ... {stats.nodes_expanded:,} board states tested, "
            f"{stats.peak_frontier:,} peak pending",
            file=logf,
            flush=True,
        )

    start = perf_counter()
    try:
        result = solve(
            board,
            catalog,
            node_limit=solver_config.node_limit,
            report_interval=solver_config.report_interval,
            on_progress=report_progress,
            breadth_first=solver_config.breadth_first,
        )
    except SearchAborted as e:
        elapsed = perf_counter() - start
        print(f"{e} (node limit {e.node_limit:,})", file=logf, flush=True)
        print(f"time taken: {elapsed:.5f} seconds", file=logf, flush=True)
        print("", file=logf, flush=True)
        print(f"Board {board_idx}/{n_boards}: aborted.")
        return BoardReport(board_idx, None, e.stats, elapsed)
    elapsed = perf_counter() - start

    solutions = result.solutions
    if solver_config.validate_solutions:
        n_invalid = sum(1 for s in solutions if not validate_solution(s, board, catalog))
        if n_invalid:
            print(f"{n_invalid} invalid solution(s)!", file=logf, flush=True)
            raise RuntimeError(f"Board {board_idx}: {n_invalid} invalid solution(s) found.")

    if solver_config.print_solutions:
        ordered = SortedKeyList(solutions, key=Board.render) if solver_config.deterministic else solutions
        print("solutions:", file=logf, flush=True)
        for solution in ordered:
            print(solution.render(), file=logf, flush=True)
            print("", file=logf, flush=True)

    stats = result.stats
    print(f"total solutions: {len(solutions):,}", file=logf, flush=True)
    print(f"time taken: {elapsed:.5f} seconds", file=logf, flush=True)
    print(f"board states tested: {stats.nodes_expanded:,}", file=logf, flush=True)
    print(f"orientations tested: {stats.orientations_tested:,}", file=logf, flush=True)
    print(f"balls tested: {stats.balls_tested:,}", file=logf, flush=True)
    print(f"peak pending states: {stats.peak_frontier:,}", file=logf, flush=True)
    print("", file=logf, flush=True)
    print(f"Board {board_idx}/{n_boards}: {len(solutions):,} solution(s) in {elapsed:.5f} seconds.")

    return BoardReport(board_idx, len(solutions), stats, elapsed)
