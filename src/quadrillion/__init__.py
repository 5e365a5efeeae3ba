"""Quadrillion Puzzle Solver.

Finds every way to cover the empty cells of a board with a set of 12 pieces, each
made of up to 5 balls.  The board may contain pre-placed pieces and blocked cells
(denoted by '*'), and cells outside the playable area (spaces).  Uses exhaustive
backtracking over pieces, orientations and anchor balls.
"""

from sys import argv, exit

from .puzzle_config import load_configs
from .solver import runner
from .solver.config import config as solver_config


def main() -> None:
    """Main entry point for the Quadrillion solver."""
    # Expect at most one argument: path to the boards file
    if len(argv) > 2:
        print("Usage: python -m quadrillion [path_to_boards_file]")
        exit(1)
    boards_path = argv[1] if len(argv) == 2 else solver_config.boards_path
    puzzle_config = load_configs(boards_path, solver_config.pieces_path)

    runner.run(puzzle_config)
