"""Backtracking placement search.

The search fills the board one empty cell at a time.  For the lowest-index empty cell
still unfilled, it tries every remaining piece, in every orientation, with every
ball of that orientation as the "anchor" placed on the cell.  Each successful
placement is a new search state holding its own copy of the board, so sibling
branches never see each other's changes.
"""

from collections import deque
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import NamedTuple

from bitarray import bitarray
from bitarray.util import zeros

from quadrillion.board import Board
from quadrillion.cells import NUM_PIECES, CellValue, is_piece, piece_cell, piece_index
from quadrillion.pieces import PieceCatalog

REPORT_INTERVAL = 100_000
"""Default interval (in search nodes) between progress callbacks."""


class SearchState(NamedTuple):
    """One node of the search tree.  Never mutated once pushed to the frontier."""

    cells: bytearray
    """Board contents, row-major, same layout as `Board.data`."""

    remaining: bitarray
    """Bit i set if piece i has not been placed yet."""

    cursor: int
    """Index into the list of originally-empty cells; every earlier cell is filled."""


@dataclass
class SolveStats:
    """Counters collected during a solve, for performance reporting only."""

    nodes_expanded: int = 0
    """Number of search states popped from the frontier."""

    orientations_tested: int = 0
    """Number of (orientation, anchor ball) candidates tried."""

    balls_tested: int = 0
    """Number of per-ball bounds/occupancy checks."""

    peak_frontier: int = 0
    """Largest number of pending search states."""


class SolveResult(NamedTuple):
    """Solutions found for one board, with the search counters."""

    solutions: list[Board]
    stats: SolveStats


class SearchAborted(RuntimeError):
    """Raised when the search exceeds its node budget."""

    def __init__(self, stats: SolveStats, node_limit: int) -> None:
        super().__init__(f"Search aborted after expanding {stats.nodes_expanded:,} nodes.")
        self.stats = stats
        self.node_limit = node_limit


def find_empty_cells(board: Board, n_rows: int, n_cols: int) -> list[int]:
    """1D indices of the empty cells within the extent, in row-major order."""
    empty = CellValue.EMPTY
    return [
        board.get_1d_idx(row, col)
        for row in range(n_rows)
        for col in range(n_cols)
        if board[row, col] == empty
    ]


def initial_remaining(board: Board, available: Iterable[int] | None = None) -> bitarray:
    """Pieces still to place: `available` (default: all) minus pieces already on the board."""
    remaining = zeros(NUM_PIECES)
    if available is None:
        remaining.setall(1)
    else:
        for piece_idx in available:
            if not 0 <= piece_idx < NUM_PIECES:
                raise ValueError(f"Piece index out of range: {piece_idx}")
            remaining[piece_idx] = 1

    for value in set(board.data):
        if is_piece(value):
            remaining[piece_index(value)] = 0
    return remaining


def solve(
    board: Board,
    catalog: PieceCatalog,
    *,
    n_rows: int | None = None,
    n_cols: int | None = None,
    available: Iterable[int] | None = None,
    node_limit: int | None = None,
    report_interval: int = REPORT_INTERVAL,
    on_progress: Callable[[SolveStats], None] | None = None,
    breadth_first: bool = False,
) -> SolveResult:
    """Enumerate every way to fill the empty cells of `board` with the remaining pieces.

    Args:
        board: The initial board.  Not modified.
        catalog: Canonicalized pieces, see `quadrillion.pieces.initialize`.
        n_rows: Number of playable rows.  Defaults to the board's extent.
        n_cols: Number of playable columns.  Defaults to the board's extent.
        available: Indices of the pieces that may be placed.  Defaults to all pieces.
            Pieces already on the board are never placed again.
        node_limit: Abort with `SearchAborted` rather than expand more than this many
            search states.
        report_interval: Number of expanded states between `on_progress` calls.
        on_progress: Optional hook receiving the running counters.
        breadth_first: Expand states first-in-first-out.  Finds the same solutions,
            with a much larger frontier.

    Returns:
        A `SolveResult`.  A board without empty cells is its own (only) solution.  Every
        other solution uses each remaining piece exactly once, so a board whose number of
        empty cells differs from the remaining pieces' total ball count has none.

    Raises:
        SearchAborted: If `node_limit` is reached before the search completes.
        ValueError: If the extent does not fit the board or leaves empty cells outside it.
    """
    if n_rows is None or n_cols is None:
        ext_rows, ext_cols = board.extent
        n_rows = ext_rows if n_rows is None else n_rows
        n_cols = ext_cols if n_cols is None else n_cols
    if not (0 <= n_rows <= board.n_rows and 0 <= n_cols <= board.n_cols):
        raise ValueError(
            f"Extent {n_rows}x{n_cols} does not fit a {board.n_rows}x{board.n_cols} board."
        )
    if report_interval < 1:
        raise ValueError("report_interval must be positive.")

    stats = SolveStats()
    empty_idxs = find_empty_cells(board, n_rows, n_cols)
    if board.count(CellValue.EMPTY) != len(empty_idxs):
        raise ValueError(f"Board has empty cells outside the {n_rows}x{n_cols} extent.")
    remaining = initial_remaining(board, available)

    if not empty_idxs:
        return SolveResult([board.copy()], stats)

    remaining_idxs = [idx for idx, bit in enumerate(remaining) if bit]
    if len(empty_idxs) != catalog.total_balls(remaining_idxs):
        return SolveResult([], stats)

    solutions: list[Board] = []
    stride = board.n_cols
    n_empty = len(empty_idxs)
    empty = CellValue.EMPTY

    frontier: deque[SearchState] = deque([SearchState(bytearray(board.data), remaining, 0)])
    pop = frontier.popleft if breadth_first else frontier.pop

    # Hot-loop counters, copied into `stats` when reported.
    nodes = orientations_tested = balls_tested = 0
    peak_frontier = 1

    def sync_stats() -> SolveStats:
        stats.nodes_expanded = nodes
        stats.orientations_tested = orientations_tested
        stats.balls_tested = balls_tested
        stats.peak_frontier = peak_frontier
        return stats

    while frontier:
        if node_limit is not None and nodes >= node_limit:
            raise SearchAborted(sync_stats(), node_limit)

        cells, remaining, cursor = pop()
        nodes += 1
        if on_progress is not None and nodes % report_interval == 0:
            on_progress(sync_stats())

        # Find the next empty cell on the board
        while cursor < n_empty and cells[empty_idxs[cursor]] != empty:
            cursor += 1
        assert cursor < n_empty, "Pieces remain but the board has no empty cell."
        row, col = divmod(empty_idxs[cursor], stride)

        remaining_idxs = [idx for idx, bit in enumerate(remaining) if bit]
        is_last_piece = len(remaining_idxs) == 1

        # Try to fill the empty cell with every remaining piece...
        for piece_idx in remaining_idxs:
            piece = catalog[piece_idx]
            value = piece_cell(piece_idx)

            # ... in every orientation ...
            for orientation in piece.orientations:
                # ... with every ball of that orientation on the target cell
                for anchor_row, anchor_col in orientation:
                    orientations_tested += 1
                    base_row = row - anchor_row
                    base_col = col - anchor_col

                    ball_idxs = []
                    for ball_row, ball_col in orientation:
                        balls_tested += 1
                        r = base_row + ball_row
                        c = base_col + ball_col
                        if not (0 <= r < n_rows and 0 <= c < n_cols):
                            break
                        idx = r * stride + c
                        if cells[idx] != empty:
                            break
                        ball_idxs.append(idx)
                    else:
                        new_cells = cells[:]
                        for idx in ball_idxs:
                            new_cells[idx] = value

                        if is_last_piece:
                            solutions.append(Board(new_cells, board.n_rows, stride))
                            continue

                        new_remaining = remaining.copy()
                        new_remaining[piece_idx] = 0
                        frontier.append(SearchState(new_cells, new_remaining, cursor + 1))

        if len(frontier) > peak_frontier:
            peak_frontier = len(frontier)

    return SolveResult(solutions, sync_stats())
