"""Loaders for piece and board files, and board/solution validation."""

from collections import defaultdict
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path

from quadrillion.board import Board
from quadrillion.cells import NUM_PIECES, PIECE_LETTERS, CellValue, is_piece, piece_index
from quadrillion.pieces import MAX_PIECE_SIZE, PieceCatalog, PieceDefinition, SearchPiece, initialize

NUM_VALID_CELLS = 64
"""Number of valid (non-invalid) cells on a Quadrillion board (4 grids of 4x4)."""

BITS_PER_PIECE = MAX_PIECE_SIZE * MAX_PIECE_SIZE


@dataclass
class PuzzleConfig:
    """A piece set and the boards to solve with it."""

    name: str
    """Name of the puzzle set, taken from the boards file name."""

    pieces: list[PieceDefinition]
    """The 12 piece definitions, in letter order."""

    boards: list[Board]
    """The initial boards, each possibly with pre-placed pieces and blocked cells."""

    catalog: PieceCatalog = field(init=False, repr=False)
    """Canonicalized pieces, built from `pieces`."""

    def __post_init__(self) -> None:
        """Canonicalize the pieces and validate every board against them."""
        if len(self.pieces) != NUM_PIECES:
            raise ValueError(f"Expected {NUM_PIECES} pieces, got {len(self.pieces)}.")
        self.catalog = initialize(self.pieces)
        for board_idx, board in enumerate(self.boards, start=1):
            try:
                validate_board(board, self.catalog)
            except ValueError as e:
                raise ValueError(f"Board {board_idx}: {e}") from None

    def __str__(self) -> str:
        """Return a short summary of the puzzle set."""
        orientations = sum(len(piece.orientations) for piece in self.catalog)
        return (
            f"{self.name}: {len(self.boards)} board(s), {NUM_PIECES} pieces, "
            f"{orientations} orientations"
        )


def parse_pieces(text: str) -> list[PieceDefinition]:
    """Parse piece definitions: 12 groups of 16 whitespace-separated bits.

    Each group is one 4x4 bitmap in row-major order.
    """
    tokens = text.split()
    if len(tokens) != NUM_PIECES * BITS_PER_PIECE:
        raise ValueError(
            f"Expected {NUM_PIECES * BITS_PER_PIECE} bits for {NUM_PIECES} pieces, "
            f"got {len(tokens)}."
        )
    try:
        bits = [int(token) for token in tokens]
    except ValueError:
        raise ValueError("Piece definitions may only contain integers.") from None

    pieces = []
    for piece_idx in range(NUM_PIECES):
        chunk = bits[piece_idx * BITS_PER_PIECE : (piece_idx + 1) * BITS_PER_PIECE]
        rows = [chunk[i : i + MAX_PIECE_SIZE] for i in range(0, BITS_PER_PIECE, MAX_PIECE_SIZE)]
        try:
            pieces.append(PieceDefinition(rows))
        except ValueError as e:
            raise ValueError(f"Piece {PIECE_LETTERS[piece_idx]}: {e}") from None
    return pieces


def parse_boards(text: str, *, valid_cells: int = NUM_VALID_CELLS) -> list[Board]:
    """Parse boards from text.

    A board is a block of rows of ``' '`` (invalid), ``'.'`` (empty), ``'*'`` (blocked) and
    ``'A'..'L'`` (pre-placed piece) characters.  A board ends on the row where its count
    of non-invalid cells reaches `valid_cells`, and boards are separated by one blank line.
    Leading spaces are significant, so rows are never stripped on the left.
    """
    boards: list[Board] = []
    rows: list[str] = []
    n_valid = 0
    expect_separator = False

    for line_no, line in enumerate(text.splitlines(), start=1):
        if expect_separator:
            if line.strip():
                raise ValueError(f"Line {line_no}: expected a blank line between boards.")
            expect_separator = False
            continue

        rows.append(line)
        n_valid += sum(ch != " " for ch in line)
        if n_valid > valid_cells:
            raise ValueError(
                f"Line {line_no}: board {len(boards) + 1} has more than {valid_cells} valid cells."
            )
        if n_valid == valid_cells:
            try:
                boards.append(Board.from_rows(rows))
            except ValueError as e:
                raise ValueError(f"Board {len(boards) + 1}: {e}") from None
            rows, n_valid = [], 0
            expect_separator = True

    # Trailing blank lines are allowed, a partial board is not
    if n_valid or any(rows):
        raise ValueError(
            f"Board {len(boards) + 1} is incomplete: {n_valid} of {valid_cells} valid cells."
        )
    return boards


def load_pieces(pieces_path: PathLike | str) -> list[PieceDefinition]:
    """Load piece definitions from the given path."""
    path = Path(pieces_path)
    if not path.is_file():
        raise FileNotFoundError(f"Pieces file not found: {path}")
    return parse_pieces(path.read_text(encoding="utf-8"))


def load_boards(boards_path: PathLike | str, *, valid_cells: int = NUM_VALID_CELLS) -> list[Board]:
    """Load boards from the given path."""
    path = Path(boards_path)
    if not path.is_file():
        raise FileNotFoundError(f"Boards file not found: {path}")
    return parse_boards(path.read_text(encoding="utf-8"), valid_cells=valid_cells)


def load_configs(
    boards_path: PathLike | str,
    pieces_path: PathLike | str,
    *,
    valid_cells: int = NUM_VALID_CELLS,
) -> PuzzleConfig:
    """Load the pieces and boards files into a validated `PuzzleConfig`."""
    return PuzzleConfig(
        name=Path(boards_path).stem,
        pieces=load_pieces(pieces_path),
        boards=load_boards(boards_path, valid_cells=valid_cells),
    )


def piece_positions(board: Board) -> dict[int, list[tuple[int, int]]]:
    """Map each piece index found on the board to its cells, in row-major order."""
    positions: defaultdict[int, list[tuple[int, int]]] = defaultdict(list)
    for idx, value in enumerate(board.data):
        if is_piece(value):
            positions[piece_index(value)].append(board.get_2d_idx(idx))
    return dict(positions)


def is_placement_of(piece: SearchPiece, cells: list[tuple[int, int]]) -> bool:
    """Whether the cells (row-major order) are exactly one orientation of the piece."""
    if len(cells) != piece.n_balls:
        return False
    min_row = min(row for row, _ in cells)
    min_col = min(col for _, col in cells)
    offsets = tuple((row - min_row, col - min_col) for row, col in cells)
    return offsets in piece.orientations


def validate_board(board: Board, catalog: PieceCatalog) -> None:
    """Check that every pre-placed piece on the board is a whole, valid placement.

    Raises:
        ValueError: If a pre-placed piece has the wrong number of cells or shape.
    """
    for piece_idx, cells in piece_positions(board).items():
        piece = catalog[piece_idx]
        if len(cells) != piece.n_balls:
            raise ValueError(
                f"Piece {piece.letter} covers {len(cells)} cells but has {piece.n_balls} balls."
            )
        if not is_placement_of(piece, cells):
            raise ValueError(f"Piece {piece.letter} is not placed in one of its orientations.")


def validate_solution(solution: Board, initial: Board, catalog: PieceCatalog) -> bool:
    """Validate a solution against its initial board.

    A valid solution has no empty cell, leaves every non-empty cell of the initial
    board unchanged, fills the initially-empty cells only with pieces absent from the
    initial board, and holds each piece as exactly one of its orientations.
    """
    if (solution.n_rows, solution.n_cols) != (initial.n_rows, initial.n_cols):
        return False

    initial_pieces = {piece_index(value) for value in initial.data if is_piece(value)}
    for before, after in zip(initial.data, solution.data):
        if after == CellValue.EMPTY:
            return False
        if before != CellValue.EMPTY:
            if after != before:
                return False
        elif not is_piece(after) or piece_index(after) in initial_pieces:
            return False

    return all(
        is_placement_of(catalog[piece_idx], cells)
        for piece_idx, cells in piece_positions(solution).items()
    )
