from pathlib import Path

import pytest

from quadrillion.board import Board
from quadrillion.pieces import PieceCatalog, PieceDefinition, initialize
from quadrillion.puzzle_config import parse_pieces

REPO_ROOT = Path(__file__).resolve().parents[1]

# Piece order matches the letters A..L.
REFERENCE_SHAPES = [
    [".#", "##"],  # A: L-tromino
    ["##", "##"],  # B: square
    ["###", ".#."],  # C: T-tetromino
    [".##", "##.", ".#."],  # D: F-pentomino
    ["###", "#..", "#.."],  # E: V-pentomino
    ["##", "##", "#."],  # F: P-pentomino
    ["#.", "#.", "#.", "##"],  # G: L-pentomino
    ["###", ".#.", ".#."],  # H: T-pentomino
    [".#", ".#", "##", "#."],  # I: N-pentomino
    [".##", "##.", "#.."],  # J: W-pentomino
    [".#", "##", ".#", ".#"],  # K: Y-pentomino
    ["##", "#.", "##"],  # L: U-pentomino
]

# A complete tiling of the reference board using every piece once.
SOLVED_ROWS = [
    "EEEHHHJJ",
    "EFFIHJJK",
    "EFFIHJKK",
    "GFIICCCK",
    "G*IDDC*K",
    "G*DDLLBB",
    "GGADL*BB",
    "*AA*LL**",
]


def definition(shape: list[str]) -> PieceDefinition:
    """Build a piece definition from rows of '#' (ball) and '.' characters."""
    bits = [[0] * 4 for _ in range(4)]
    for row, line in enumerate(shape):
        for col, ch in enumerate(line):
            bits[row][col] = int(ch == "#")
    return PieceDefinition(bits)


def make_catalog(shapes: dict[int, list[str]]) -> PieceCatalog:
    """Catalog with the given shapes; every other piece is a single ball."""
    return initialize([definition(shapes.get(idx, ["#"])) for idx in range(12)])


def remove_pieces(rows: list[str], letters: str) -> Board:
    """Board from `rows` with the cells of the given pieces emptied."""
    return Board.from_rows(
        ["".join("." if ch in letters else ch for ch in row) for row in rows]
    )


@pytest.fixture(scope="session")
def reference_catalog() -> PieceCatalog:
    return initialize([definition(shape) for shape in REFERENCE_SHAPES])


@pytest.fixture
def solved_board() -> Board:
    return Board.from_rows(SOLVED_ROWS)


@pytest.fixture
def pieces_text() -> str:
    return (REPO_ROOT / "pieces.txt").read_text(encoding="utf-8")


@pytest.fixture
def reference_definitions(pieces_text: str) -> list[PieceDefinition]:
    return parse_pieces(pieces_text)
