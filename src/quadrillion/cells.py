"""Cell values stored on a Quadrillion board and their text characters."""

from enum import IntEnum

NUM_PIECES = 12
"""Number of pieces in the game."""

PIECE_LETTERS = "ABCDEFGHIJKL"
"""Board characters for pieces 0..11."""


class CellValue(IntEnum):
    """Tag stored in each board cell.

    Pieces are not listed individually: piece ``i`` is stored as ``PIECE_BASE + i``.
    """

    EMPTY = 0
    INVALID = 1
    BLOCKED = 2
    PIECE_BASE = 3


PIECE_MAX = CellValue.PIECE_BASE + NUM_PIECES - 1

_CHAR_TO_CELL: dict[str, int] = {
    " ": CellValue.INVALID,
    ".": CellValue.EMPTY,
    "*": CellValue.BLOCKED,
} | {letter: CellValue.PIECE_BASE + i for i, letter in enumerate(PIECE_LETTERS)}

_CELL_TO_CHAR: dict[int, str] = {value: ch for ch, value in _CHAR_TO_CELL.items()}


def is_piece(value: int) -> bool:
    """Return whether a cell value identifies a piece."""
    return CellValue.PIECE_BASE <= value <= PIECE_MAX


def piece_cell(piece_idx: int) -> int:
    """Cell value used to stamp piece `piece_idx` onto a board."""
    if not 0 <= piece_idx < NUM_PIECES:
        raise ValueError(f"Piece index out of range: {piece_idx}")
    return CellValue.PIECE_BASE + piece_idx


def piece_index(value: int) -> int:
    """Piece index for a piece cell value."""
    if not is_piece(value):
        raise ValueError(f"Cell value {value} is not a piece.")
    return value - CellValue.PIECE_BASE


def cell_from_char(ch: str) -> int:
    """Convert a board file character to a cell value.

    Raises:
        ValueError: If the character is not one of ``' '``, ``'.'``, ``'*'`` or ``'A'..'L'``.
    """
    try:
        return _CHAR_TO_CELL[ch]
    except KeyError:
        raise ValueError(f"Invalid board character: {ch!r}") from None


def cell_to_char(value: int) -> str:
    """Convert a cell value to its board file character."""
    try:
        return _CELL_TO_CHAR[value]
    except KeyError:
        raise ValueError(f"Invalid cell value: {value}") from None
