from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Mapping, NamedTuple, Optional, Tuple


BOARD_SIZE = 8


class InvalidBoardError(ValueError):
    pass


class Side(str, Enum):
    """The two players. RED moves first and advances toward increasing row."""

    RED = "red"
    BLACK = "black"

    @property
    def opponent(self) -> "Side":
        return Side.BLACK if self is Side.RED else Side.RED

    @property
    def forward(self) -> int:
        return 1 if self is Side.RED else -1

    @property
    def crowning_row(self) -> int:
        return BOARD_SIZE - 1 if self is Side.RED else 0


class Square(NamedTuple):
    row: int
    col: int

    def is_valid(self) -> bool:
        return 0 <= self.row < BOARD_SIZE and 0 <= self.col < BOARD_SIZE

    def step(self, d_row: int, d_col: int, times: int = 1) -> "Square":
        return Square(self.row + d_row * times, self.col + d_col * times)


def is_occupiable(square: Square) -> bool:
    return square.is_valid() and (square.row + square.col) % 2 == 1


@dataclass(frozen=True)
class Piece:
    side: Side
    king: bool = False

    def crowned(self) -> "Piece":
        return self if self.king else Piece(self.side, king=True)

    @property
    def symbol(self) -> str:
        char = "r" if self.side is Side.RED else "b"
        return char.upper() if self.king else char


@dataclass(frozen=True)
class Move:
    origin: Square
    destination: Square
    captures: Tuple[Square, ...] = ()

    @property
    def is_capture(self) -> bool:
        return bool(self.captures)

    def __str__(self) -> str:
        sep = "x" if self.captures else "-"
        return f"{tuple(self.origin)}{sep}{tuple(self.destination)}"


_SYMBOLS: Dict[str, Piece] = {
    "r": Piece(Side.RED),
    "R": Piece(Side.RED, king=True),
    "b": Piece(Side.BLACK),
    "B": Piece(Side.BLACK, king=True),
}


class Board:
    """Immutable 8x8 checkers position.

    Only occupied squares are stored. Every transformation returns a new
    Board, so positions can be shared freely between search branches.
    """

    __slots__ = ("_cells",)

    def __init__(self, cells: Optional[Mapping[Square, Piece]] = None) -> None:
        checked: Dict[Square, Piece] = {}
        for square, piece in (cells or {}).items():
            square = Square(*square)
            if not is_occupiable(square):
                raise InvalidBoardError(f"Square {tuple(square)} is not playable")
            checked[square] = piece
        self._cells = checked

    @classmethod
    def empty(cls) -> "Board":
        return cls()

    @classmethod
    def initial(cls) -> "Board":
        cells: Dict[Square, Piece] = {}
        for row in range(BOARD_SIZE):
            if 3 <= row <= 4:
                continue
            side = Side.RED if row < 3 else Side.BLACK
            for col in range(BOARD_SIZE):
                square = Square(row, col)
                if is_occupiable(square):
                    cells[square] = Piece(side)
        return cls(cells)

    @classmethod
    def from_pieces(cls, pieces: Mapping[Tuple[int, int], Piece]) -> "Board":
        return cls({Square(*sq): piece for sq, piece in pieces.items()})

    @classmethod
    def from_rows(cls, rows: "str | List[str]") -> "Board":
        """Build a board from 8 text rows, row 0 first.

        ``r``/``b`` are men, ``R``/``B`` kings, anything else is empty.
        Whitespace inside a row is ignored.
        """
        if isinstance(rows, str):
            rows = [line for line in rows.strip().splitlines() if line.strip()]
        if len(rows) != BOARD_SIZE:
            raise InvalidBoardError(f"Expected {BOARD_SIZE} rows, got {len(rows)}")
        cells: Dict[Square, Piece] = {}
        for row, line in enumerate(rows):
            chars = "".join(line.split())
            if len(chars) != BOARD_SIZE:
                raise InvalidBoardError(f"Row {row} must have {BOARD_SIZE} cells")
            for col, char in enumerate(chars):
                if char in _SYMBOLS:
                    cells[Square(row, col)] = _SYMBOLS[char]
        return cls(cells)

    def to_rows(self) -> List[str]:
        rows = []
        for row in range(BOARD_SIZE):
            rows.append("".join(
                self._cells[Square(row, col)].symbol if Square(row, col) in self._cells else "."
                for col in range(BOARD_SIZE)
            ))
        return rows

    def piece_at(self, square: Tuple[int, int]) -> Optional[Piece]:
        return self._cells.get(Square(*square))

    def is_empty(self, square: Square) -> bool:
        return square not in self._cells

    def pieces(self, side: Optional[Side] = None) -> Iterator[Tuple[Square, Piece]]:
        """Yield (square, piece) pairs in row-major order."""
        for square in sorted(self._cells):
            piece = self._cells[square]
            if side is None or piece.side is side:
                yield square, piece

    def count(self, side: Side) -> int:
        return sum(1 for piece in self._cells.values() if piece.side is side)

    def apply(self, move: Move) -> "Board":
        piece = self._cells.get(move.origin)
        if piece is None:
            raise InvalidBoardError(f"No piece at {tuple(move.origin)}")
        cells = dict(self._cells)
        del cells[move.origin]
        for captured in move.captures:
            cells.pop(captured, None)
        if move.destination.row == piece.side.crowning_row:
            piece = piece.crowned()
        cells[move.destination] = piece
        return Board(cells)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._cells == other._cells

    def __hash__(self) -> int:
        return hash(frozenset(self._cells.items()))

    def __repr__(self) -> str:
        return "Board(\n  " + "\n  ".join(self.to_rows()) + "\n)"


def apply_move(board: Board, move: Move) -> Board:
    return board.apply(move)
