"""Text forms of boards and moves exchanged with the move advisor.

A move is written ``from_row,from_col->to_row,to_col`` optionally followed by
``|r,c;r,c`` listing the captured squares in jump order.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Tuple

from .board import Board, Move, Side, Square


class MoveParseError(ValueError):
    pass


_SQUARE = r"\s*(\d)\s*,\s*(\d)\s*"
_MOVE_RE = re.compile(rf"^{_SQUARE}->{_SQUARE}(?:\|(.*))?$")


def describe_square(square: Square) -> str:
    return f"{square.row},{square.col}"


def describe_move(move: Move) -> str:
    captures = ";".join(describe_square(sq) for sq in move.captures)
    return f"{describe_square(move.origin)}->{describe_square(move.destination)}|{captures}"


def _parse_captures(text: Optional[str]) -> Optional[Tuple[Square, ...]]:
    if text is None or not text.strip():
        return None
    captures = []
    for chunk in text.split(";"):
        parts = chunk.split(",")
        if len(parts) != 2:
            raise MoveParseError(f"Bad captured square: {chunk!r}")
        try:
            captures.append(Square(int(parts[0]), int(parts[1])))
        except ValueError as exc:
            raise MoveParseError(f"Bad captured square: {chunk!r}") from exc
    return tuple(captures)


def parse_move(text: str, legal_moves: Iterable[Move]) -> Move:
    """Match ``text`` against ``legal_moves``.

    Origin and destination must match. When the text carries a capture list
    it must match too; otherwise the first legal move with those endpoints
    is returned.
    """
    if not isinstance(text, str):
        raise MoveParseError(f"Move must be a string, got {type(text).__name__}")
    match = _MOVE_RE.match(text.strip())
    if match is None:
        raise MoveParseError(f"Unrecognised move: {text!r}")
    origin = Square(int(match.group(1)), int(match.group(2)))
    destination = Square(int(match.group(3)), int(match.group(4)))
    captures = _parse_captures(match.group(5))

    for move in legal_moves:
        if move.origin != origin or move.destination != destination:
            continue
        if captures is None or tuple(move.captures) == captures:
            return move
    raise MoveParseError(f"Move {text!r} is not legal in this position")


def render_board(board: Board) -> str:
    symbols = {"r": "R", "R": "RK", "b": "B", "B": "BK"}
    lines: List[str] = []
    for row in board.to_rows():
        lines.append(" ".join(symbols.get(char, "·") for char in row))
    return "\n".join(lines)


def side_label(side: Side) -> str:
    return side.value.title()
