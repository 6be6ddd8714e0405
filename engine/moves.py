from __future__ import annotations

from typing import List, Optional, Tuple

from .board import Board, Move, Piece, Side, Square


ALL_DIRECTIONS: Tuple[Tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))


def directions_for(piece: Piece) -> Tuple[Tuple[int, int], ...]:
    if piece.king:
        return ALL_DIRECTIONS
    forward = piece.side.forward
    return ((forward, -1), (forward, 1))


def moves_from(board: Board, square: Tuple[int, int], side: Optional[Side] = None) -> List[Move]:
    """Legal moves for the piece standing on ``square``.

    Returns the piece's capture chains if it has any, otherwise its simple
    one-step moves. Empty when the square is empty or, if ``side`` is given,
    holds the other side's piece. Board-wide mandatory capture is applied by
    :func:`moves_for_player`.
    """
    origin = Square(*square)
    piece = board.piece_at(origin)
    if piece is None or (side is not None and piece.side is not side):
        return []

    captures = _capture_chains(board, origin, origin, piece, ())
    if captures:
        return captures

    moves: List[Move] = []
    for d_row, d_col in directions_for(piece):
        target = origin.step(d_row, d_col)
        if target.is_valid() and board.is_empty(target):
            moves.append(Move(origin, target))
    return moves


def _capture_chains(
    board: Board,
    origin: Square,
    current: Square,
    piece: Piece,
    captured: Tuple[Square, ...],
) -> List[Move]:
    # The board is left untouched while a chain is explored: jumped pieces
    # stay in place and the mover still occupies its origin.
    chains: List[Move] = []
    for d_row, d_col in directions_for(piece):
        jumped = current.step(d_row, d_col)
        landing = current.step(d_row, d_col, times=2)
        if not landing.is_valid() or jumped in captured:
            continue
        victim = board.piece_at(jumped)
        if victim is None or victim.side is piece.side or not board.is_empty(landing):
            continue

        path = captured + (jumped,)
        further = _capture_chains(board, origin, landing, piece, path)
        if further:
            chains.extend(further)
        else:
            chains.append(Move(origin, landing, path))
    return chains


def moves_for_player(board: Board, side: Side) -> List[Move]:
    """All legal moves for ``side``; only captures if any capture exists."""
    moves: List[Move] = []
    has_capture = False
    for square, _ in board.pieces(side):
        piece_moves = moves_from(board, square)
        if piece_moves and piece_moves[0].is_capture:
            has_capture = True
        moves.extend(piece_moves)
    if has_capture:
        return [move for move in moves if move.is_capture]
    return moves


def generate_moves(board: Board, target: "Side | Tuple[int, int]") -> List[Move]:
    if isinstance(target, Side):
        return moves_for_player(board, target)
    return moves_from(board, target)


def is_terminal(board: Board) -> bool:
    return not moves_for_player(board, Side.RED) or not moves_for_player(board, Side.BLACK)


def winner(board: Board, to_move: Optional[Side] = None) -> Optional[Side]:
    """The side whose opponent cannot move, or None while both can.

    With ``to_move`` given, that side loses first when it has no move.
    """
    if to_move is not None and not moves_for_player(board, to_move):
        return to_move.opponent
    if not moves_for_player(board, Side.RED):
        return Side.BLACK
    if not moves_for_player(board, Side.BLACK):
        return Side.RED
    return None
