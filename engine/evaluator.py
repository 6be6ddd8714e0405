from __future__ import annotations

from typing import Tuple

from .board import BOARD_SIZE, Board, Piece, Side, Square, is_occupiable
from .moves import ALL_DIRECTIONS, moves_for_player


class Evaluator:
    """Static evaluation for checkers positions.

    Scores are from the point of view of ``perspective`` (the machine, BLACK,
    by default): positive favors that side. Units are men (a man is worth 1).
    Edge safety and threat bonuses are only awarded to the perspective side.
    """

    MAN_VALUE = 1.0
    KING_VALUE = 3.0

    ADVANCE_WEIGHT = 0.1
    CENTER_BONUS = 0.05
    EDGE_BONUS = 0.1
    KING_CENTER_BONUS = 0.2
    MOBILITY_WEIGHT = 0.1
    KING_ROW_BONUS = 0.3
    THREAT_BONUS = 0.5

    CENTER_COLS = range(2, 6)
    CENTER_ROWS = range(3, 5)

    @classmethod
    def evaluate(cls, board: Board, perspective: Side = Side.BLACK) -> float:
        score = 0.0

        for square, piece in board.pieces():
            sign = 1.0 if piece.side is perspective else -1.0
            score += sign * cls._piece_score(square, piece)
            if piece.side is perspective and not piece.king and square.col in (0, BOARD_SIZE - 1):
                score += cls.EDGE_BONUS

        own_moves = len(moves_for_player(board, perspective))
        their_moves = len(moves_for_player(board, perspective.opponent))
        score += (own_moves - their_moves) * cls.MOBILITY_WEIGHT

        score += cls._king_row_control(board, perspective)
        score += cls._threats(board, perspective)
        return score

    @classmethod
    def _piece_score(cls, square: Square, piece: Piece) -> float:
        if piece.king:
            value = cls.KING_VALUE
            if square.row in cls.CENTER_ROWS and square.col in cls.CENTER_COLS:
                value += cls.KING_CENTER_BONUS
            return value

        value = cls.MAN_VALUE + cls._advancement(square, piece.side) * cls.ADVANCE_WEIGHT
        if square.col in cls.CENTER_COLS:
            value += cls.CENTER_BONUS
        return value

    @staticmethod
    def _advancement(square: Square, side: Side) -> int:
        # Rows travelled from the side's own back rank.
        return square.row if side is Side.RED else BOARD_SIZE - 1 - square.row

    @classmethod
    def _king_row_control(cls, board: Board, perspective: Side) -> float:
        score = 0.0
        for side, sign in ((perspective, 1.0), (perspective.opponent, -1.0)):
            row = side.crowning_row
            for col in range(BOARD_SIZE):
                square = Square(row, col)
                if not is_occupiable(square):
                    continue
                piece = board.piece_at(square)
                if piece is not None and piece.side is side:
                    score += sign * cls.KING_ROW_BONUS
        return score

    @classmethod
    def _threats(cls, board: Board, perspective: Side) -> float:
        victims = sum(
            1 for square, _ in board.pieces(perspective.opponent)
            if cls.is_vulnerable(board, square, attacker=perspective)
        )
        return victims * cls.THREAT_BONUS

    @staticmethod
    def is_vulnerable(board: Board, square: Tuple[int, int], attacker: Side) -> bool:
        """True if an ``attacker`` piece touches ``square`` with an empty square behind it.

        The attacker's movement directions are not checked.
        """
        square = Square(*square)
        for d_row, d_col in ALL_DIRECTIONS:
            attacker_square = square.step(d_row, d_col)
            landing = square.step(-d_row, -d_col)
            if not attacker_square.is_valid() or not landing.is_valid():
                continue
            piece = board.piece_at(attacker_square)
            if piece is not None and piece.side is attacker and board.is_empty(landing):
                return True
        return False
