from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .advisor import AdvisoryClient, AdvisoryError
from .ai import AIPlayer
from .board import Board, Move, Side, Square
from .moves import moves_for_player, moves_from, winner
from .notation import describe_move

logger = logging.getLogger(__name__)


class IllegalMoveError(ValueError):
    pass


@dataclass
class HistoryEntry:
    side: Side
    move: Move


@dataclass
class TurnReport:
    move: Optional[Move]
    source: str
    score: Optional[float] = None
    nodes: int = 0
    insight: Optional[str] = None
    personality: Optional[str] = None
    notice: Optional[str] = None


class Game:
    """Owns the live checkers session and exposes it to the web/API layer.

    The board itself is immutable; the game replaces it after every accepted
    move, validates human input against the move generator, and tracks the
    side to move and the winner.
    """

    def __init__(self, human_side: Side = Side.RED, board: Optional[Board] = None) -> None:
        self.human_side = human_side
        self.reset(board)

    @property
    def machine_side(self) -> Side:
        return self.human_side.opponent

    def reset(self, board: Optional[Board] = None, human_side: Optional[Side] = None) -> None:
        if human_side is not None:
            self.human_side = human_side
        self.board = board if board is not None else Board.initial()
        self.turn = Side.RED
        self.history: List[HistoryEntry] = []
        self.winner: Optional[Side] = winner(self.board, self.turn)
        self.ai = AIPlayer(maximizing_side=self.machine_side)

    @property
    def game_over(self) -> bool:
        return self.winner is not None

    @property
    def is_machine_turn(self) -> bool:
        return not self.game_over and self.turn is self.machine_side

    def legal_moves(self, square: Optional[Tuple[int, int]] = None) -> List[Move]:
        """Legal moves for the side to move, optionally limited to one origin square."""
        if self.game_over:
            return []
        moves = moves_for_player(self.board, self.turn)
        if square is None:
            return moves
        origin = Square(*square)
        return [move for move in moves if move.origin == origin]

    def push(self, move: Move) -> None:
        if self.game_over:
            raise IllegalMoveError("Game is over")
        if move not in self.legal_moves():
            raise IllegalMoveError(f"Illegal move: {move}")
        self._apply(move)

    def push_squares(self, origin: Tuple[int, int], destination: Tuple[int, int]) -> Move:
        """Play the legal move from ``origin`` to ``destination`` for the side to move."""
        if self.game_over:
            raise IllegalMoveError("Game is over")
        origin, destination = Square(*origin), Square(*destination)
        piece = self.board.piece_at(origin) if origin.is_valid() else None
        if piece is None:
            raise IllegalMoveError(f"No piece at {tuple(origin)}")
        if piece.side is not self.turn:
            raise IllegalMoveError(f"Piece at {tuple(origin)} belongs to {piece.side.value}")

        for move in self.legal_moves(origin):
            if move.destination == destination:
                self._apply(move)
                return move

        if moves_from(self.board, origin) and not self.legal_moves(origin):
            raise IllegalMoveError("A capture is available and must be taken")
        raise IllegalMoveError(f"Illegal move: {tuple(origin)} -> {tuple(destination)}")

    def _apply(self, move: Move) -> None:
        self.board = self.board.apply(move)
        self.history.append(HistoryEntry(self.turn, move))
        self.turn = self.turn.opponent
        self.winner = winner(self.board, self.turn)
        if self.winner is not None:
            logger.info("Game over after %d moves: %s wins", len(self.history), self.winner.value)

    def machine_move(self, depth: int, advisor: Optional[AdvisoryClient] = None) -> TurnReport:
        """Choose and play the machine's move.

        The advisor, when given, is asked first. Any advisory failure is
        reported in ``notice`` and the move comes from the search instead.
        """
        if not self.is_machine_turn:
            return TurnReport(move=None, source="none")

        notice: Optional[str] = None
        if advisor is not None:
            try:
                suggestion = advisor.suggest(
                    self.board, self.legal_moves(), len(self.history), self.turn
                )
            except AdvisoryError as e:
                logger.warning("Advisor failed, falling back to search: %s", e)
                notice = "Advisor failed, using offline search"
            else:
                self.push(suggestion.move)
                return TurnReport(
                    move=suggestion.move,
                    source="advisor",
                    insight=suggestion.insight,
                    personality=suggestion.personality,
                )

        result = self.ai.search(self.board, depth, self.turn)
        if result.best_move is not None:
            self.push(result.best_move)
        return TurnReport(
            move=result.best_move,
            source="search",
            score=result.score,
            nodes=result.nodes,
            notice=notice,
        )

    def snapshot(self) -> Dict[str, object]:
        last_move: Optional[Dict[str, object]] = None
        if self.history:
            last_move = move_to_dict(self.history[-1].move)

        return {
            "board": self.board.to_rows(),
            "turn": self.turn.value,
            "human_side": self.human_side.value,
            "legal_moves": [move_to_dict(m) for m in self.legal_moves()],
            "game_over": self.game_over,
            "winner": self.winner.value if self.winner else None,
            "last_move": last_move,
            "move_count": len(self.history),
            "pieces": {side.value: self.board.count(side) for side in Side},
        }


def move_to_dict(move: Move) -> Dict[str, object]:
    return {
        "from": list(move.origin),
        "to": list(move.destination),
        "captures": [list(sq) for sq in move.captures],
        "notation": describe_move(move),
    }
