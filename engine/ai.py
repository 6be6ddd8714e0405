from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .board import Board, Move, Side
from .evaluator import Evaluator
from .moves import is_terminal, moves_for_player

logger = logging.getLogger(__name__)


@dataclass
class SearchResult:
    best_move: Optional[Move]
    score: float
    nodes: int


class AIPlayer:
    """Depth-limited minimax with alpha-beta pruning.

    ``maximizing_side`` is the side the evaluator scores for; the other side
    minimizes. The player holds no per-search state, so one instance can be
    shared between games.
    """

    def __init__(self, maximizing_side: Side = Side.BLACK) -> None:
        self.maximizing_side = maximizing_side

    def choose_move(self, board: Board, depth: int, side: Optional[Side] = None) -> Optional[Move]:
        return self.search(board, depth, side or self.maximizing_side).best_move

    def search(
        self,
        board: Board,
        depth: int,
        side: Side,
        alpha: float = -math.inf,
        beta: float = math.inf,
    ) -> SearchResult:
        """Search ``depth`` plies from ``board`` with ``side`` to move.

        Ties keep the first move in generation order. A negative depth is
        treated as 0.
        """
        move, score, nodes = self._alphabeta(board, max(0, depth), alpha, beta, side)
        logger.debug(
            "Searched depth %d for %s: %d nodes, score %.2f, move %s",
            depth, side.value, nodes, score, move,
        )
        return SearchResult(best_move=move, score=score, nodes=nodes)

    def evaluate(self, board: Board) -> float:
        return Evaluator.evaluate(board, self.maximizing_side)

    def _alphabeta(
        self,
        board: Board,
        depth: int,
        alpha: float,
        beta: float,
        side: Side,
    ) -> Tuple[Optional[Move], float, int]:
        if depth == 0 or is_terminal(board):
            return None, self.evaluate(board), 1

        maximizing = side is self.maximizing_side
        moves: List[Move] = moves_for_player(board, side)
        if not moves:
            return None, (-math.inf if maximizing else math.inf), 1

        nodes = 1
        best_move = moves[0]
        if maximizing:
            value = -math.inf
            for move in moves:
                _, score, child_nodes = self._alphabeta(
                    board.apply(move), depth - 1, alpha, beta, side.opponent
                )
                nodes += child_nodes
                if score > value:
                    value = score
                    best_move = move
                alpha = max(alpha, value)
                if beta <= alpha:
                    break
        else:
            value = math.inf
            for move in moves:
                _, score, child_nodes = self._alphabeta(
                    board.apply(move), depth - 1, alpha, beta, side.opponent
                )
                nodes += child_nodes
                if score < value:
                    value = score
                    best_move = move
                beta = min(beta, value)
                if beta <= alpha:
                    break
        return best_move, value, nodes
