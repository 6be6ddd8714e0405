"""Checkers engine package providing the board, move generation, evaluation and AI search.

Modules:
- board: Immutable board, pieces, squares and moves
- moves: Legal move generation with chained, mandatory captures
- evaluator: Heuristic evaluation function for positions
- ai: Minimax with alpha-beta pruning
- game: Game session orchestration (turns, validation, winner)
- notation / advisor: Move text format and the external move advisor
"""

from .board import Board, Move, Piece, Side, Square, apply_move, is_occupiable
from .moves import generate_moves, is_terminal, moves_for_player, moves_from, winner
from .evaluator import Evaluator
from .ai import AIPlayer, SearchResult
from .game import Game, IllegalMoveError, TurnReport
from .advisor import AdvisorSettings, AdvisoryClient, AdvisoryError

__all__ = [
    "Board",
    "Move",
    "Piece",
    "Side",
    "Square",
    "apply_move",
    "is_occupiable",
    "generate_moves",
    "is_terminal",
    "moves_for_player",
    "moves_from",
    "winner",
    "Evaluator",
    "AIPlayer",
    "SearchResult",
    "Game",
    "IllegalMoveError",
    "TurnReport",
    "AdvisorSettings",
    "AdvisoryClient",
    "AdvisoryError",
]
