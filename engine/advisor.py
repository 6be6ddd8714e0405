"""Move advice from an external chat-completions service.

The advisor is never trusted: whatever it proposes is matched against the
legal move set, and any failure surfaces as :class:`AdvisoryError` so the
caller can fall back to its own search.
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

import httpx
from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from .board import Board, Move, Side
from .notation import describe_move, parse_move, render_board, side_label

logger = logging.getLogger(__name__)


class AdvisorSettings(BaseSettings):
    """Advisory service configuration, read from ``CHECKERS_ADVISOR_*`` variables.

    Attributes:
        api_key: Bearer credential for the service. Opaque to the engine.
        url: Chat-completions endpoint.
        model: Model name sent with each request.
        temperature: Sampling temperature.
        max_tokens: Response token cap.
        timeout: Request timeout in seconds.
        personalities: Play styles picked at random for each request.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHECKERS_ADVISOR_",
        extra="ignore",
    )

    api_key: Optional[SecretStr] = None
    url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4"
    temperature: float = 0.8
    max_tokens: int = 500
    timeout: float = 10.0
    personalities: List[str] = [
        "aggressive", "tricky", "defensive", "psychological", "unpredictable",
    ]


class AdvisoryError(Exception):
    """Raised when the advisor cannot produce a legal move."""


@dataclass
class AdvisorySuggestion:
    move: Move
    insight: str
    personality: str


class AdvisoryClient:
    """Synchronous client for the move advisor.

    Example:
        client = AdvisoryClient(AdvisorSettings(api_key="sk-..."))
        suggestion = client.suggest(board, legal_moves, history_length=4, side=Side.BLACK)
    """

    def __init__(
        self,
        settings: Optional[AdvisorSettings] = None,
        transport: Optional[httpx.BaseTransport] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings or AdvisorSettings()
        self._transport = transport
        self._rng = rng or random.Random()
        self._client: Optional[httpx.Client] = None

    @property
    def has_credentials(self) -> bool:
        key = self.settings.api_key
        return key is not None and bool(key.get_secret_value())

    def set_api_key(self, key: str) -> None:
        self.settings.api_key = SecretStr(key)
        self.close()

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
            self._client = None

    def _get_client(self) -> httpx.Client:
        if self._client is None:
            self._client = httpx.Client(
                timeout=self.settings.timeout,
                transport=self._transport,
                headers={
                    "Content-Type": "application/json",
                    "Authorization": f"Bearer {self.settings.api_key.get_secret_value()}",
                },
            )
        return self._client

    def build_request(
        self,
        board: Board,
        legal_moves: Sequence[Move],
        history_length: int,
        side: Side,
        personality: str,
    ) -> dict:
        system = (
            f"You are a world-class checkers player with a {personality} personality. "
            "Choose strong, legal moves. Always respond with ONLY a JSON object "
            "containing your move and a brief insight."
        )
        return {
            "model": self.settings.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": self.build_prompt(
                    board, legal_moves, history_length, side, personality
                )},
            ],
            "temperature": self.settings.temperature,
            "max_tokens": self.settings.max_tokens,
        }

    @staticmethod
    def build_prompt(
        board: Board,
        legal_moves: Sequence[Move],
        history_length: int,
        side: Side,
        personality: str,
    ) -> str:
        move_lines = "\n".join(describe_move(move) for move in legal_moves)
        return (
            "CHECKERS GAME\n\n"
            f"Current Board (You are {side_label(side)}, opponent is {side_label(side.opponent)}):\n"
            f"{render_board(board)}\n\n"
            f"Your Personality: {personality}\n"
            f"Valid Moves Available: {len(legal_moves)}\n\n"
            "Available Moves (format: from_row,from_col->to_row,to_col|captures):\n"
            f"{move_lines}\n\n"
            "Game Context:\n"
            f"- Move History: {history_length} moves\n"
            f"- Opponent pieces: {board.count(side.opponent)}\n"
            f"- Your pieces: {board.count(side)}\n"
            f"- Current turn: {side.value}\n\n"
            "You MUST respond with EXACTLY this JSON format:\n"
            "{\n"
            '    "move": "from_row,from_col->to_row,to_col",\n'
            '    "insight": "A short note about this move"\n'
            "}\n"
        )

    def suggest(
        self,
        board: Board,
        legal_moves: Sequence[Move],
        history_length: int,
        side: Side,
    ) -> AdvisorySuggestion:
        if not self.has_credentials:
            raise AdvisoryError("Advisor API key not configured")
        if not legal_moves:
            raise AdvisoryError("No legal moves to choose from")

        personality = self._rng.choice(self.settings.personalities)
        payload = self.build_request(board, legal_moves, history_length, side, personality)

        try:
            response = self._get_client().post(self.settings.url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Advisor request failed: %s", e)
            raise AdvisoryError(f"Advisor request failed: {e}") from e

        if response.status_code != 200:
            raise AdvisoryError(f"Advisor API error: {response.status_code}")

        try:
            content = response.json()["choices"][0]["message"]["content"]
            result = json.loads(content)
            move = parse_move(result["move"], legal_moves)
        except (ValueError, KeyError, IndexError, TypeError) as e:
            # MoveParseError and JSONDecodeError are both ValueErrors.
            raise AdvisoryError(f"Unusable advisor response: {e}") from e

        insight = result.get("insight") or ""
        return AdvisorySuggestion(move=move, insight=str(insight), personality=personality)
