from __future__ import annotations

import logging
import math
import sys
from pathlib import Path
from typing import Dict, Optional

from flask import Flask, jsonify, request

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from engine import AdvisorSettings, AdvisoryClient, Game, Side, TurnReport
from engine.game import move_to_dict

logger = logging.getLogger(__name__)

DIFFICULTY_DEPTHS: Dict[str, int] = {
    "easy": 2,
    "medium": 3,
    "hard": 4,
    "expert": 5,
}
DEFAULT_DIFFICULTY = "medium"
MIN_API_KEY_LENGTH = 21


def depth_for(difficulty: Optional[str]) -> int:
    key = (difficulty or DEFAULT_DIFFICULTY).lower()
    if key not in DIFFICULTY_DEPTHS:
        raise ValueError(f"Unknown difficulty: {difficulty}")
    return DIFFICULTY_DEPTHS[key]


def _report_to_dict(report: TurnReport) -> Dict[str, object]:
    score = report.score
    if score is not None and not math.isfinite(score):
        # JSON has no infinity; a forced result is reported by sign.
        score = 1e9 if score > 0 else -1e9
    return {
        "move": move_to_dict(report.move) if report.move else None,
        "source": report.source,
        "score": score,
        "nodes": report.nodes,
        "insight": report.insight,
        "personality": report.personality,
    }


def create_app(advisor_settings: Optional[AdvisorSettings] = None) -> Flask:
    app = Flask(__name__)

    game = Game()
    advisor = AdvisoryClient(advisor_settings)
    session = {"difficulty": DEFAULT_DIFFICULTY, "mode": "offline"}

    def machine_reply() -> Dict[str, object]:
        if not game.is_machine_turn:
            return {"ai_move": None, "notice": None}
        use_advisor = session["mode"] == "online"
        report = game.machine_move(
            depth_for(session["difficulty"]), advisor if use_advisor else None
        )
        return {"ai_move": _report_to_dict(report), "notice": report.notice}

    def update_session(data: Dict[str, object]) -> None:
        if "difficulty" in data:
            difficulty = str(data["difficulty"]).lower()
            depth_for(difficulty)
            session["difficulty"] = difficulty
        if "mode" in data:
            mode = str(data["mode"]).lower()
            if mode not in ("offline", "online"):
                raise ValueError(f"Unknown mode: {mode}")
            session["mode"] = mode

    @app.errorhandler(ValueError)
    def handle_value_error(exc: ValueError):
        return jsonify({"error": str(exc)}), 400

    @app.get("/api/state")
    def api_state():
        snap = game.snapshot()
        snap.update(session)
        return jsonify(snap)

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        human_side = Side(str(data.get("human_side") or game.human_side.value).lower())
        update_session(data)

        game.reset(human_side=human_side)
        # If the human chose black, the machine (red) opens immediately
        reply = machine_reply()

        snap = game.snapshot()
        snap.update(session)
        snap.update(reply)
        return jsonify(snap)

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True) or {}
        origin = payload.get("from")
        destination = payload.get("to")
        if not origin or not destination:
            return jsonify({"error": "Missing move"}), 400
        update_session(payload)

        if game.turn is not game.human_side:
            return jsonify({"error": "Not your turn"}), 400
        game.push_squares(_parse_square(origin), _parse_square(destination))

        reply = machine_reply()
        snap = game.snapshot()
        snap.update(session)
        snap.update(reply)
        return jsonify(snap)

    @app.get("/api/moves")
    def api_moves():
        row = request.args.get("row", type=int)
        col = request.args.get("col", type=int)
        if row is None or col is None:
            return jsonify({"error": "row and col are required"}), 400
        moves = game.legal_moves((row, col))
        return jsonify({"moves": [move_to_dict(m) for m in moves]})

    @app.post("/api/advisor/key")
    def api_advisor_key():
        data = request.get_json(silent=True) or {}
        key = str(data.get("api_key") or "").strip()
        if len(key) < MIN_API_KEY_LENGTH:
            return jsonify({"error": "Please enter a valid API key."}), 400
        advisor.set_api_key(key)
        logger.info("Advisor API key updated")
        return jsonify({"ok": True})

    return app


def _parse_square(value: object):
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"Square must be [row, col], got {value!r}")
    return int(value[0]), int(value[1])


app = create_app()

if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host="0.0.0.0", port=5000, debug=True)
