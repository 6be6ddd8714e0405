from __future__ import annotations

import time

from web import create_app
from web.app import DIFFICULTY_DEPTHS
from engine import AIPlayer, Board, Game, Side


def test_engine_depths_respond_quickly():
    g = Game()
    g.push_squares((2, 3), (3, 4))
    ai = AIPlayer()
    for depth in (2, 3, 4):
        start = time.time()
        result = ai.search(g.board, depth, Side.BLACK)
        assert result.best_move is not None
        assert result.best_move.origin.row >= 5
        assert time.time() - start < 30.0


def test_deeper_search_visits_more_nodes():
    ai = AIPlayer()
    nodes = [ai.search(Board.initial(), depth, Side.BLACK).nodes for depth in (1, 2, 3)]
    assert nodes == sorted(nodes)
    assert nodes[0] < nodes[-1]


def test_difficulty_depths():
    assert DIFFICULTY_DEPTHS == {"easy": 2, "medium": 3, "hard": 4, "expert": 5}


def test_api_expert_returns_ai_move():
    app = create_app()
    client = app.test_client()
    r = client.post("/api/new", json={"difficulty": "expert"})
    assert r.status_code == 200
    r = client.post("/api/move", json={"from": [2, 3], "to": [3, 4]})
    assert r.status_code == 200
    data = r.get_json()
    assert "ai_move" in data and data["ai_move"]
    assert data["ai_move"]["source"] == "search"
