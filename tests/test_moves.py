from __future__ import annotations

from engine import (
    Board,
    Move,
    Piece,
    Side,
    Square,
    generate_moves,
    is_terminal,
    moves_for_player,
    moves_from,
    winner,
)

EMPTY_ROW = "........"


def board_from(rows_by_index):
    rows = [EMPTY_ROW] * 8
    for index, row in rows_by_index.items():
        rows[index] = row
    return Board.from_rows(rows)


def test_initial_moves():
    board = Board.initial()
    red = moves_for_player(board, Side.RED)
    black = moves_for_player(board, Side.BLACK)
    assert len(red) == 7
    assert len(black) == 7
    assert all(not m.is_capture for m in red + black)
    assert {m.origin.row for m in red} == {2}
    assert {m.destination.row for m in black} == {4}


def test_single_capture_is_the_only_move():
    board = board_from({
        2: "...r....",
        3: "....b...",
    })
    moves = moves_for_player(board, Side.BLACK)
    assert moves == [Move(Square(3, 4), Square(1, 2), (Square(2, 3),))]


def test_capture_elsewhere_forbids_simple_moves():
    board = board_from({
        2: "...r....",
        3: "....b...",
        5: "b.......",
    })
    moves = moves_for_player(board, Side.BLACK)
    assert len(moves) == 1
    assert moves[0].is_capture
    # The piece on its own still has simple moves.
    assert moves_from(board, (5, 0)) == [Move(Square(5, 0), Square(4, 1))]


def test_double_jump_returns_only_full_chain():
    board = board_from({
        2: ".....r..",
        4: "...r....",
        5: "..b.....",
    })
    moves = moves_for_player(board, Side.BLACK)
    assert moves == [Move(Square(5, 2), Square(1, 6), (Square(4, 3), Square(2, 5)))]


def test_branching_chain():
    board = board_from({
        2: "...r.r..",
        4: "...r....",
        5: "..b.....",
    })
    moves = moves_for_player(board, Side.BLACK)
    assert {m.destination for m in moves} == {Square(1, 2), Square(1, 6)}
    assert all(len(m.captures) == 2 for m in moves)
    assert all(m.captures[0] == Square(4, 3) for m in moves)


def test_men_only_move_forward():
    board = board_from({
        2: "...b....",
        3: "..r.....",
    })
    red = moves_from(board, (3, 2))
    assert {m.destination for m in red} == {Square(4, 1), Square(4, 3)}
    assert not any(m.is_capture for m in red)


def test_king_moves_in_all_directions():
    board = board_from({3: "..R....."})
    moves = moves_from(board, (3, 2))
    assert {m.destination for m in moves} == {
        Square(2, 1), Square(2, 3), Square(4, 1), Square(4, 3),
    }


def test_king_captures_backward():
    board = board_from({
        2: "...b....",
        3: "..R.....",
    })
    moves = moves_for_player(board, Side.RED)
    assert moves == [Move(Square(3, 2), Square(1, 4), (Square(2, 3),))]


def test_man_crowned_mid_chain_stops_as_man():
    board = board_from({
        1: "..r.r...",
        2: ".b......",
    })
    moves = moves_for_player(board, Side.BLACK)
    assert moves == [Move(Square(2, 1), Square(0, 3), (Square(1, 2),))]
    after = board.apply(moves[0])
    assert after.piece_at((0, 3)) == Piece(Side.BLACK, king=True)
    assert after.piece_at((1, 4)) == Piece(Side.RED)


def test_moves_from_filters_by_side():
    board = Board.initial()
    assert moves_from(board, (2, 1), side=Side.BLACK) == []
    assert len(moves_from(board, (2, 1), side=Side.RED)) == 2
    assert moves_from(board, (3, 0)) == []


def test_generate_moves_accepts_side_or_square():
    board = Board.initial()
    assert generate_moves(board, Side.RED) == moves_for_player(board, Side.RED)
    assert generate_moves(board, (5, 0)) == moves_from(board, (5, 0))


def test_blocked_side_loses():
    board = board_from({
        6: ".r......",
        7: "b.b.....",
    })
    assert moves_for_player(board, Side.RED) == []
    assert is_terminal(board)
    assert winner(board) is Side.BLACK


def test_no_pieces_is_terminal():
    board = board_from({5: "..b....."})
    assert is_terminal(board)
    assert winner(board) is Side.BLACK
    assert not is_terminal(Board.initial())
    assert winner(Board.initial()) is None


def _check_capture_geometry(move):
    assert len(set(move.captures)) == len(move.captures)
    current = move.origin
    for captured in move.captures:
        d_row = captured.row - current.row
        d_col = captured.col - current.col
        assert abs(d_row) == 1 and abs(d_col) == 1
        current = Square(captured.row + d_row, captured.col + d_col)
    assert current == move.destination


def test_generated_moves_hold_invariants_over_a_game():
    board = Board.initial()
    side = Side.RED
    for ply in range(60):
        moves = moves_for_player(board, side)
        if not moves:
            break
        if any(m.is_capture for m in moves):
            assert all(m.is_capture for m in moves)
        for move in moves:
            if move.is_capture:
                _check_capture_geometry(move)
        move = moves[(ply * 7) % len(moves)]
        board = board.apply(move)
        assert board.piece_at(move.origin) is None
        assert all(m.origin != move.origin for m in moves_for_player(board, side))
        piece = board.piece_at(move.destination)
        if move.destination.row == side.crowning_row:
            assert piece.king
        side = side.opponent


def test_winner_checks_side_to_move_first():
    board = board_from({
        4: "........",
        5: "r.r.r.r.",
        6: ".r.r.r.r",
        7: "b.b.b.b.",
    })
    assert moves_for_player(board, Side.RED) == []
    assert moves_for_player(board, Side.BLACK) == []
    assert winner(board) is Side.BLACK
    assert winner(board, to_move=Side.BLACK) is Side.RED
    assert winner(board, to_move=Side.RED) is Side.BLACK
