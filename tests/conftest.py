"""Shared fixtures: seeded random sources and hand-built positions."""
import os
import random

os.environ.setdefault('SOCKETIO_ASYNC_MODE', 'threading')

import pytest

from uttt.logic import GameState, empty_completed


def make_state(marks=None, completed=None, turn="X", zone=None, game_over=False):
    """Build a position from {(sub_code, cell): symbol} and {key: codes}."""
    state = GameState(turn=turn, next_zone=zone, game_over=game_over)
    for (code, cell), symbol in (marks or {}).items():
        state.board[code][cell] = symbol
    state.completed = empty_completed()
    for key, codes in (completed or {}).items():
        state.completed[key].update(codes)
    return state


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def one_move_from_win():
    """X owns sub-boards 0 and 1 and plays in sub-board 2 with X X _ on its top row."""
    marks = {(0, 0): "X", (0, 1): "X", (0, 2): "X",
             (1, 0): "X", (1, 1): "X", (1, 2): "X",
             (2, 0): "X", (2, 1): "X", (2, 3): "O", (2, 4): "O",
             (4, 4): "O", (6, 6): "O", (3, 0): "O"}
    return make_state(marks, {"X": {0, 1}}, turn="X", zone={2})


@pytest.fixture
def one_move_from_draw():
    """Eight sub-boards decided without a meta line; sub-board 8 has one cell left
    and filling it cannot make a line."""
    row = ["X", "O", "X",
           "X", "O", "O",
           "O", "X", None]
    marks = {(8, cell): symbol for cell, symbol in enumerate(row) if symbol}
    completed = {"X": {0, 5, 7}, "O": {1, 2, 3}, "D": {4, 6}}
    return make_state(marks, completed, turn="X", zone={8})
