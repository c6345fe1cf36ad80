import logging

import pytest

from app import app, socketio
from uttt.logic import GameState, Move, apply_move


@pytest.fixture
def client():
    app.config['TESTING'] = True
    app.config['SEARCH_TIME_LIMIT'] = 0.2
    c = socketio.test_client(app)
    yield c
    if c.is_connected():
        c.disconnect()


def _only(received, name):
    events = [e for e in received if e['name'] == name]
    assert len(events) == 1, received
    return events[0]['args'][0]


def test_landing_page():
    resp = app.test_client().get('/')
    assert resp.status_code == 200
    assert b'Hello world' in resp.data


def test_connect_is_logged(caplog):
    with caplog.at_level(logging.INFO):
        c = socketio.test_client(app)
        assert c.is_connected()
        c.disconnect()
    assert 'a user connected' in caplog.text


def test_move_event_relays_new_state(client):
    client.emit('move', {'state': GameState().to_dict(),
                         'move': Move(0, 0, 1, 1).to_dict()})
    payload = _only(client.get_received(), 'state')
    assert payload['move'] == Move(0, 0, 1, 1).to_dict()
    assert payload['state']['nextZone'] == [4]
    assert payload['state']['turn'] == 'O'
    assert payload['gameOver'] is False


def test_illegal_move_is_rejected(client):
    state = apply_move(GameState(), Move(0, 0, 1, 1))
    client.emit('move', {'state': state.to_dict(), 'move': Move(0, 0, 0, 0).to_dict()})
    payload = _only(client.get_received(), 'invalid')
    assert payload['event'] == 'move'
    assert 'next zone' in payload['error']


def test_move_on_decided_game_is_rejected(client):
    data = GameState().to_dict()
    data['completed']['O'] = [0, 1, 2]
    data['turn'] = 'X'
    client.emit('move', {'state': data, 'move': Move(1, 1, 1, 1).to_dict()})
    payload = _only(client.get_received(), 'invalid')
    assert payload['event'] == 'move'
    assert 'over' in payload['error']


def test_overlapping_completion_sets_are_rejected(client):
    data = GameState().to_dict()
    data['completed'] = {'X': [0, 1, 2, 3, 5, 6, 7], 'O': [1, 3], 'D': []}
    client.emit('move', {'state': data, 'move': Move(2, 2, 2, 2).to_dict()})
    assert _only(client.get_received(), 'invalid')['event'] == 'move'


def test_malformed_payload_is_rejected(client):
    client.emit('random_move', {'state': {'board': []}})
    assert _only(client.get_received(), 'invalid')['event'] == 'random_move'


def test_random_move_event(client, one_move_from_draw):
    client.emit('random_move', {'state': one_move_from_draw.to_dict()})
    payload = _only(client.get_received(), 'state')
    assert payload['move'] == Move(2, 2, 2, 2).to_dict()
    assert payload['gameOver'] is True
    assert payload['state']['nextZone'] == []


def test_best_move_event(client, one_move_from_draw):
    client.emit('best_move', {'state': one_move_from_draw.to_dict()})
    payload = _only(client.get_received(), 'bestMove')
    assert payload['move'] == Move(2, 2, 2, 2).to_dict()
    assert payload['score'] == 0.5
    assert payload['iterations'] > 0
    assert payload['gameOver'] is True
