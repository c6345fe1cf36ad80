import os
ASYNC_MODE = os.environ.get('SOCKETIO_ASYNC_MODE', 'gevent')
if ASYNC_MODE == 'gevent':
    from gevent import monkey
    monkey.patch_all()

from flask import Flask, request
from flask_socketio import SocketIO, emit
from uttt.ai import SEARCH_TIME_LIMIT, compute_best_move, compute_random_move
from uttt.errors import GameError
from uttt.logic import GameState, Move, apply_move, settle
import logging

app = Flask(__name__)
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'a_secret_key')
app.config['SEARCH_TIME_LIMIT'] = float(os.environ.get('SEARCH_TIME_LIMIT', SEARCH_TIME_LIMIT))
app.logger.setLevel(logging.INFO)
socketio = SocketIO(app, async_mode=ASYNC_MODE)


def _state_payload(move, state):
    return {'move': move.to_dict() if move else None,
            'state': state.to_dict(),
            'gameOver': state.game_over}

def _invalid(event, err):
    app.logger.warning("[%s] rejected from %s: %s", event, request.sid, err)
    emit('invalid', {'event': event, 'error': str(err)})

# ── Routes ───────────────────────────────────────────────────────────────────
@app.route('/')
def landing(): return '<h1>Hello world</h1>'

# ── SocketIO Events ───────────────────────────────────────────────────────────
@socketio.on('connect')
def connect():
    app.logger.info("a user connected (%s)", request.sid)

@socketio.on('disconnect')
def disconnect():
    app.logger.info("user disconnected (%s)", request.sid)

@socketio.on('move')
def move(data):
    try:
        state = settle(GameState.from_dict(data['state']))
        mv    = Move.from_dict(data['move'])
        new_state = apply_move(state, mv)
    except (KeyError, TypeError, ValueError, GameError) as e:
        _invalid('move', e); return
    emit('state', _state_payload(mv, new_state))

@socketio.on('random_move')
def random_move(data):
    try:
        result = compute_random_move(GameState.from_dict(data['state']))
    except (KeyError, TypeError, ValueError, GameError) as e:
        _invalid('random_move', e); return
    emit('state', _state_payload(result.move, result.state))

@socketio.on('best_move')
def best_move(data):
    try:
        state = GameState.from_dict(data['state'])
    except (KeyError, TypeError, ValueError) as e:
        _invalid('best_move', e); return
    socketio.sleep(0)  # yield to event loop so earlier emits are flushed
    try:
        result = compute_best_move(state, time_limit=app.config['SEARCH_TIME_LIMIT'])
    except GameError as e:
        _invalid('best_move', e); return
    app.logger.info("[ai] %s -> %s (score %.3f, %d iterations)",
                    request.sid, result.move, result.score, result.iterations)
    payload = _state_payload(result.move, result.state)
    payload.update(score=result.score, iterations=result.iterations)
    emit('bestMove', payload)

if __name__ == "__main__":
    socketio.run(app, debug=True)
