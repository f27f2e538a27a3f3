# routes/ws_routes.py
"""Socket.IO bridge between the browser voice client and session agents."""
import logging

from flask import request
from flask_socketio import SocketIO, emit, join_room, leave_room

from services.agent_registry import agents
from services.voice_channel import CHANNEL_EVENTS, SocketVoiceChannel

logger = logging.getLogger(__name__)

# Bound to the Flask app in app.py
socketio = SocketIO(cors_allowed_origins="*", async_mode="threading")

# sid -> session id
_joined = {}


def make_channel(session_id: str) -> SocketVoiceChannel:
    return SocketVoiceChannel(socketio, room=session_id)


def _payload(data) -> dict:
    if data is None:
        return {}
    return data if isinstance(data, dict) else {"message": data}


def _detach(session_id, sid):
    agent = agents.get(session_id) if session_id else None
    if agent is None:
        return
    agent.channel.detach(sid)
    agents.release_if_finished(session_id)


@socketio.on("connect")
def handle_connect():
    logger.info("WS client connected sid=%s", request.sid)
    emit("server_message", {"msg": "connected"})


@socketio.on("disconnect")
def handle_disconnect(*_args):
    session_id = _joined.pop(request.sid, None)
    _detach(session_id, request.sid)
    logger.info("WS client disconnected sid=%s session=%s", request.sid, session_id)


@socketio.on("join")
def handle_join(data):
    session_id = _payload(data).get("session_id")
    agent = agents.get(session_id) if session_id else None
    if agent is None:
        emit("session_error", {"error": "Unknown session"})
        return
    join_room(session_id)
    _joined[request.sid] = session_id
    agent.channel.attach(request.sid)
    emit("server_message", {"msg": f"joined session {session_id}", "status": agent.status()})


@socketio.on("leave")
def handle_leave(data):
    session_id = _payload(data).get("session_id") or _joined.get(request.sid)
    _joined.pop(request.sid, None)
    if session_id:
        leave_room(session_id)
        _detach(session_id, request.sid)


def _relay(event):
    def handler(data=None):
        data = _payload(data)
        session_id = data.get("session_id") or _joined.get(request.sid)
        agent = agents.get(session_id) if session_id else None
        if agent is None:
            logger.warning("Dropping %s event for unknown session %s", event, session_id)
            return
        try:
            agent.channel.dispatch(event, data)
        except Exception as e:
            logger.exception("Error handling %s for session %s", event, session_id)
            emit("session_error", {"error": str(e)})
    handler.__name__ = "handle_" + event.replace("-", "_")
    return handler


for _event in CHANNEL_EVENTS:
    socketio.on_event(_event, _relay(_event))
