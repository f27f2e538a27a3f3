"""Voice agent event channel."""
import logging
import threading
from collections import defaultdict
from contextlib import contextmanager

logger = logging.getLogger(__name__)

CALL_START = "call-start"
CALL_END = "call-end"
MESSAGE = "message"
SPEECH_START = "speech-start"
SPEECH_END = "speech-end"
ERROR = "error"

CHANNEL_EVENTS = (CALL_START, CALL_END, MESSAGE, SPEECH_START, SPEECH_END, ERROR)


class ChannelError(RuntimeError):
    """The voice channel could not be opened or used. The user may retry."""


class VoiceChannel:
    """Bidirectional event channel to a voice agent.

    Inbound events are delivered through ``dispatch``; subclasses implement the
    outbound operations ``start``, ``send`` and ``stop``.
    """

    def __init__(self):
        self._listeners = defaultdict(list)
        self._lock = threading.Lock()

    def on(self, event: str, handler):
        if event not in CHANNEL_EVENTS:
            raise ValueError(f"Unknown channel event: {event}")
        with self._lock:
            self._listeners[event].append(handler)

    def off(self, event: str, handler):
        with self._lock:
            try:
                self._listeners[event].remove(handler)
            except ValueError:
                pass

    def listener_count(self, event: str = None) -> int:
        with self._lock:
            if event:
                return len(self._listeners[event])
            return sum(len(v) for v in self._listeners.values())

    @contextmanager
    def subscribe(self, handlers: dict):
        """Register ``{event: handler}`` for the duration of the context."""
        for event, handler in handlers.items():
            self.on(event, handler)
        try:
            yield self
        finally:
            for event, handler in handlers.items():
                self.off(event, handler)

    def dispatch(self, event: str, payload=None):
        with self._lock:
            handlers = list(self._listeners[event])
        if not handlers:
            logger.debug("No listener for channel event %s", event)
        for handler in handlers:
            handler(payload)

    def start(self, agent: dict, variable_values: dict):
        raise NotImplementedError

    def send(self, message: dict):
        raise NotImplementedError

    def stop(self):
        raise NotImplementedError

    def navigate(self, path: str):
        """Hand navigation off to the client."""

    def notify(self, message: str):
        """Surface a user-visible error."""


class SocketVoiceChannel(VoiceChannel):
    """Relays channel operations to the browser voice client in a Socket.IO room."""

    def __init__(self, socketio, room: str):
        super().__init__()
        self.socketio = socketio
        self.room = room
        self.clients = set()

    def attach(self, sid: str):
        self.clients.add(sid)

    def detach(self, sid: str):
        self.clients.discard(sid)

    @property
    def connected(self) -> bool:
        return bool(self.clients)

    def _emit(self, event: str, data: dict):
        self.socketio.emit(event, data, to=self.room)

    def start(self, agent: dict, variable_values: dict):
        if not self.connected:
            raise ChannelError(f"No voice client connected for session {self.room}")
        self._emit("agent_start", {"agent": agent, "variable_values": variable_values})

    def send(self, message: dict):
        if not self.connected:
            raise ChannelError(f"No voice client connected for session {self.room}")
        self._emit("agent_send", message)

    def stop(self):
        self._emit("agent_stop", {})

    def navigate(self, path: str):
        self._emit("navigate", {"url": path})

    def notify(self, message: str):
        self._emit("session_error", {"error": message})
