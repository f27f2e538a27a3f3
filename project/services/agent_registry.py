"""Live interview agents, keyed by session id (also the Socket.IO room)."""
import logging
import threading
import uuid

from models.call_session import CallStatus
from services.interview_agent import InterviewAgent

logger = logging.getLogger(__name__)


class AgentRegistry:
    def __init__(self):
        self._agents = {}
        self._lock = threading.Lock()
        self.service_overrides = {}

    def create(self, channel_factory, **kwargs):
        """Create an agent whose channel is built by ``channel_factory(session_id)``."""
        session_id = uuid.uuid4().hex
        for name, service in self.service_overrides.items():
            kwargs.setdefault(name, service)
        kwargs.setdefault("on_finished", lambda _agent: self.release_if_finished(session_id))
        agent = InterviewAgent(channel_factory(session_id), **kwargs)
        with self._lock:
            self._agents[session_id] = agent
        logger.info("Created %s session %s for user %s",
                    agent.session.mode.value, session_id, kwargs.get("participant_id"))
        return session_id, agent

    def get(self, session_id: str):
        with self._lock:
            return self._agents.get(session_id)

    def remove(self, session_id: str) -> bool:
        with self._lock:
            agent = self._agents.pop(session_id, None)
        if agent is None:
            return False
        agent.close()
        return True

    def release_if_finished(self, session_id: str) -> bool:
        """Drop a finished agent once no voice client is left in its room."""
        agent = self.get(session_id)
        if agent is None or agent.session.status != CallStatus.FINISHED:
            return False
        if getattr(agent.channel, "connected", False):
            return False
        logger.info("Evicting finished session %s", session_id)
        return self.remove(session_id)

    def __len__(self):
        with self._lock:
            return len(self._agents)

    def clear(self):
        with self._lock:
            agents = list(self._agents.values())
            self._agents = {}
        for agent in agents:
            agent.close()


# Global registry instance
agents = AgentRegistry()
