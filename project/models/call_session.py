"""Per-call interview session state."""
import threading
import uuid
from enum import Enum
from typing import List, Optional

from models.setup_profile import ResumeArtifact, SetupProfile
from models.transcript import TranscriptLog


class CallStatus(str, Enum):
    INACTIVE = "INACTIVE"
    CONNECTING = "CONNECTING"
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"


class SessionMode(str, Enum):
    SETUP_VIA_VOICE = "generate"
    RESUME_BASED = "resume"
    PRE_SUPPLIED = "interview"


class StateTransitionError(RuntimeError):
    pass


class OneShot:
    """Tri-state guard for a side effect that must not run concurrently or twice."""

    NOT_FIRED = "not-fired"
    IN_FLIGHT = "in-flight"
    FIRED = "fired"

    def __init__(self, name: str):
        self.name = name
        self.state = self.NOT_FIRED
        self._lock = threading.Lock()

    def try_fire(self) -> bool:
        with self._lock:
            if self.state != self.NOT_FIRED:
                return False
            self.state = self.IN_FLIGHT
            return True

    def settle(self):
        with self._lock:
            self.state = self.FIRED

    def release(self):
        with self._lock:
            self.state = self.NOT_FIRED

    @property
    def in_flight(self) -> bool:
        return self.state == self.IN_FLIGHT

    @property
    def fired(self) -> bool:
        return self.state == self.FIRED


class CallSession:
    """State of one interview attempt.

    Status moves INACTIVE -> CONNECTING -> ACTIVE -> FINISHED. FINISHED is
    terminal; restarting requires a new CallSession.
    """

    VALID_TRANSITIONS = {
        CallStatus.INACTIVE: [CallStatus.CONNECTING],
        CallStatus.CONNECTING: [CallStatus.ACTIVE, CallStatus.INACTIVE, CallStatus.FINISHED],
        CallStatus.ACTIVE: [CallStatus.FINISHED],
        CallStatus.FINISHED: [],
    }

    def __init__(
        self,
        mode,
        participant_id: str,
        participant_name: str = "",
        interview_id: Optional[str] = None,
        feedback_id: Optional[str] = None,
        questions: Optional[List[str]] = None,
    ):
        self.session_id = uuid.uuid4().hex
        self.mode = SessionMode(mode)
        self.participant_id = participant_id
        self.participant_name = participant_name
        self.status = CallStatus.INACTIVE
        self.feedback_id = feedback_id
        self.questions: List[str] = list(questions or [])

        self.transcript = TranscriptLog()
        self.profile = SetupProfile()
        self.resume: Optional[ResumeArtifact] = None

        self.generation_guard = OneShot("generation")
        self.feedback_guard = OneShot("feedback")
        self.resume_guard = OneShot("resume")

        self.disposed = False
        self.is_speaking = False
        self.last_error: Optional[str] = None

        self._interview_id = interview_id or None
        self._lock = threading.RLock()

    @property
    def interview_id(self) -> Optional[str]:
        return self._interview_id

    @property
    def in_setup_phase(self) -> bool:
        """True while the call is only gathering interview parameters."""
        return self.mode == SessionMode.SETUP_VIA_VOICE and self._interview_id is None

    @property
    def accepts_setup_input(self) -> bool:
        return (
            self.in_setup_phase
            and not self.disposed
            and self.status != CallStatus.FINISHED
            and self.generation_guard.state == OneShot.NOT_FIRED
            and not self.profile.frozen
        )

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _transition(self, target: CallStatus):
        if target not in self.VALID_TRANSITIONS[self.status]:
            raise StateTransitionError(f"Cannot move call from {self.status.value} to {target.value}")
        self.status = target

    def begin_connecting(self):
        with self._lock:
            if self.disposed:
                raise StateTransitionError("Session has been disposed")
            self._transition(CallStatus.CONNECTING)
            self.last_error = None

    def fail_connecting(self, error: str):
        with self._lock:
            if self.status == CallStatus.CONNECTING:
                self._transition(CallStatus.INACTIVE)
            self.last_error = error

    def mark_active(self) -> bool:
        with self._lock:
            if self.status != CallStatus.CONNECTING:
                return False
            self._transition(CallStatus.ACTIVE)
            return True

    def finish(self) -> bool:
        """Enter FINISHED. Returns True only for the call that made the transition."""
        with self._lock:
            if CallStatus.FINISHED not in self.VALID_TRANSITIONS[self.status]:
                return False
            self._transition(CallStatus.FINISHED)
            self.is_speaking = False
            return True

    # ------------------------------------------------------------------
    # Interview binding
    # ------------------------------------------------------------------

    def bind_interview(self, interview_id: str, questions: List[str], replace: bool = False) -> bool:
        """Bind the interview id together with the questions it carries."""
        with self._lock:
            if self.disposed or not interview_id:
                return False
            if self._interview_id and not replace:
                return False
            self._interview_id = interview_id
            self.questions = list(questions)
            return True

    def dispose(self):
        with self._lock:
            self.disposed = True

    def snapshot(self) -> dict:
        latest = self.transcript.latest()
        return {
            "session_id": self.session_id,
            "mode": self.mode.value,
            "status": self.status.value,
            "interview_id": self._interview_id,
            "feedback_id": self.feedback_id,
            "is_speaking": self.is_speaking,
            "last_message": latest.text if latest else "",
            "messages": len(self.transcript),
            "missing_setup_fields": self.profile.missing_fields() if self.in_setup_phase else [],
            "questions": list(self.questions),
            "last_error": self.last_error,
        }
