"""Drives one interview session from voice channel events."""
import logging
from contextlib import ExitStack
from typing import Optional

from config.settings import FEEDBACK_PATH
from models.call_session import CallSession, CallStatus, SessionMode
from models.transcript import SPEAKERS, PARTICIPANT, TranscriptEntry
from prompts.system_prompts import INTERVIEWER, RESUME_WAITING, SETUP_GREETING
from services import voice_channel as ch
from services.feedback_orchestrator import FeedbackOrchestrator
from services.feedback_service import FeedbackService
from services.generation_orchestrator import GenerationError, GenerationOrchestrator
from services.llm_parsing import format_questions
from services.question_service import QuestionService
from services.resume_intake import ResumeIntake
from services.resume_service import ResumeService
from services.setup_extractor import extract_setup_fields
from services.voice_channel import ChannelError

logger = logging.getLogger(__name__)


class InterviewAgent:
    """Owns the current CallSession and its subscription to the voice channel.

    The subscription is opened with each session and released when the call
    finishes, when the session is replaced and when the agent is closed.
    """

    def __init__(
        self,
        channel,
        mode,
        participant_id: str,
        participant_name: str = "",
        interview_id: Optional[str] = None,
        feedback_id: Optional[str] = None,
        questions=None,
        question_service=None,
        resume_service=None,
        feedback_service=None,
        on_finished=None,
    ):
        self.channel = channel
        self.on_finished = on_finished
        self.generation = GenerationOrchestrator(question_service or QuestionService(), channel)
        self.resume_intake = ResumeIntake(resume_service or ResumeService(), channel)
        self.feedback = FeedbackOrchestrator(feedback_service or FeedbackService(), channel.navigate)
        self._subscription = ExitStack()
        self.closed = False
        self.session = None
        self._open_session(CallSession(
            mode,
            participant_id,
            participant_name=participant_name,
            interview_id=interview_id,
            feedback_id=feedback_id,
            questions=questions,
        ))

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
        return False

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def _open_session(self, session: CallSession):
        self._release_subscription()
        self.session = session
        handlers = {
            ch.CALL_START: self._on_call_start,
            ch.CALL_END: self._on_call_end,
            ch.MESSAGE: self._on_message,
            ch.SPEECH_START: self._on_speech_start,
            ch.SPEECH_END: self._on_speech_end,
            ch.ERROR: self._on_error,
        }
        self._subscription.enter_context(self.channel.subscribe(handlers))

    def _release_subscription(self):
        self._subscription.close()
        self._subscription = ExitStack()

    def _renew_session(self) -> CallSession:
        old = self.session
        old.dispose()
        return CallSession(
            old.mode,
            old.participant_id,
            participant_name=old.participant_name,
            interview_id=old.interview_id,
            feedback_id=old.feedback_id,
            questions=old.questions,
        )

    def opening_questions(self) -> str:
        session = self.session
        name = session.participant_name or "there"
        if session.in_setup_phase:
            return SETUP_GREETING.format(name=name)
        if session.questions:
            return format_questions(session.questions)
        if session.mode == SessionMode.RESUME_BASED:
            return RESUME_WAITING.format(name=name)
        return ""

    def start(self) -> bool:
        """Open the call. Returns False if a call is already connecting or live.

        Raises ChannelError when the channel cannot be opened; the session goes
        back to INACTIVE and the user may retry.
        """
        if self.closed:
            raise ChannelError("Interview session is closed")
        if self.session.status == CallStatus.FINISHED:
            self._open_session(self._renew_session())
        if self.session.status != CallStatus.INACTIVE:
            return False

        session = self.session
        session.begin_connecting()
        try:
            self.channel.start(INTERVIEWER, {"questions": self.opening_questions()})
        except Exception as e:
            logger.error("Start call error for session %s: %s", session.session_id, e)
            session.fail_connecting(str(e) or "Could not start the call")
            if isinstance(e, ChannelError):
                raise
            raise ChannelError(str(e)) from e
        return True

    def disconnect(self) -> Optional[str]:
        """End the call from the user side. Returns the navigation destination."""
        return self._finish(stop_channel=True)

    def _finish(self, stop_channel: bool) -> Optional[str]:
        session = self.session
        if not session.finish():
            return None
        if stop_channel:
            self._stop_channel()
        self._release_subscription()
        transcript = session.transcript.snapshot()
        destination = self.feedback.run(session, transcript)
        if self.on_finished is not None:
            self.on_finished(self)
        return destination

    def _stop_channel(self):
        try:
            self.channel.stop()
        except Exception:
            logger.exception("Channel stop failed for session %s", self.session.session_id)

    def close(self):
        """Dispose the agent: release the channel and ignore late results."""
        if self.closed:
            return
        self.closed = True
        session = self.session
        if session.status in (CallStatus.CONNECTING, CallStatus.ACTIVE):
            self._stop_channel()
        session.dispose()
        self._release_subscription()

    # ------------------------------------------------------------------
    # Setup producers
    # ------------------------------------------------------------------

    def _generate(self) -> bool:
        try:
            return self.generation.run(self.session)
        except GenerationError as e:
            logger.warning("Error generating questions for session %s: %s", self.session.session_id, e)
            if not self.session.disposed:
                self.channel.notify(f"Could not generate interview questions: {e}")
            return False

    def retry_generation(self) -> bool:
        """User-requested retry after a failed generation. Raises GenerationError."""
        return self.generation.run(self.session)

    def upload_resume(self, document: bytes, filename: str = ""):
        return self.resume_intake.run(self.session, document, filename)

    # ------------------------------------------------------------------
    # Channel handlers
    # ------------------------------------------------------------------

    def _on_call_start(self, _payload=None):
        self.session.mark_active()

    def _on_call_end(self, _payload=None):
        self._finish(stop_channel=False)

    def _on_message(self, message):
        message = message or {}
        if message.get("type") != "transcript" or message.get("transcriptType") != "final":
            return
        session = self.session
        if session.status == CallStatus.FINISHED or session.disposed:
            return
        text = (message.get("transcript") or "").strip()
        if not text:
            return
        role = message.get("role") if message.get("role") in SPEAKERS else PARTICIPANT
        session.transcript.append(TranscriptEntry(role, text))

        if role == PARTICIPANT and session.accepts_setup_input:
            # only a changed setup fires generation; plain retries go through retry_generation
            changed = session.profile.merge(extract_setup_fields(text, session.profile))
            if changed and session.profile.is_complete():
                self._generate()

    def _on_speech_start(self, _payload=None):
        self.session.is_speaking = True

    def _on_speech_end(self, _payload=None):
        self.session.is_speaking = False

    def _on_error(self, error):
        logger.error("Voice channel error for session %s: %s", self.session.session_id, error)
        if isinstance(error, dict):
            error = error.get("message") or error.get("error") or error
        self.session.last_error = str(error)

    def status(self) -> dict:
        snapshot = self.session.snapshot()
        snapshot["feedback_url"] = (
            FEEDBACK_PATH.format(interview_id=snapshot["interview_id"]) if snapshot["interview_id"] else None
        )
        return snapshot
