"""Turns a completed setup profile into a bound interview."""
import logging

from config.settings import MAX_QUESTION_COUNT
from models.call_session import SessionMode
from services.llm_parsing import coerce_questions
from services.session_binding import bind_and_prime

logger = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    pass


class GenerationOrchestrator:
    def __init__(self, question_service, channel):
        self.question_service = question_service
        self.channel = channel

    def run(self, session) -> bool:
        """Generate questions for ``session`` once its setup profile is complete.

        Returns True when an interview was bound, False when the call was
        suppressed or its result discarded. Raises GenerationError on failure;
        the session is left as it was so the user can retry.
        """
        if session.mode != SessionMode.SETUP_VIA_VOICE or session.interview_id:
            return False
        if not session.profile.is_complete():
            return False
        if not session.generation_guard.try_fire():
            logger.debug("Generation already %s for session %s",
                         session.generation_guard.state, session.session_id)
            return False

        session.profile.freeze()
        request = session.profile.to_request(session.participant_id, MAX_QUESTION_COUNT)
        logger.info("Setup complete for session %s, generating interview questions", session.session_id)

        try:
            response = self.question_service.generate(request)
        except Exception as e:
            logger.exception("Generation service raised")
            self._fail(session, str(e) or "Question generation failed")

        if not isinstance(response, dict):
            self._fail(session, "Malformed response from question generation")
        if not response.get("success"):
            self._fail(session, response.get("error") or "Question generation failed")
        interview_id = response.get("interview_id")
        if not interview_id:
            self._fail(session, "Question generation returned no interview id")

        questions = coerce_questions(response.get("questions"))
        try:
            bound = bind_and_prime(session, self.channel, interview_id, questions)
        except Exception as e:
            logger.exception("Binding interview %s failed", interview_id)
            self._fail(session, str(e) or "Could not bind the generated interview")
        session.generation_guard.settle()
        if not bound:
            logger.info("Discarding generated interview %s for session %s", interview_id, session.session_id)
        return bound

    @staticmethod
    def _fail(session, error: str):
        session.last_error = error
        session.generation_guard.release()
        session.profile.thaw()
        raise GenerationError(error)
