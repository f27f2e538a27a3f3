"""Resume upload as an alternate way to set up an interview."""
import logging
from typing import Optional

from config.settings import RESUME_MAX_BYTES
from models.setup_profile import ResumeArtifact
from services.llm_parsing import coerce_questions, parse_question_list
from services.session_binding import bind_and_prime

logger = logging.getLogger(__name__)


class ResumeIntakeError(RuntimeError):
    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code


class ResumeIntake:
    def __init__(self, resume_service, channel):
        self.resume_service = resume_service
        self.channel = channel

    def run(self, session, document: bytes, filename: str = "") -> Optional[ResumeArtifact]:
        """Analyse ``document`` and rebind the session to the resulting interview.

        A new upload replaces any interview already bound. Returns None when
        another upload is in flight or the session went away meanwhile.
        """
        if not document:
            raise ResumeIntakeError("No file uploaded")
        if len(document) > RESUME_MAX_BYTES:
            raise ResumeIntakeError("Resume file is too large")
        if session.disposed:
            return None
        if not session.resume_guard.try_fire():
            logger.debug("Resume upload already in flight for session %s", session.session_id)
            return None

        try:
            response = self.resume_service.analyze(bytes(document), filename, session.participant_id)
        except Exception as e:
            logger.exception("Resume service raised")
            session.last_error = "Resume analysis failed"
            raise ResumeIntakeError(str(e) or "Resume analysis failed", status_code=502) from e
        finally:
            session.resume_guard.release()

        if not isinstance(response, dict) or not response.get("success") or not response.get("interview_id"):
            error = (response or {}).get("error") if isinstance(response, dict) else None
            session.last_error = error or "Resume analysis failed"
            raise ResumeIntakeError(session.last_error, status_code=502)

        artifact = ResumeArtifact(
            filename=filename or "",
            size=len(document),
            interview_id=response["interview_id"],
            questions=coerce_questions(response.get("questions")),
            improvements=parse_question_list(response.get("improvements")),
        )
        if not bind_and_prime(session, self.channel, artifact.interview_id, artifact.questions, replace=True):
            return None
        session.resume = artifact
        return artifact
