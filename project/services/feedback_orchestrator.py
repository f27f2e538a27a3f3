"""Exactly-once feedback when an interview call ends."""
import logging
from typing import Optional

from config.settings import FEEDBACK_PATH, HOME_PATH

logger = logging.getLogger(__name__)


class FeedbackOrchestrator:
    def __init__(self, feedback_service, navigate):
        self.feedback_service = feedback_service
        self.navigate = navigate

    def run(self, session, transcript) -> Optional[str]:
        """Score the finished call and navigate. Returns the destination, if any."""
        if session.in_setup_phase:
            logger.info("Session %s ended during setup, no feedback", session.session_id)
            return None
        if not session.feedback_guard.try_fire():
            logger.debug("Feedback already handled for session %s", session.session_id)
            return None

        try:
            destination = self._score(session, transcript)
        finally:
            session.feedback_guard.settle()

        if session.disposed:
            logger.info("Session %s disposed, dropping navigation to %s", session.session_id, destination)
            return None
        try:
            self.navigate(destination)
        except Exception:
            logger.exception("Navigation to %s failed", destination)
        return destination

    def _score(self, session, transcript) -> str:
        interview_id = session.interview_id
        if not interview_id:
            session.last_error = "No interview to score"
            return HOME_PATH

        request = {
            "interview_id": interview_id,
            "participant_id": session.participant_id,
            "transcript": [e.as_message() for e in transcript],
        }
        if session.feedback_id:
            request["feedback_id"] = session.feedback_id

        try:
            response = self.feedback_service.create_feedback(request)
        except Exception:
            logger.exception("Feedback service raised")
            response = None

        if isinstance(response, dict) and response.get("success") and response.get("feedback_id"):
            session.feedback_id = response["feedback_id"]
            return FEEDBACK_PATH.format(interview_id=interview_id)

        session.last_error = "Failed to generate feedback"
        return HOME_PATH
