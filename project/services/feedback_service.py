"""Feedback scoring service."""
import logging

from config.settings import GEMINI_FEEDBACK_MODEL
from models.feedback import FEEDBACK_CATEGORIES, FeedbackReport
from prompts.system_prompts import FEEDBACK_PROMPT, FEEDBACK_SYSTEM
from services.ai_service import AIService
from services.interview_store import interview_store

logger = logging.getLogger(__name__)


def format_transcript(transcript: list) -> str:
    lines = []
    for turn in transcript or []:
        text = (turn.get("content") or "").strip()
        if text:
            lines.append(f"- {turn.get('role', 'user')}: {text}")
    return "\n".join(lines)


class FeedbackService:
    """Scores a finished interview and stores the feedback document."""

    def __init__(self, store=None, ai=AIService):
        self.store = store or interview_store
        self.ai = ai

    def create_feedback(self, request: dict) -> dict:
        interview_id = request.get("interview_id")
        participant_id = request.get("participant_id")
        transcript = request.get("transcript") or []
        if not interview_id:
            return {"success": False, "error": "Missing interview_id"}

        try:
            report = self.ai.generate_structured(
                FEEDBACK_PROMPT.format(
                    transcript=format_transcript(transcript) or "(No answers captured)",
                    categories="\n".join(f"- {c}" for c in FEEDBACK_CATEGORIES),
                ),
                FeedbackReport,
                system=FEEDBACK_SYSTEM,
                model=GEMINI_FEEDBACK_MODEL,
            )
            doc = {"interview_id": interview_id, "user_id": participant_id}
            doc.update(report.model_dump())
            feedback_id = self.store.save_feedback(doc, request.get("feedback_id"))
        except Exception as e:
            logger.error("Error saving feedback for interview %s: %s", interview_id, e)
            return {"success": False}

        logger.info("Stored feedback %s for interview %s", feedback_id, interview_id)
        return {"success": True, "feedback_id": feedback_id}

    def get_feedback(self, interview_id: str, participant_id: str):
        return self.store.feedback_for_interview(interview_id, participant_id)
