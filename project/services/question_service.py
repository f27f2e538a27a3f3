"""Interview question generation service."""
import logging

from config.settings import MAX_QUESTION_COUNT
from prompts.system_prompts import QUESTION_GENERATION_PROMPT
from services.ai_service import AIService
from services.interview_store import interview_store
from services.llm_parsing import parse_question_list

logger = logging.getLogger(__name__)


def _split_techstack(techstack: str) -> list:
    return [t.strip() for t in (techstack or "").split(",") if t.strip()]


class QuestionService:
    """Generates interview questions from setup answers and stores the interview."""

    def __init__(self, store=None, ai=AIService):
        self.store = store or interview_store
        self.ai = ai

    def generate(self, request: dict) -> dict:
        request = request or {}
        participant_id = request.get("participant_id") or ""
        role = request.get("role") or "developer"
        kind = request.get("interview_kind") or "technical"
        level = request.get("experience_level") or "junior"
        techstack = request.get("tech_stack") or ""
        try:
            amount = max(1, min(int(request.get("question_count") or 5), MAX_QUESTION_COUNT))
        except (TypeError, ValueError):
            amount = 5

        if not participant_id:
            return {"success": False, "error": "Missing required field: participant_id"}

        try:
            raw = self.ai.generate_text(
                QUESTION_GENERATION_PROMPT.format(
                    role=role,
                    level=level,
                    techstack=techstack or "general",
                    kind=kind,
                    amount=amount,
                ),
                temperature=0.7,
                max_tokens=1200,
            )
            questions = parse_question_list(raw) or [raw.strip()]

            interview_id = self.store.create_interview({
                "user_id": participant_id,
                "role": role,
                "type": kind,
                "level": level,
                "techstack": _split_techstack(techstack),
                "questions": questions,
                "finalized": True,
            })
        except Exception as e:
            logger.exception("Question generation failed")
            return {"success": False, "error": str(e)}

        return {"success": True, "interview_id": interview_id, "questions": questions}
