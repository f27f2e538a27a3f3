"""Resume analysis service: resume in, tailored interview out."""
import logging

from config.settings import RESUME_PROMPT_CHARS
from prompts.system_prompts import RESUME_ANALYSIS_PROMPT
from services.ai_service import AIService
from services.document_parser import extract_text
from services.interview_store import interview_store
from services.llm_parsing import (
    DEFAULT_IMPROVEMENTS,
    DEFAULT_QUESTIONS,
    extract_json_object,
    parse_question_list,
)

logger = logging.getLogger(__name__)


class ResumeService:
    def __init__(self, store=None, ai=AIService):
        self.store = store or interview_store
        self.ai = ai

    def analyze(self, document: bytes, filename: str, participant_id: str) -> dict:
        if not document:
            return {"success": False, "error": "No file uploaded"}

        try:
            resume_text = extract_text(document, filename)
            if not resume_text:
                resume_text = f"[Uploaded resume: {filename or 'unknown'} ({len(document)} bytes), no text could be extracted]"

            raw = self.ai.generate_text(
                RESUME_ANALYSIS_PROMPT.format(resume=resume_text[:RESUME_PROMPT_CHARS]),
                temperature=0.5,
                max_tokens=1500,
            )
            logger.debug("Raw resume analysis output: %r", raw)

            parsed = extract_json_object(raw)
            if parsed is None:
                logger.warning("Failed to parse resume analysis JSON, using fallback")
                parsed = {}
            questions = parse_question_list(parsed.get("questions")) or list(DEFAULT_QUESTIONS)
            improvements = parse_question_list(parsed.get("resume_improvements")) or list(DEFAULT_IMPROVEMENTS)

            interview_id = self.store.create_interview({
                "user_id": participant_id,
                "type": "resume-based",
                "role": "resume-based",
                "techstack": [],
                "questions": questions,
                "resume_improvements": improvements,
                "finalized": True,
                "raw_ai_response": raw,
            })
        except Exception as e:
            logger.exception("Resume analysis failed")
            return {"success": False, "error": str(e) or "Internal Server Error"}

        return {
            "success": True,
            "interview_id": interview_id,
            "questions": questions,
            "improvements": improvements,
        }
