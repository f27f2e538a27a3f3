"""Best-effort parsing of model output into questions and JSON objects."""
import json
import logging
import re
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS = [
    "Tell me about your recent project.",
    "What are your primary technical skills?",
    "What is your proudest achievement?",
]

DEFAULT_IMPROVEMENTS = [
    "Add more measurable results to your work experience.",
    "Include certifications or relevant links.",
]

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)
_BULLET_RE = re.compile(r"^\s*(?:[-*•]+|\d+[.)]|q\d+[:.)])\s*", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", (text or "").strip()).strip()


def extract_json_object(text: str) -> Optional[dict]:
    """Pull the first {...} block out of model text and parse it."""
    cleaned = strip_code_fences(text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start < 0 or end <= start:
        return None
    try:
        parsed = json.loads(cleaned[start:end + 1])
    except ValueError:
        logger.warning("Model output is not valid JSON (%d chars)", len(cleaned))
        return None
    return parsed if isinstance(parsed, dict) else None


def _clean_line(line: str) -> str:
    line = _BULLET_RE.sub("", line.strip())
    return line.strip().strip('",').strip()


def parse_question_list(raw: Any) -> List[str]:
    """Turn whatever the generator produced into a list of question strings."""
    if raw is None:
        return []
    if isinstance(raw, dict):
        return parse_question_list(raw.get("questions"))
    if isinstance(raw, (list, tuple)):
        out = []
        for item in raw:
            if isinstance(item, dict):
                item = item.get("text") or item.get("question") or ""
            text = _clean_line(str(item)) if item is not None else ""
            if text:
                out.append(text)
        return out
    if not isinstance(raw, str):
        return []

    cleaned = strip_code_fences(raw)
    if not cleaned:
        return []
    if cleaned[0] in "[{":
        try:
            return parse_question_list(json.loads(cleaned))
        except ValueError:
            pass
    bracket_start, bracket_end = cleaned.find("["), cleaned.rfind("]")
    if 0 <= bracket_start < bracket_end:
        try:
            embedded = parse_question_list(json.loads(cleaned[bracket_start:bracket_end + 1]))
        except ValueError:
            embedded = []
        if embedded:
            return embedded
    cleaned = cleaned.strip("[]{}")
    return [line for line in (_clean_line(l) for l in cleaned.splitlines()) if line]


def coerce_questions(raw: Any) -> List[str]:
    """Like parse_question_list, but never empty."""
    questions = parse_question_list(raw)
    if not questions:
        logger.warning("No usable questions in generator output, using default set")
        return list(DEFAULT_QUESTIONS)
    return questions


def format_questions(questions: List[str]) -> str:
    """Render questions the way the voice agent reads them."""
    return "\n".join(f"- {q}" for q in questions)
