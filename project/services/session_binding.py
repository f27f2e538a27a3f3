"""Binding an interview to a session and re-priming the voice agent.

Both setup producers (voice setup generation and resume intake) finish here.
"""
import logging

from models.call_session import CallStatus
from prompts.system_prompts import QUESTIONS_PRIMER
from services.llm_parsing import format_questions
from services.voice_channel import ChannelError

logger = logging.getLogger(__name__)


def prime_message(questions: list) -> dict:
    return {
        "type": "add-message",
        "message": {
            "role": "system",
            "content": QUESTIONS_PRIMER.format(questions=format_questions(questions)),
        },
    }


def bind_and_prime(session, channel, interview_id: str, questions: list, replace: bool = False) -> bool:
    """Bind ``interview_id`` and push ``questions`` to a live call.

    Returns False when the session refused the binding (disposed, or already
    bound and ``replace`` not allowed).
    """
    if not session.bind_interview(interview_id, questions, replace=replace):
        logger.info("Session %s refused interview %s", session.session_id, interview_id)
        return False

    logger.info("Session %s bound to interview %s (%d questions)",
                session.session_id, interview_id, len(questions))
    if session.status in (CallStatus.CONNECTING, CallStatus.ACTIVE):
        try:
            channel.send(prime_message(questions))
        except ChannelError as e:
            # Questions stay on the session and are used by the next start.
            logger.warning("Could not re-prime session %s: %s", session.session_id, e)
        except Exception:
            logger.exception("Re-priming session %s failed", session.session_id)
    return True
