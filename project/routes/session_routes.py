"""Interview session API routes."""
import logging

from flask import Blueprint, request, jsonify

from models.call_session import SessionMode, StateTransitionError
from routes.ws_routes import make_channel
from services.agent_registry import agents
from services.generation_orchestrator import GenerationError
from services.resume_intake import ResumeIntakeError
from services.voice_channel import ChannelError

logger = logging.getLogger(__name__)

session_bp = Blueprint('session', __name__)


def _agent_or_404(session_id):
    agent = agents.get(session_id)
    if agent is None:
        return None, (jsonify({"ok": False, "error": "Session not found"}), 404)
    return agent, None


@session_bp.route('/api/sessions', methods=['POST'])
def create_session():
    """Create an interview session for the voice client to join."""
    data = request.get_json(silent=True) or {}
    user_id = (data.get("user_id") or "").strip()
    if not user_id:
        return jsonify({"ok": False, "error": "Missing 'user_id'"}), 400
    try:
        mode = SessionMode(data.get("type") or SessionMode.SETUP_VIA_VOICE.value)
    except ValueError:
        return jsonify({"ok": False, "error": f"Unknown session type: {data.get('type')}"}), 400

    questions = data.get("questions") or []
    if not isinstance(questions, list) or not all(isinstance(q, str) for q in questions):
        return jsonify({"ok": False, "error": "'questions' must be a list of strings"}), 400

    session_id, agent = agents.create(
        make_channel,
        mode=mode,
        participant_id=user_id,
        participant_name=data.get("user_name") or "",
        interview_id=data.get("interview_id"),
        feedback_id=data.get("feedback_id"),
        questions=questions,
    )
    return jsonify({"ok": True, "session_id": session_id, "status": agent.status()}), 201


@session_bp.route('/api/sessions/<session_id>', methods=['GET'])
def session_status(session_id):
    agent, err = _agent_or_404(session_id)
    if err:
        return err
    return jsonify({"ok": True, "status": agent.status()}), 200


@session_bp.route('/api/sessions/<session_id>/start', methods=['POST'])
def start_call(session_id):
    """Start (or restart) the voice call."""
    agent, err = _agent_or_404(session_id)
    if err:
        return err
    try:
        started = agent.start()
    except ChannelError as e:
        return jsonify({"ok": False, "error": str(e), "retry": True, "status": agent.status()}), 503
    except StateTransitionError as e:
        return jsonify({"ok": False, "error": str(e)}), 409
    return jsonify({"ok": True, "started": started, "status": agent.status()}), 200


@session_bp.route('/api/sessions/<session_id>/disconnect', methods=['POST'])
def disconnect_call(session_id):
    """End the call; feedback runs before this returns."""
    agent, err = _agent_or_404(session_id)
    if err:
        return err
    destination = agent.disconnect()
    return jsonify({"ok": True, "navigate": destination, "status": agent.status()}), 200


@session_bp.route('/api/sessions/<session_id>/resume', methods=['POST'])
def upload_resume(session_id):
    """Set up the interview from an uploaded resume."""
    agent, err = _agent_or_404(session_id)
    if err:
        return err
    f = request.files.get("file")
    raw = (f.read() or b"") if f else b""
    try:
        artifact = agent.upload_resume(raw, getattr(f, "filename", "") or "")
    except ResumeIntakeError as e:
        return jsonify({"ok": False, "error": str(e)}), e.status_code
    if artifact is None:
        if agent.session.disposed:
            return jsonify({"ok": False, "error": "Session is closed"}), 410
        return jsonify({"ok": False, "error": "Resume upload already in progress"}), 409
    return jsonify({
        "ok": True,
        "interview_id": artifact.interview_id,
        "questions": artifact.questions,
        "improvements": artifact.improvements,
        "status": agent.status(),
    }), 200


@session_bp.route('/api/sessions/<session_id>/generate', methods=['POST'])
def retry_generation(session_id):
    """Retry question generation after a failure."""
    agent, err = _agent_or_404(session_id)
    if err:
        return err
    try:
        generated = agent.retry_generation()
    except GenerationError as e:
        return jsonify({"ok": False, "error": str(e), "status": agent.status()}), 502
    return jsonify({"ok": True, "generated": generated, "status": agent.status()}), 200


@session_bp.route('/api/sessions/<session_id>', methods=['DELETE'])
def close_session(session_id):
    if not agents.remove(session_id):
        return jsonify({"ok": False, "error": "Session not found"}), 404
    return jsonify({"ok": True}), 200
