"""Interview generation, resume analysis and feedback API routes."""
import logging

from flask import Blueprint, request, jsonify

from services.feedback_service import FeedbackService
from services.interview_store import interview_store
from services.question_service import QuestionService
from services.resume_service import ResumeService

logger = logging.getLogger(__name__)

interview_bp = Blueprint('interview', __name__)

question_service = QuestionService()
resume_service = ResumeService()
feedback_service = FeedbackService()


@interview_bp.route('/api/generate', methods=['POST'])
def generate():
    """Generate and store interview questions from setup answers."""
    data = request.get_json(silent=True) or {}
    if not data.get("participant_id"):
        return jsonify({"success": False, "error": "Missing required field: participant_id"}), 400
    result = question_service.generate(data)
    return jsonify(result), (200 if result.get("success") else 500)


@interview_bp.route('/api/generate', methods=['GET'])
def generate_health():
    return jsonify({"success": True, "data": "Interview generation endpoint active"}), 200


@interview_bp.route('/api/resume', methods=['POST'])
def analyze_resume():
    """Build a resume-based interview from an uploaded file."""
    f = request.files.get("file")
    if f is None:
        return jsonify({"success": False, "error": "No file uploaded"}), 400
    raw = f.read() or b""
    result = resume_service.analyze(raw, getattr(f, "filename", "") or "", request.form.get("user_id") or "")
    if not result.get("success"):
        return jsonify(result), (400 if not raw else 500)
    return jsonify(result), 200


@interview_bp.route('/api/interviews', methods=['GET'])
def list_interviews():
    user_id = request.args.get("user_id")
    if not user_id:
        return jsonify({"ok": False, "error": "Missing 'user_id'"}), 400
    return jsonify({"ok": True, "interviews": interview_store.interviews_by_user(user_id)}), 200


@interview_bp.route('/api/interviews/latest', methods=['GET'])
def latest_interviews():
    """Finalized interviews from other users, newest first."""
    user_id = request.args.get("user_id") or ""
    try:
        limit = max(1, int(request.args.get("limit") or 20))
    except ValueError:
        return jsonify({"ok": False, "error": "'limit' must be an integer"}), 400
    return jsonify({"ok": True, "interviews": interview_store.latest_interviews(user_id, limit)}), 200


@interview_bp.route('/api/interviews/<interview_id>', methods=['GET'])
def get_interview(interview_id):
    doc = interview_store.get_interview(interview_id)
    if doc is None:
        return jsonify({"ok": False, "error": "Interview not found"}), 404
    return jsonify({"ok": True, "interview": doc}), 200


@interview_bp.route('/api/interviews/<interview_id>/feedback', methods=['GET'])
def get_feedback(interview_id):
    user_id = request.args.get("user_id")
    if not user_id:
        return jsonify({"ok": False, "error": "Missing 'user_id'"}), 400
    doc = feedback_service.get_feedback(interview_id, user_id)
    if doc is None:
        return jsonify({"ok": False, "error": "Feedback not found"}), 404
    return jsonify({"ok": True, "feedback": doc}), 200
