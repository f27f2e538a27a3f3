import pytest

from models.call_session import CallSession
from services.resume_intake import ResumeIntake, ResumeIntakeError


def active_session(mode="resume", **kwargs):
    session = CallSession(mode, "user-1", **kwargs)
    session.begin_connecting()
    session.mark_active()
    return session


def test_upload_binds_and_reprimes(channel, resume_service):
    session = active_session()
    artifact = ResumeIntake(resume_service, channel).run(session, b"%PDF resume", "cv.pdf")

    assert artifact.interview_id == "X"
    assert artifact.questions == ["Q1", "Q2"]
    assert artifact.improvements == ["Add links"]
    assert session.interview_id == "X"
    assert session.resume is artifact
    # only the size of the upload stays on the session
    assert artifact.size == len(b"%PDF resume")
    assert not hasattr(artifact, "raw_document")
    assert resume_service.calls == [(b"%PDF resume", "cv.pdf", "user-1")]
    assert "- Q1\n- Q2" in channel.sent[-1]["message"]["content"]


def test_upload_replaces_voice_setup_interview(channel, resume_service):
    session = active_session(mode="generate")
    session.bind_interview("Y", ["old question"])

    ResumeIntake(resume_service, channel).run(session, b"resume", "cv.pdf")

    assert session.interview_id == "X"
    assert session.questions == ["Q1", "Q2"]


def test_each_upload_replaces_again(channel, resume_service):
    session = active_session()
    intake = ResumeIntake(resume_service, channel)
    intake.run(session, b"first", "a.pdf")
    resume_service.response = {"success": True, "interview_id": "Z", "questions": ["Q3"]}
    intake.run(session, b"second", "b.pdf")
    assert session.interview_id == "Z"
    assert len(channel.sent) == 2


def test_missing_file(channel, resume_service):
    session = active_session()
    with pytest.raises(ResumeIntakeError) as exc:
        ResumeIntake(resume_service, channel).run(session, b"", "")
    assert exc.value.status_code == 400
    assert resume_service.calls == []


def test_service_failure_keeps_call_state(channel, resume_service):
    resume_service.response = {"success": False, "error": "Internal Server Error"}
    session = active_session(interview_id="Y")
    with pytest.raises(ResumeIntakeError, match="Internal Server Error") as exc:
        ResumeIntake(resume_service, channel).run(session, b"resume", "cv.pdf")
    assert exc.value.status_code == 502
    assert session.status.value == "ACTIVE"
    assert session.interview_id == "Y"
    # the path is open again for another attempt
    assert session.resume_guard.state == "not-fired"


def test_service_exception(channel, resume_service):
    resume_service.error = ConnectionError("upstream closed")
    session = active_session()
    with pytest.raises(ResumeIntakeError, match="upstream closed"):
        ResumeIntake(resume_service, channel).run(session, b"resume", "cv.pdf")
    assert session.interview_id is None


def test_disposed_session_ignores_upload(channel, resume_service):
    session = active_session()
    session.dispose()
    assert ResumeIntake(resume_service, channel).run(session, b"resume", "cv.pdf") is None
    assert session.interview_id is None


def test_inactive_session_is_bound_without_sending(channel, resume_service):
    session = CallSession("resume", "user-1")
    ResumeIntake(resume_service, channel).run(session, b"resume", "cv.pdf")
    assert session.interview_id == "X"
    assert channel.sent == []
