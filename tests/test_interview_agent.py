import pytest

from conftest import SETUP_UTTERANCES, FakeChannel
from models.call_session import CallStatus
from services.voice_channel import ChannelError


def start_call(agent, channel):
    agent.start()
    channel.dispatch("call-start")


def test_start_sends_setup_greeting(make_agent, channel):
    agent = make_agent("generate")
    assert agent.start() is True
    assert agent.session.status == CallStatus.CONNECTING

    agent_config, values = channel.started[0]
    assert agent_config["name"]
    assert "Hi Ada!" in values["questions"]
    assert "How many questions" in values["questions"]

    channel.dispatch("call-start")
    assert agent.session.status == CallStatus.ACTIVE


def test_start_with_supplied_questions(make_agent, channel):
    agent = make_agent("interview", interview_id="int-1", questions=["Why Python?", "What is a GIL?"])
    agent.start()
    assert channel.started[0][1] == {"questions": "- Why Python?\n- What is a GIL?"}


def test_start_while_live_is_ignored(make_agent, channel):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    start_call(agent, channel)
    assert agent.start() is False
    assert len(channel.started) == 1


def test_channel_open_failure_is_recoverable(make_agent):
    broken = FakeChannel(fail_start=True)
    agent = make_agent("generate", channel=broken)

    with pytest.raises(ChannelError):
        agent.start()
    assert agent.session.status == CallStatus.INACTIVE
    assert agent.session.last_error == "microphone unavailable"

    broken.fail_start = False
    assert agent.start() is True
    assert agent.session.status == CallStatus.CONNECTING


def test_generation_fires_after_fifth_setup_answer(make_agent, channel, question_service):
    agent = make_agent("generate")
    start_call(agent, channel)

    for text in SETUP_UTTERANCES[:4]:
        channel.say(text)
    assert question_service.calls == []
    assert agent.session.profile.missing_fields() == ["question_count"]

    channel.say(SETUP_UTTERANCES[4])
    assert len(question_service.calls) == 1
    assert question_service.calls[0]["question_count"] == 5
    assert question_service.calls[0]["role"] == "I want a Developer role"
    assert agent.session.interview_id == "gen-1"

    # later answers do not trigger another generation
    channel.say("Actually make it 8 questions for a senior engineer")
    assert len(question_service.calls) == 1
    assert agent.session.profile.question_count == 5


def test_agent_utterances_are_not_setup_answers(make_agent, channel, question_service):
    agent = make_agent("generate")
    start_call(agent, channel)
    channel.say("Are you a developer or an engineer? Technical or HR? Junior or senior? React? 5?",
                role="assistant")
    assert agent.session.profile.missing_fields() == [
        "role", "interview_kind", "experience_level", "tech_stack", "question_count",
    ]
    assert len(agent.session.transcript) == 1


def test_partial_transcripts_are_ignored(make_agent, channel):
    agent = make_agent("generate")
    start_call(agent, channel)
    channel.say("I want a Devel", final=False)
    assert len(agent.session.transcript) == 0


def test_generation_failure_keeps_call_and_does_not_retry_by_itself(make_agent, channel, question_service):
    question_service.response = {"success": False, "error": "model overloaded"}
    agent = make_agent("generate")
    start_call(agent, channel)
    for text in SETUP_UTTERANCES:
        channel.say(text)

    assert agent.session.status == CallStatus.ACTIVE
    assert agent.session.interview_id is None
    assert channel.notices == ["Could not generate interview questions: model overloaded"]

    for filler in ("uh huh", "hello?", "are you there"):
        channel.say(filler)
    assert len(question_service.calls) == 1

    question_service.response = {"success": True, "interview_id": "gen-9", "questions": ["Q"]}
    assert agent.retry_generation() is True
    assert agent.session.interview_id == "gen-9"
    assert len(question_service.calls) == 2


def test_changed_setup_answer_after_failure_generates_again(make_agent, channel, question_service):
    question_service.response = {"success": False, "error": "model overloaded"}
    agent = make_agent("generate")
    start_call(agent, channel)
    for text in SETUP_UTTERANCES:
        channel.say(text)

    question_service.response = {"success": True, "interview_id": "gen-9", "questions": ["Q"]}
    channel.say("Make it 3 questions")
    assert len(question_service.calls) == 2
    assert question_service.calls[1]["question_count"] == 3
    assert agent.session.interview_id == "gen-9"


def test_double_call_end_produces_one_feedback(make_agent, channel, feedback_service):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    start_call(agent, channel)
    channel.say("Hello", role="assistant")
    channel.say("Hi, ready")

    channel.dispatch("call-end")
    channel.dispatch("call-end")

    assert len(feedback_service.calls) == 1
    assert [m["content"] for m in feedback_service.calls[0]["transcript"]] == ["Hello", "Hi, ready"]
    assert channel.navigations == ["/interview/int-1/feedback"]
    assert agent.session.status == CallStatus.FINISHED


def test_disconnect_stops_channel_and_scores_once(make_agent, channel, feedback_service):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    start_call(agent, channel)

    assert agent.disconnect() == "/interview/int-1/feedback"
    assert channel.stopped == 1
    # the voice client confirms the hang-up afterwards
    channel.dispatch("call-end")
    assert agent.disconnect() is None
    assert len(feedback_service.calls) == 1


def test_transcript_after_finish_is_dropped(make_agent, channel):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    start_call(agent, channel)
    channel.say("last words")
    agent.disconnect()
    channel.say("too late")
    assert [e.text for e in agent.session.transcript] == ["last words"]


def test_subscription_released_on_finish_and_close(make_agent, channel):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    assert channel.listener_count() == 6
    start_call(agent, channel)
    channel.dispatch("call-end")
    assert channel.listener_count() == 0

    agent.start()
    assert channel.listener_count() == 6
    agent.close()
    assert channel.listener_count() == 0


def test_setup_call_end_gives_no_feedback(make_agent, channel, feedback_service):
    agent = make_agent("generate")
    start_call(agent, channel)
    channel.say("I want a Developer role")
    channel.dispatch("call-end")
    assert feedback_service.calls == []
    assert channel.navigations == []


def test_generated_interview_gets_feedback(make_agent, channel, feedback_service):
    agent = make_agent("generate")
    start_call(agent, channel)
    for text in SETUP_UTTERANCES:
        channel.say(text)
    channel.dispatch("call-end")
    assert feedback_service.calls[0]["interview_id"] == "gen-1"


def test_restart_after_finish_creates_new_session(make_agent, channel):
    agent = make_agent("generate")
    start_call(agent, channel)
    for text in SETUP_UTTERANCES:
        channel.say(text)
    first = agent.session
    channel.dispatch("call-end")

    assert agent.start() is True
    assert agent.session is not first
    assert first.disposed
    assert agent.session.interview_id == "gen-1"
    assert len(agent.session.transcript) == 0
    assert channel.started[-1][1] == {"questions": "- Q-a\n- Q-b"}


def test_resume_upload_replaces_voice_setup_interview(make_agent, channel, resume_service):
    question_service_result = {"success": True, "interview_id": "Y", "questions": ["old"]}
    agent = make_agent("generate")
    agent.generation.question_service.response = question_service_result
    start_call(agent, channel)
    for text in SETUP_UTTERANCES:
        channel.say(text)
    assert agent.session.interview_id == "Y"

    resume_service.response = {"success": True, "interview_id": "X", "questions": ["Q1", "Q2"]}
    agent.upload_resume(b"%PDF", "cv.pdf")

    assert agent.session.interview_id == "X"
    assert "- Q1\n- Q2" in channel.sent[-1]["message"]["content"]


def test_resume_bound_first_stops_voice_setup(make_agent, channel, question_service):
    agent = make_agent("generate")
    start_call(agent, channel)
    agent.upload_resume(b"%PDF", "cv.pdf")
    for text in SETUP_UTTERANCES:
        channel.say(text)
    assert question_service.calls == []
    assert agent.session.interview_id == "X"


def test_resume_mode_waits_for_upload(make_agent, channel):
    agent = make_agent("resume")
    agent.start()
    assert "upload your resume" in channel.started[0][1]["questions"]


def test_speaking_and_error_events(make_agent, channel):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    start_call(agent, channel)
    channel.dispatch("speech-start")
    assert agent.status()["is_speaking"] is True
    channel.dispatch("speech-end")
    assert agent.status()["is_speaking"] is False
    channel.dispatch("error", {"message": "ice failed"})
    assert agent.status()["last_error"] == "ice failed"


def test_status_exposes_feedback_url(make_agent):
    agent = make_agent("interview", interview_id="int-1", questions=["q"])
    assert agent.status()["feedback_url"] == "/interview/int-1/feedback"
    assert make_agent("generate").status()["feedback_url"] is None


def test_closed_agent_ignores_late_generation(make_agent, channel, question_service):
    agent = make_agent("generate")
    start_call(agent, channel)
    question_service.on_call = agent.close
    for text in SETUP_UTTERANCES:
        channel.say(text)
    assert agent.session.interview_id is None
    assert channel.stopped == 1
