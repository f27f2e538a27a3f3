import pytest

from services.voice_channel import ChannelError, VoiceChannel


class FakeChannel(VoiceChannel):
    def __init__(self, fail_start=False):
        super().__init__()
        self.fail_start = fail_start
        self.started = []
        self.sent = []
        self.stopped = 0
        self.navigations = []
        self.notices = []

    def start(self, agent, variable_values):
        if self.fail_start:
            raise ChannelError("microphone unavailable")
        self.started.append((agent, variable_values))

    def send(self, message):
        self.sent.append(message)

    def stop(self):
        self.stopped += 1

    def navigate(self, path):
        self.navigations.append(path)

    def notify(self, message):
        self.notices.append(message)

    # helpers for driving the agent the way the voice client would

    def say(self, text, role="user", final=True):
        self.dispatch("message", {
            "type": "transcript",
            "role": role,
            "transcriptType": "final" if final else "partial",
            "transcript": text,
        })


class FakeQuestionService:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {
            "success": True, "interview_id": "gen-1", "questions": ["Q-a", "Q-b"],
        }
        self.error = error
        self.calls = []
        self.on_call = None

    def generate(self, request):
        self.calls.append(request)
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.response


class FakeResumeService:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {
            "success": True, "interview_id": "X", "questions": ["Q1", "Q2"], "improvements": ["Add links"],
        }
        self.error = error
        self.calls = []

    def analyze(self, document, filename, participant_id):
        self.calls.append((document, filename, participant_id))
        if self.error:
            raise self.error
        return self.response


class FakeFeedbackService:
    def __init__(self, response=None, error=None):
        self.response = response if response is not None else {"success": True, "feedback_id": "fb-1"}
        self.error = error
        self.calls = []

    def create_feedback(self, request):
        self.calls.append(request)
        if self.error:
            raise self.error
        return self.response


SETUP_UTTERANCES = [
    "I want a Developer role",
    "Technical interview please",
    "Mid level",
    "React and Node",
    "5 questions",
]


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def question_service():
    return FakeQuestionService()


@pytest.fixture
def resume_service():
    return FakeResumeService()


@pytest.fixture
def feedback_service():
    return FakeFeedbackService()


@pytest.fixture
def make_agent(channel, question_service, resume_service, feedback_service):
    from services.interview_agent import InterviewAgent

    created = []

    def _make(mode="generate", **kwargs):
        kwargs.setdefault("participant_id", "user-1")
        kwargs.setdefault("participant_name", "Ada")
        agent = InterviewAgent(
            kwargs.pop("channel", channel),
            mode,
            question_service=question_service,
            resume_service=resume_service,
            feedback_service=feedback_service,
            **kwargs,
        )
        created.append(agent)
        return agent

    yield _make
    for agent in created:
        agent.close()
