import os

from services.interview_store import InterviewStore


def test_interview_round_trip(tmp_path):
    store = InterviewStore(str(tmp_path))
    interview_id = store.create_interview({"user_id": "u1", "questions": ["Q"], "finalized": True})

    doc = store.get_interview(interview_id)
    assert doc["id"] == interview_id
    assert doc["questions"] == ["Q"]
    assert "created_at" in doc
    assert os.path.exists(tmp_path / "interviews" / f"{interview_id}.json")


def test_missing_and_unsafe_ids(tmp_path):
    store = InterviewStore(str(tmp_path))
    assert store.get_interview("nope") is None
    assert store.get_interview("../etc/passwd") is None
    assert store.get_interview("") is None


def test_listing_by_user_and_latest(tmp_path):
    store = InterviewStore(str(tmp_path))
    store.create_interview({"user_id": "u1", "finalized": True, "created_at": "2026-01-01T00:00:00"})
    store.create_interview({"user_id": "u1", "finalized": True, "created_at": "2026-02-01T00:00:00"})
    store.create_interview({"user_id": "u2", "finalized": True, "created_at": "2026-03-01T00:00:00"})
    store.create_interview({"user_id": "u3", "finalized": False, "created_at": "2026-04-01T00:00:00"})

    mine = store.interviews_by_user("u1")
    assert [d["created_at"][:7] for d in mine] == ["2026-02", "2026-01"]

    latest = store.latest_interviews(exclude_user_id="u1")
    assert [d["user_id"] for d in latest] == ["u2"]


def test_feedback_overwrites_given_id(tmp_path):
    store = InterviewStore(str(tmp_path))
    first = store.save_feedback({"interview_id": "i1", "user_id": "u1", "total_score": 40})
    second = store.save_feedback({"interview_id": "i1", "user_id": "u1", "total_score": 75}, first)

    assert second == first
    assert store.get_feedback(first)["total_score"] == 75
    assert store.feedback_for_interview("i1", "u1")["total_score"] == 75
    assert store.feedback_for_interview("i1", "someone-else") is None
