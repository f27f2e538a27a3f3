"""File-backed document store for interviews and feedback."""
import json
import logging
import os
import threading
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from config.settings import DATA_DIR

logger = logging.getLogger(__name__)

INTERVIEWS = "interviews"
FEEDBACK = "feedback"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class InterviewStore:
    def __init__(self, base_dir: str = DATA_DIR):
        self.base_dir = base_dir
        self._lock = threading.Lock()

    def _path(self, collection: str, doc_id: str) -> str:
        return os.path.join(self.base_dir, collection, f"{doc_id}.json")

    def _write(self, collection: str, doc_id: str, doc: dict):
        os.makedirs(os.path.join(self.base_dir, collection), exist_ok=True)
        path = self._path(collection, doc_id)
        tmp = path + ".tmp"
        with self._lock:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(doc, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)

    def _read(self, collection: str, doc_id: str) -> Optional[dict]:
        if not doc_id or os.sep in doc_id or doc_id.startswith("."):
            return None
        path = self._path(collection, doc_id)
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _all(self, collection: str) -> List[dict]:
        folder = os.path.join(self.base_dir, collection)
        if not os.path.isdir(folder):
            return []
        docs = []
        for name in sorted(os.listdir(folder)):
            if not name.endswith(".json"):
                continue
            doc = self._read(collection, name[:-5])
            if doc:
                docs.append(doc)
        return docs

    # Interviews

    def create_interview(self, doc: dict) -> str:
        interview_id = uuid.uuid4().hex
        record = dict(doc, id=interview_id)
        record.setdefault("created_at", _now_iso())
        self._write(INTERVIEWS, interview_id, record)
        logger.info("Created interview %s for user %s", interview_id, doc.get("user_id"))
        return interview_id

    def get_interview(self, interview_id: str) -> Optional[dict]:
        return self._read(INTERVIEWS, interview_id)

    def interviews_by_user(self, user_id: str) -> List[dict]:
        docs = [d for d in self._all(INTERVIEWS) if d.get("user_id") == user_id]
        return sorted(docs, key=lambda d: d.get("created_at") or "", reverse=True)

    def latest_interviews(self, exclude_user_id: str, limit: int = 20) -> List[dict]:
        docs = [
            d for d in self._all(INTERVIEWS)
            if d.get("finalized") and d.get("user_id") != exclude_user_id
        ]
        docs.sort(key=lambda d: d.get("created_at") or "", reverse=True)
        return docs[:limit]

    # Feedback

    def save_feedback(self, doc: dict, feedback_id: Optional[str] = None) -> str:
        """Write a feedback document, overwriting ``feedback_id`` when given."""
        feedback_id = feedback_id or uuid.uuid4().hex
        record = dict(doc, id=feedback_id)
        record.setdefault("created_at", _now_iso())
        self._write(FEEDBACK, feedback_id, record)
        return feedback_id

    def get_feedback(self, feedback_id: str) -> Optional[dict]:
        return self._read(FEEDBACK, feedback_id)

    def feedback_for_interview(self, interview_id: str, user_id: str) -> Optional[dict]:
        for doc in self._all(FEEDBACK):
            if doc.get("interview_id") == interview_id and doc.get("user_id") == user_id:
                return doc
        return None


# Global store instance
interview_store = InterviewStore()
