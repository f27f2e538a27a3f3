from dataclasses import dataclass, field
from typing import List, Optional

SETUP_FIELDS = ("role", "interview_kind", "experience_level", "tech_stack", "question_count")


@dataclass
class SetupProfile:
    """Interview parameters gathered from the candidate during the setup call."""
    role: Optional[str] = None
    interview_kind: Optional[str] = None
    experience_level: Optional[str] = None
    tech_stack: Optional[str] = None
    question_count: Optional[int] = None
    frozen: bool = False

    def merge(self, updates: dict) -> bool:
        """Apply non-empty updates. Returns True if anything changed."""
        if self.frozen:
            return False
        changed = False
        for name, value in (updates or {}).items():
            if name not in SETUP_FIELDS or value in (None, ""):
                continue
            if getattr(self, name) != value:
                setattr(self, name, value)
                changed = True
        return changed

    def missing_fields(self) -> List[str]:
        return [name for name in SETUP_FIELDS if not getattr(self, name)]

    def is_complete(self) -> bool:
        return not self.missing_fields()

    def freeze(self):
        self.frozen = True

    def thaw(self):
        self.frozen = False

    def to_request(self, participant_id: str, max_questions: int) -> dict:
        return {
            "role": self.role,
            "interview_kind": self.interview_kind,
            "experience_level": self.experience_level,
            "tech_stack": self.tech_stack,
            "question_count": min(int(self.question_count), max_questions),
            "participant_id": participant_id,
        }


@dataclass
class ResumeArtifact:
    """Result of analysing an uploaded resume, copied into the session."""
    filename: str
    size: int
    interview_id: str
    questions: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
