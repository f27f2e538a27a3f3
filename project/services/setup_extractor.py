"""Keyword detection of interview setup answers in spoken text.

Matching is loose: a single utterance may fill several fields,
and the stored value for text fields is the whole utterance so the question
generator sees the candidate's own wording.
"""
import re

from models.setup_profile import SetupProfile

ROLE_CUES = {
    "developer", "engineer", "programmer", "architect", "analyst", "scientist",
    "designer", "manager", "tester", "devops", "administrator", "sre",
}
INTERVIEW_KIND_CUES = {"technical", "hr", "behavioral", "behavioural"}
LEVEL_CUES = {"junior", "mid", "senior", "intern", "entry", "lead"}
TECH_CUES = {
    "react", "node", "python", "java", "javascript", "typescript", "angular", "vue", "nextjs",
    "django", "flask", "fastapi", "spring", "golang", "rust", "kotlin", "swift",
    "c++", "c#", "ruby", "rails", "php", "laravel", "sql", "postgres", "mysql",
    "mongodb", "redis", "aws", "azure", "gcp", "docker", "kubernetes", "terraform",
    "tensorflow", "pytorch", "flutter", "dotnet", ".net", "graphql",
}

_TOKEN_RE = re.compile(r"[a-z0-9+#.]+")
_NUMBER_RE = re.compile(r"\b\d+\b")


def _tokens(text: str) -> set:
    out = set()
    for raw in _TOKEN_RE.findall(text.lower()):
        tok = raw.rstrip(".")
        if tok.endswith(".js"):
            tok = tok[:-3]
        if tok:
            out.add(tok)
    return out


def _has_cue(tokens: set, cues: set, plurals: bool = False) -> bool:
    if tokens & cues:
        return True
    if plurals:
        return any(t.endswith("s") and t[:-1] in cues for t in tokens)
    return False


def extract_setup_fields(text: str, profile: SetupProfile) -> dict:
    """Return the setup fields detected in ``text`` that differ from ``profile``."""
    text = (text or "").strip()
    if not text:
        return {}

    tokens = _tokens(text)
    found = {}
    if _has_cue(tokens, ROLE_CUES, plurals=True):
        found["role"] = text
    if _has_cue(tokens, INTERVIEW_KIND_CUES):
        found["interview_kind"] = text
    if _has_cue(tokens, LEVEL_CUES):
        found["experience_level"] = text
    if _has_cue(tokens, TECH_CUES):
        found["tech_stack"] = text

    m = _NUMBER_RE.search(text)
    if m and int(m.group(0)) > 0:
        found["question_count"] = int(m.group(0))

    return {name: value for name, value in found.items() if getattr(profile, name) != value}
