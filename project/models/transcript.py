"""Ordered capture of finalized utterances for one call."""
from dataclasses import dataclass
from typing import List, Optional, Tuple

PARTICIPANT = "user"
AGENT = "assistant"
SYSTEM = "system"

SPEAKERS = (PARTICIPANT, AGENT, SYSTEM)


@dataclass(frozen=True)
class TranscriptEntry:
    speaker: str
    text: str

    def as_message(self) -> dict:
        return {"role": self.speaker, "content": self.text}


class TranscriptLog:
    """Append-only conversation log.

    Insertion order is the order of the conversation. Repeated identical
    utterances are kept.
    """

    def __init__(self):
        self._entries: List[TranscriptEntry] = []

    def append(self, entry: TranscriptEntry) -> None:
        self._entries.append(entry)

    def latest(self) -> Optional[TranscriptEntry]:
        if not self._entries:
            return None
        return self._entries[-1]

    def snapshot(self) -> Tuple[TranscriptEntry, ...]:
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(tuple(self._entries))
