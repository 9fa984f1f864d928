"""
Data models for the interview system.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..config import WELCOME_STEP


class Speaker(str, Enum):
    """Who produced a transcript line."""
    USER = "user"
    AGENT = "agent"

    @classmethod
    def parse(cls, source: Any) -> Optional["Speaker"]:
        # The voice SDK labels the agent side "ai"
        if source == "ai":
            return cls.AGENT
        try:
            return cls(source)
        except ValueError:
            return None


class ConnectionStatus(str, Enum):
    """Voice channel status shown as the connection indicator."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


@dataclass(frozen=True)
class TranscriptEntry:
    """A single line of conversation."""
    speaker: Speaker
    text: str


@dataclass
class ConversationState:
    """Per-session interview state."""
    current_step_key: str = WELCOME_STEP
    transcript: List[TranscriptEntry] = field(default_factory=list)

    def add(self, speaker: Speaker, text: str) -> TranscriptEntry:
        entry = TranscriptEntry(speaker=speaker, text=text)
        self.transcript.append(entry)
        return entry

    def user_turns(self) -> List[TranscriptEntry]:
        return [entry for entry in self.transcript if entry.speaker == Speaker.USER]


@dataclass
class InterviewResult:
    """Snapshot of a session, used for the final summary."""
    profile: Dict[str, str] = field(default_factory=dict)
    summary_rows: List[Tuple[str, str]] = field(default_factory=list)
    current_step_key: str = WELCOME_STEP
    percentage: int = 0
    answered: int = 0
    total: int = 0
    transcript: List[TranscriptEntry] = field(default_factory=list)
    error_message: str = ""

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.answered == self.total
