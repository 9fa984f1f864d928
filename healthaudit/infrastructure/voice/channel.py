"""
Voice channel boundary.

The duplex voice/transcription service lives outside this package. A channel
adapter only has to drive the listener callbacks: connect, disconnect,
message events ``{"source": "user" | "agent", "message": str}`` and errors.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger("voice_channel")


class VoiceChannelListener(ABC):
    """Callbacks a voice channel delivers to the interview session."""

    @abstractmethod
    def on_connect(self) -> None: ...

    @abstractmethod
    def on_disconnect(self) -> None: ...

    @abstractmethod
    async def on_message(self, message: Dict[str, Any]) -> None: ...

    @abstractmethod
    def on_error(self, error: Any) -> None: ...


class VoiceChannel(ABC):
    """Start/end lifecycle, volume control and agent speech."""

    def __init__(self, volume: float = 1.0):
        self.volume = max(0.0, min(1.0, volume))
        self.listener: Optional[VoiceChannelListener] = None

    def bind(self, listener: VoiceChannelListener) -> None:
        self.listener = listener

    @abstractmethod
    async def start_session(self) -> None:
        """Open the channel. Calls ``listener.on_connect()`` once connected."""

    @abstractmethod
    async def end_session(self) -> None:
        """Close the channel. Calls ``listener.on_disconnect()`` once closed."""

    async def set_volume(self, volume: float) -> None:
        """
        Set output volume.

        Args:
            volume: Volume level (0.0 to 1.0)
        """
        self.volume = max(0.0, min(1.0, volume))
        logger.debug(f"Volume set to {self.volume:.1f}")

    async def say(self, text: str) -> None:
        """Speak as the agent and report it back as an agent message."""
        if self.listener is not None:
            await self.listener.on_message({"source": "agent", "message": text})
