"""Voice channel adapters."""

from .channel import VoiceChannel, VoiceChannelListener
from .console import ConsoleVoiceChannel

__all__ = ["VoiceChannel", "VoiceChannelListener", "ConsoleVoiceChannel"]
