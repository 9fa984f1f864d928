"""Infrastructure components for the Health Audit system.

This module contains low-level technical components: the LLM client used as
the extraction oracle and the voice channel adapters.
"""

# LLM infrastructure
from .llm import GeminiRestClient

# Voice channel infrastructure
from .voice import VoiceChannel, ConsoleVoiceChannel

__all__ = [
    # LLM client
    "GeminiRestClient",

    # Voice channels
    "VoiceChannel", "ConsoleVoiceChannel",
]
