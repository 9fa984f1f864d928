"""
Text-mode voice channel: questions are printed, answers are typed.
"""
import asyncio
import logging
from typing import Callable, Optional

from .channel import VoiceChannel

logger = logging.getLogger("console_channel")

EXIT_COMMANDS = ("/quit", "/exit")


class ConsoleVoiceChannel(VoiceChannel):
    """Stands in for the duplex voice service during local runs."""

    def __init__(self,
                 volume: float = 1.0,
                 input_func: Callable[[str], str] = input,
                 output_func: Callable[[str], None] = print,
                 prompt: str = "🎤 You: "):
        super().__init__(volume=volume)
        self._input = input_func
        self._output = output_func
        self.prompt = prompt
        self.connected = False

    async def start_session(self) -> None:
        self.connected = True
        logger.info("Console voice channel connected")
        if self.listener is not None:
            self.listener.on_connect()

    async def end_session(self) -> None:
        if not self.connected:
            return
        self.connected = False
        logger.info("Console voice channel disconnected")
        if self.listener is not None:
            self.listener.on_disconnect()

    async def say(self, text: str) -> None:
        if self.volume > 0:
            self._output(f"🤖 {text}")
        else:
            self._output(f"🔇 {text}")
        await super().say(text)

    async def read_utterance(self) -> Optional[str]:
        """Read one typed line; None on end of input or an exit command."""
        try:
            line = await asyncio.to_thread(self._input, self.prompt)
        except EOFError:
            return None
        if line.strip().lower() in EXIT_COMMANDS:
            return None
        return line
