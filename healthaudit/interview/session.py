"""
Interview session: wires the voice channel events to the extraction pipeline.

One session serves one voice connection at a time. Utterances are processed
in arrival order; the step that is active when an utterance arrives is the
step its extraction is validated against.
"""
import asyncio
import logging
import time
import uuid
from typing import Any, Dict, List, Optional, Tuple

from .catalog import QuestionCatalog, Step, default_catalog
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    SessionConnectedEvent, SessionDisconnectedEvent, InterviewStartedEvent,
    UtteranceReceivedEvent, FieldExtractedEvent, ExtractionDiscardedEvent,
    StepAdvancedEvent, InterviewCompletedEvent, ErrorOccurredEvent,
)
from .extractor import FieldExtractor
from .models import ConnectionStatus, ConversationState, InterviewResult, Speaker
from .profile import ProfileStore
from .progress import Progress, compute, build_profile_summary
from .schemas import ExtractionResult
from .sequencer import StepSequencer
from ..infrastructure.voice import VoiceChannel, VoiceChannelListener

logger = logging.getLogger("session")


class InterviewSession(VoiceChannelListener):
    """
    Single-session interview driver.

    The voice channel calls on_connect / on_disconnect / on_message / on_error;
    start(), end() and toggle_mute() are the user-facing controls.
    """

    def __init__(self,
                 extractor: FieldExtractor,
                 catalog: Optional[QuestionCatalog] = None,
                 voice_channel: Optional[VoiceChannel] = None,
                 event_bus: Optional[InterviewEventBus] = None,
                 session_id: Optional[str] = None):
        self.session_id = session_id or f"session_{uuid.uuid4().hex[:8]}"
        self.extractor = extractor
        self.catalog = catalog or default_catalog()
        self.state = ConversationState()
        self.profile = ProfileStore()
        self.sequencer = StepSequencer(self.catalog, self.profile, self.state)

        self.voice_channel = voice_channel
        if voice_channel is not None:
            voice_channel.bind(self)

        # Initialize event system
        self.event_bus = event_bus or InterviewEventBus()
        self.event_logger = EventLogger()
        self.metrics = InterviewMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)

        self.status = ConnectionStatus.DISCONNECTED
        self.is_active = False
        self.is_muted = False
        self.error_message = ""

        self._generation = 0
        self._in_flight = 0
        self._lock = asyncio.Lock()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def current_step_key(self) -> str:
        return self.sequencer.current_key

    @property
    def current_step(self) -> Optional[Step]:
        return self.sequencer.current_step

    @property
    def current_question(self) -> Optional[str]:
        step = self.sequencer.current_step
        return step.question if step else None

    @property
    def is_parsing(self) -> bool:
        return self._in_flight > 0

    def progress(self) -> Progress:
        return compute(self.catalog, self.profile, self.current_step_key)

    def summary(self) -> List[Tuple[str, str]]:
        return build_profile_summary(self.catalog, self.profile)

    def result(self) -> InterviewResult:
        progress = self.progress()
        return InterviewResult(
            profile=self.profile.as_dict(),
            summary_rows=self.summary(),
            current_step_key=self.current_step_key,
            percentage=progress.percentage,
            answered=progress.answered,
            total=progress.total,
            transcript=list(self.state.transcript),
            error_message=self.error_message,
        )

    # ------------------------------------------------------------------
    # Voice channel callbacks
    # ------------------------------------------------------------------

    def on_connect(self) -> None:
        """Fresh session: clear transcript, errors, profile and step."""
        logger.info(f"Voice channel connected ({self.session_id})")
        self._generation += 1
        self.state.transcript.clear()
        self.error_message = ""
        self.sequencer.reset()
        self.status = ConnectionStatus.CONNECTED
        self.is_active = True
        self.event_bus.emit(SessionConnectedEvent(self.session_id, time.time()))

    def on_disconnect(self) -> None:
        logger.info(f"Voice channel disconnected ({self.session_id})")
        self._mark_inactive()
        self.event_bus.emit(SessionDisconnectedEvent(
            self.session_id, time.time(), self.current_step_key
        ))

    def on_error(self, error: Any) -> None:
        error_msg = error if isinstance(error, str) else str(error)
        logger.error(f"Voice channel error: {error_msg}")
        self.error_message = error_msg
        self.state.add(Speaker.AGENT, f"Error: {error_msg}")
        self.event_bus.emit(ErrorOccurredEvent(
            self.session_id, time.time(), type(error).__name__, error_msg, "voice_channel"
        ))

    async def on_message(self, message: Dict[str, Any]) -> Optional[ExtractionResult]:
        """
        Record a transcript event and run extraction for user turns.

        Returns the extraction result, or None when none ran or it was discarded.
        """
        if not isinstance(message, dict) or not isinstance(message.get("source"), str) \
                or not isinstance(message.get("message"), str):
            logger.warning(f"Received message with unexpected structure: {message!r}")
            return None

        speaker = Speaker.parse(message["source"])
        if speaker is None:
            logger.warning(f"Received message from unknown source: {message['source']!r}")
            return None

        text = message["message"]
        self.state.add(speaker, text)
        logger.debug(f"Adding message from {speaker.value}: {text[:50]!r}")

        if speaker != Speaker.USER or not text.strip():
            return None
        return await self.process_utterance(text)

    # ------------------------------------------------------------------
    # Extraction pipeline
    # ------------------------------------------------------------------

    async def process_utterance(self, text: str) -> Optional[ExtractionResult]:
        """
        Extract against the step active right now and commit if still valid.

        Returns None when the utterance was ignored or its result discarded.
        """
        if not self.is_active:
            logger.info("Ignoring utterance, session is not active")
            return None

        asked_step = self.sequencer.current_step
        if asked_step is None:
            logger.info(f"No question active in state '{self.current_step_key}', skipping extraction")
            return None

        generation = self._generation
        self.event_bus.emit(UtteranceReceivedEvent(self.session_id, time.time(), asked_step.key, text))

        async with self._lock:
            if not self._is_current(generation, asked_step):
                self._discard(asked_step, "step changed before extraction started")
                return None

            self._in_flight += 1
            try:
                result = await asyncio.to_thread(self.extractor.extract, text, asked_step)
            finally:
                self._in_flight -= 1

            if generation != self._generation or not self.is_active:
                self._discard(asked_step, "session ended while extraction was in flight")
                return None

            self._apply(result, asked_step)
            return result

    def _is_current(self, generation: int, asked_step: Step) -> bool:
        return (generation == self._generation and self.is_active
                and self.current_step_key == asked_step.key)

    def _discard(self, asked_step: Step, reason: str) -> None:
        logger.info(f"Discarding extraction for step '{asked_step.key}': {reason}")
        self.event_bus.emit(ExtractionDiscardedEvent(self.session_id, time.time(), asked_step.key, reason))

    def _apply(self, result: ExtractionResult, asked_step: Step) -> None:
        previous_key = self.current_step_key
        if not self.sequencer.advance(result, asked_step):
            logger.info(f"Parser did not find an update for step '{asked_step.key}'")
            return

        now = time.time()
        self.event_bus.emit(FieldExtractedEvent(
            self.session_id, now, asked_step.key, result.field, result.value
        ))
        self.event_bus.emit(StepAdvancedEvent(
            self.session_id, now, previous_key, self.current_step_key, self.progress().percentage
        ))
        if self.sequencer.is_complete:
            self.event_bus.emit(InterviewCompletedEvent(self.session_id, now, self.profile.as_dict()))

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------

    def begin_interview(self) -> bool:
        """The "interview started" trigger: welcome -> first question."""
        if not self.sequencer.start():
            return False
        self.event_bus.emit(InterviewStartedEvent(
            self.session_id, time.time(), self.current_step_key, len(self.catalog)
        ))
        return True

    async def start(self) -> bool:
        """Open the voice channel and begin the interview."""
        if self.status == ConnectionStatus.CONNECTED:
            return False
        if self.voice_channel is None:
            self.error_message = "Cannot start: no voice channel configured."
            return False

        self.status = ConnectionStatus.CONNECTING
        try:
            await self.voice_channel.start_session()
        except Exception as e:
            self.status = ConnectionStatus.DISCONNECTED
            self.error_message = f"Failed to start conversation: {e}"
            logger.error("Error starting conversation: %s", e)
            self.event_bus.emit(ErrorOccurredEvent(
                self.session_id, time.time(), type(e).__name__, str(e), "start"
            ))
            return False

        if not self.is_active:
            # Channel did not report the connection itself
            self.on_connect()
        return self.begin_interview()

    async def end(self) -> None:
        """Close the voice channel; in-flight extractions will be discarded."""
        if self.status != ConnectionStatus.CONNECTED:
            return
        self.status = ConnectionStatus.DISCONNECTING
        try:
            if self.voice_channel is not None:
                await self.voice_channel.end_session()
        except Exception as e:
            self.error_message = f"Failed to end conversation: {e}"
            logger.error("Error ending conversation: %s", e)
        finally:
            if self.is_active or self.status != ConnectionStatus.DISCONNECTED:
                self._mark_inactive()

    async def toggle_mute(self) -> bool:
        """Mute or unmute agent audio. Only available while connected."""
        if self.status != ConnectionStatus.CONNECTED or self.voice_channel is None:
            return False
        try:
            await self.voice_channel.set_volume(1.0 if self.is_muted else 0.0)
        except Exception as e:
            self.error_message = "Failed to change volume"
            logger.error("Error changing volume: %s", e)
            return False
        self.is_muted = not self.is_muted
        return True

    def _mark_inactive(self) -> None:
        self._generation += 1
        self.is_active = False
        self.status = ConnectionStatus.DISCONNECTED
