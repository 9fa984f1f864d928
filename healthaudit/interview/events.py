"""
Event-driven architecture for the interview system.
"""
import logging
from abc import ABC
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of interview events."""
    SESSION_CONNECTED = "session_connected"
    SESSION_DISCONNECTED = "session_disconnected"
    INTERVIEW_STARTED = "interview_started"
    UTTERANCE_RECEIVED = "utterance_received"
    FIELD_EXTRACTED = "field_extracted"
    EXTRACTION_DISCARDED = "extraction_discarded"
    STEP_ADVANCED = "step_advanced"
    INTERVIEW_COMPLETED = "interview_completed"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class InterviewEvent(ABC):
    """Base class for all interview events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class SessionConnectedEvent(InterviewEvent):
    """Event fired when the voice channel connects and the session is reset."""
    def __init__(self, session_id: str, timestamp: float):
        super().__init__(
            event_type=EventType.SESSION_CONNECTED,
            session_id=session_id,
            timestamp=timestamp,
            data={}
        )


@dataclass
class SessionDisconnectedEvent(InterviewEvent):
    """Event fired when the voice channel disconnects."""
    def __init__(self, session_id: str, timestamp: float, current_step: str):
        super().__init__(
            event_type=EventType.SESSION_DISCONNECTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"current_step": current_step}
        )


@dataclass
class InterviewStartedEvent(InterviewEvent):
    """Event fired when the interview moves off the welcome step."""
    def __init__(self, session_id: str, timestamp: float, first_step: str, total_steps: int):
        super().__init__(
            event_type=EventType.INTERVIEW_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"first_step": first_step, "total_steps": total_steps}
        )


@dataclass
class UtteranceReceivedEvent(InterviewEvent):
    """Event fired for every user utterance that reaches the pipeline."""
    def __init__(self, session_id: str, timestamp: float, step: str, text: str):
        super().__init__(
            event_type=EventType.UTTERANCE_RECEIVED,
            session_id=session_id,
            timestamp=timestamp,
            data={"step": step, "text": text}
        )


@dataclass
class FieldExtractedEvent(InterviewEvent):
    """Event fired when an extraction is committed to the profile."""
    def __init__(self, session_id: str, timestamp: float, step: str, field: str, value: str):
        super().__init__(
            event_type=EventType.FIELD_EXTRACTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"step": step, "field": field, "value": value}
        )


@dataclass
class ExtractionDiscardedEvent(InterviewEvent):
    """Event fired when an extraction finishes after its session ended."""
    def __init__(self, session_id: str, timestamp: float, step: str, reason: str):
        super().__init__(
            event_type=EventType.EXTRACTION_DISCARDED,
            session_id=session_id,
            timestamp=timestamp,
            data={"step": step, "reason": reason}
        )


@dataclass
class StepAdvancedEvent(InterviewEvent):
    """Event fired when the sequencer moves to another step."""
    def __init__(self, session_id: str, timestamp: float, from_step: str, to_step: str,
                 percentage: int):
        super().__init__(
            event_type=EventType.STEP_ADVANCED,
            session_id=session_id,
            timestamp=timestamp,
            data={"from_step": from_step, "to_step": to_step, "percentage": percentage}
        )


@dataclass
class InterviewCompletedEvent(InterviewEvent):
    """Event fired when the interview reaches the summary step."""
    def __init__(self, session_id: str, timestamp: float, profile: Dict[str, str]):
        super().__init__(
            event_type=EventType.INTERVIEW_COMPLETED,
            session_id=session_id,
            timestamp=timestamp,
            data={"profile": dict(profile)}
        )


@dataclass
class ErrorOccurredEvent(InterviewEvent):
    """Event fired when an error occurs."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[InterviewEvent], None]


class InterviewEventBus:
    """Event bus for interview system communication."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """
        Subscribe to all events.

        Args:
            handler: Function to call for any event
        """
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: InterviewEvent) -> None:
        """
        Emit an event to all subscribers.

        Handler failures are logged and never reach the emitter.
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in list(self._global_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")

    def clear_handlers(self) -> None:
        """Clear all event handlers."""
        self._handlers.clear()
        self._global_handlers.clear()
        logger.debug("Cleared all event handlers")


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.log_level = log_level

    def handle_event(self, event: InterviewEvent) -> None:
        """Log event details."""
        self.logger.log(
            self.log_level,
            f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}"
        )


class InterviewMetrics:
    """Collects metrics from interview events."""

    _COUNTERS = {
        EventType.SESSION_CONNECTED: "sessions_connected",
        EventType.INTERVIEW_STARTED: "interviews_started",
        EventType.INTERVIEW_COMPLETED: "interviews_completed",
        EventType.UTTERANCE_RECEIVED: "utterances_received",
        EventType.FIELD_EXTRACTED: "fields_extracted",
        EventType.EXTRACTION_DISCARDED: "extractions_discarded",
        EventType.ERROR_OCCURRED: "errors_occurred",
    }

    def __init__(self):
        self.reset()

    def handle_event(self, event: InterviewEvent) -> None:
        """Update metrics based on event."""
        name = self._COUNTERS.get(event.event_type)
        if name:
            self._counts[name] += 1

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return dict(self._counts)

    def get(self, name: str) -> Optional[int]:
        return self._counts.get(name)

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self._counts: Dict[str, int] = {name: 0 for name in self._COUNTERS.values()}
