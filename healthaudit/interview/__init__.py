"""Interview system components.

This module contains the business logic for the health audit interview:
the question catalog, field extraction, step sequencing, progress and the
session that ties them to a voice channel.
"""

# Error taxonomy
from .errors import (
    ExtractionError, ConfigurationError, ValidationError,
    UpstreamError, UserInputError
)

# Catalog
from .catalog import Step, QuestionCatalog, HEALTH_AUDIT_STEPS, default_catalog

# Data models
from .models import (
    Speaker, ConnectionStatus, TranscriptEntry,
    ConversationState, InterviewResult
)

# Structured schemas
from .schemas import ExtractionResult, parse_extraction_result, strip_code_fences

# Extraction
from .prompts import ExtractionPrompts
from .extractor import FieldExtractor, create_extractor

# State management
from .profile import ProfileStore
from .sequencer import StepSequencer
from .progress import Progress, compute, build_profile_summary, format_progress

# Event system
from .events import (
    InterviewEventBus, EventLogger, InterviewMetrics,
    EventType, InterviewEvent, SessionConnectedEvent,
    SessionDisconnectedEvent, InterviewStartedEvent,
    UtteranceReceivedEvent, FieldExtractedEvent,
    ExtractionDiscardedEvent, StepAdvancedEvent,
    InterviewCompletedEvent, ErrorOccurredEvent
)

# Session
from .session import InterviewSession

__all__ = [
    # Errors
    "ExtractionError", "ConfigurationError", "ValidationError",
    "UpstreamError", "UserInputError",

    # Catalog
    "Step", "QuestionCatalog", "HEALTH_AUDIT_STEPS", "default_catalog",

    # Data models
    "Speaker", "ConnectionStatus", "TranscriptEntry",
    "ConversationState", "InterviewResult",

    # Schemas
    "ExtractionResult", "parse_extraction_result", "strip_code_fences",

    # Extraction
    "ExtractionPrompts", "FieldExtractor", "create_extractor",

    # State
    "ProfileStore", "StepSequencer",
    "Progress", "compute", "build_profile_summary", "format_progress",

    # Events
    "InterviewEventBus", "EventLogger", "InterviewMetrics",
    "EventType", "InterviewEvent", "SessionConnectedEvent",
    "SessionDisconnectedEvent", "InterviewStartedEvent",
    "UtteranceReceivedEvent", "FieldExtractedEvent",
    "ExtractionDiscardedEvent", "StepAdvancedEvent",
    "InterviewCompletedEvent", "ErrorOccurredEvent",

    # Session
    "InterviewSession",
]
