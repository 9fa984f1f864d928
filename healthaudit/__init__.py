"""
Health Audit: voice-driven health profile interview.

Asks a fixed sequence of questions over a voice channel, turns each spoken
answer into a structured profile field with an LLM, and reports progress.
"""

__version__ = "1.0.0"

# Main entry points
from .interview.session import InterviewSession
from .interview.catalog import QuestionCatalog, default_catalog
from .interview.extractor import FieldExtractor, create_extractor
from .interview.models import InterviewResult

__all__ = [
    "InterviewSession", "QuestionCatalog", "default_catalog",
    "FieldExtractor", "create_extractor", "InterviewResult",
]
