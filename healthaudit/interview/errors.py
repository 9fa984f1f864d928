"""
Exception taxonomy for the extraction pipeline.

None of these ever escape FieldExtractor.extract(); they exist so the
failure paths inside it can be told apart in logs.
"""


class ExtractionError(Exception):
    """Base class for every failure on the way to an ExtractionResult."""


class ConfigurationError(ExtractionError):
    """Oracle credentials are missing."""


class ValidationError(ExtractionError):
    """Oracle output is not JSON, or lacks a boolean updateNeeded."""

    def __init__(self, message: str, raw_text: str = ""):
        super().__init__(message)
        self.raw_text = raw_text


class UpstreamError(ExtractionError):
    """Network failure, timeout, or an error status from the oracle."""


class UserInputError(ExtractionError):
    """The utterance is empty after trimming."""
