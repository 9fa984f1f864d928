"""
Structured data models and schemas for the extraction pipeline.
"""
import json
import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ValidationError

logger = logging.getLogger("schemas")

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?|```", re.IGNORECASE)


@dataclass(frozen=True)
class ExtractionResult:
    """Strict-contract outcome of one extraction."""
    update_needed: bool = False
    field: Optional[str] = None
    value: Optional[str] = None

    @classmethod
    def no_update(cls) -> "ExtractionResult":
        return cls(update_needed=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any]) -> "ExtractionResult":
        """
        Build a result from the oracle's parsed JSON object.

        An update without a field or a non-blank value collapses to no update.
        """
        field = data.get("profileField")
        value = _coerce_value(data.get("extractedValue"))
        if data.get("updateNeeded") is not True:
            return cls(update_needed=False, field=field if isinstance(field, str) else None, value=value)
        if not isinstance(field, str) or not field.strip() or value is None or not value.strip():
            logger.info(f"Update requested without usable field/value: {data}")
            return cls.no_update()
        return cls(update_needed=True, field=field.strip(), value=value.strip())

    def validate(self) -> bool:
        """True when the result honours the update invariant."""
        if not self.update_needed:
            return True
        return bool(self.field and self.value and self.value.strip())

    def to_response(self) -> Dict[str, Any]:
        """Shape used by the HTTP endpoint: ``{update, field?, value?}``."""
        payload: Dict[str, Any] = {"update": self.update_needed}
        if self.update_needed:
            payload["field"] = self.field
            payload["value"] = self.value
        return payload


def _coerce_value(raw: Any) -> Optional[str]:
    if isinstance(raw, str):
        return raw
    # Models sometimes answer {"extractedValue": 34} for the age step
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        return str(raw)
    return None


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers the model may wrap its answer in."""
    return _FENCE_RE.sub("", text).strip()


def parse_extraction_result(raw_response: str) -> ExtractionResult:
    """
    Parse oracle output into an ExtractionResult.

    Args:
        raw_response: Raw text from the oracle, possibly fenced

    Returns:
        ExtractionResult object

    Raises:
        ValidationError: If the text holds no JSON object or updateNeeded is not a boolean
    """
    cleaned = strip_code_fences(raw_response or "")
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        # Try extracting JSON from text
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise ValidationError("No JSON found in oracle response", raw_response)
        try:
            data = json.loads(cleaned[start:end + 1])
        except json.JSONDecodeError:
            raise ValidationError("Could not extract valid JSON from oracle response", raw_response)

    if not isinstance(data, dict):
        raise ValidationError(f"Expected a JSON object, got {type(data).__name__}", raw_response)
    if not isinstance(data.get("updateNeeded"), bool):
        raise ValidationError("Parsed JSON lacks a boolean 'updateNeeded' field", raw_response)

    return ExtractionResult.from_payload(data)
