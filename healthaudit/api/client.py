"""
HTTP client for the extraction endpoint.

ParseClient exposes the same ``extract(utterance, step, question_text)``
call as FieldExtractor, so a session can run against a remote API.
"""
import logging
from typing import Optional

import requests

from ..config import PARSE_CLIENT_TIMEOUT
from ..interview.catalog import Step
from ..interview.schemas import ExtractionResult
from .api import PARSE_PATH

logger = logging.getLogger("parse_client")


class ParseClient:
    """Posts utterances to ``/api/parse-profile-update``."""

    def __init__(self, base_url: str = "http://localhost:8000", timeout: float = PARSE_CLIENT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._session = session or requests.Session()
        self.error: Optional[str] = None

    def extract(self, utterance: str, current_step: Step,
                question_text: Optional[str] = None) -> ExtractionResult:
        """Returns a no-update result on any transport or HTTP error."""
        self.error = None
        question = question_text if question_text is not None else current_step.question
        logger.info(f"Parsing message for step '{current_step.key}': {utterance[:50]!r}")

        try:
            response = self._session.post(
                f"{self.base_url}{PARSE_PATH}",
                json={"message": utterance, "step": current_step.key, "question": question},
                timeout=self.timeout,
            )
            if response.status_code >= 400:
                try:
                    detail = response.json().get("error")
                except ValueError:
                    detail = None
                raise RuntimeError(detail or f"API request failed with status {response.status_code}")
            payload = response.json()
        except (requests.RequestException, RuntimeError, ValueError) as e:
            logger.error(f"Error calling parse API: {e}")
            self.error = str(e) or "Failed to parse message"
            return ExtractionResult.no_update()

        logger.debug(f"Received API response: {payload}")
        if not isinstance(payload, dict) or payload.get("update") is not True:
            return ExtractionResult.no_update()
        return ExtractionResult.from_payload({
            "updateNeeded": True,
            "profileField": payload.get("field"),
            "extractedValue": payload.get("value"),
        })
