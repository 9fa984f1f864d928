"""
Gemini REST client for LLM interactions.

Two auth modes:
- API key against the Generative Language API (``x-goog-api-key``)
- OAuth token from google-auth against Vertex AI, when a project is configured
"""
import json
import logging
from typing import Optional, Dict, Any

import requests
import google.auth
import google.auth.exceptions
import google.auth.transport.requests
from google.oauth2 import service_account

from ...config import (
    VERTEX_LOCATION, MODEL_NAME, LLM_TIMEOUT, MAX_OUTPUT_TOKENS,
    GENERATIVE_LANGUAGE_URL, CLOUD_PLATFORM_SCOPE,
)
from ...interview.errors import ConfigurationError, UpstreamError

logger = logging.getLogger("llm_client")


class GeminiRestClient:
    """REST-based client for Gemini models."""

    def __init__(self,
                 api_key: Optional[str] = None,
                 project: Optional[str] = None,
                 location: str = VERTEX_LOCATION,
                 model: str = MODEL_NAME,
                 credentials_json: Optional[str] = None,
                 timeout: float = LLM_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.project = project
        self.location = location
        self.model = model
        self.credentials_json = credentials_json
        self.timeout = timeout
        self._session = session or requests.Session()
        self._credentials = None

    @property
    def uses_vertex(self) -> bool:
        return not self.api_key and bool(self.project)

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key or self.project)

    def _endpoint(self) -> str:
        if self.uses_vertex:
            base_url = f"https://{self.location}-aiplatform.googleapis.com/v1"
            model_resource = f"projects/{self.project}/locations/{self.location}/publishers/google/models/{self.model}"
            return f"{base_url}/{model_resource}:generateContent"
        return f"{GENERATIVE_LANGUAGE_URL}/models/{self.model}:generateContent"

    def _refresh_token(self) -> str:
        """Return a valid OAuth token for Vertex API calls, refreshing it when expired."""
        try:
            if self._credentials is None:
                if self.credentials_json:
                    self._credentials = service_account.Credentials.from_service_account_file(
                        self.credentials_json,
                        scopes=[CLOUD_PLATFORM_SCOPE],
                    )
                else:
                    self._credentials, _ = google.auth.default(scopes=[CLOUD_PLATFORM_SCOPE])

            # valid is False once the token has expired
            if not self._credentials.valid:
                auth_req = google.auth.transport.requests.Request()
                self._credentials.refresh(auth_req)
        except (google.auth.exceptions.GoogleAuthError, OSError) as e:
            raise ConfigurationError(f"Could not obtain Google credentials: {e}") from e
        return self._credentials.token

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.uses_vertex:
            headers["Authorization"] = f"Bearer {self._refresh_token()}"
        else:
            headers["x-goog-api-key"] = self.api_key
        return headers

    def generate_content(
        self,
        prompt_text: str,
        temperature: float = 0.0,
        max_output_tokens: int = MAX_OUTPUT_TOKENS,
        response_mime_type: Optional[str] = None,
    ) -> str:
        """
        Generate content with a single generateContent call.

        Raises:
            ConfigurationError: No API key and no project configured
            UpstreamError: Transport failure, timeout, or HTTP error status
        """
        if not self.is_configured:
            raise ConfigurationError("Gemini API key not found in environment variables")

        body: Dict[str, Any] = {
            "contents": [
                {
                    "role": "user",
                    "parts": [{"text": prompt_text}],
                }
            ],
            "generationConfig": {
                "temperature": float(temperature),
                "maxOutputTokens": int(max_output_tokens),
            },
        }

        if response_mime_type:
            body["generationConfig"]["responseMimeType"] = response_mime_type

        url = self._endpoint()
        try:
            resp = self._session.post(url, headers=self._headers(), json=body, timeout=self.timeout)
        except requests.Timeout as e:
            raise UpstreamError(f"Gemini request timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise UpstreamError(f"Gemini request failed: {e}") from e

        if resp.status_code >= 400:
            if resp.status_code == 401 and self.uses_vertex:
                # Revoked credentials; the next call reloads them
                self._credentials = None
            raise UpstreamError(f"Gemini REST error {resp.status_code}: {resp.text}")

        try:
            payload = resp.json()
        except ValueError as e:
            raise UpstreamError(f"Gemini returned a non-JSON envelope: {resp.text[:200]}") from e

        return self._parse_response_text(payload)

    def _parse_response_text(self, resp_json: Dict[str, Any]) -> str:
        """
        Parse response JSON to extract text content.
        Tries the candidates schema first, then falls back to alternatives.
        """
        cands = resp_json.get("candidates") or []
        if cands and isinstance(cands[0], dict):
            content = cands[0].get("content") or {}
            parts = content.get("parts") or []
            if isinstance(parts, list):
                # Find first part with "text"
                for p in parts:
                    if isinstance(p, dict) and isinstance(p.get("text"), str):
                        return p["text"]
            if isinstance(content.get("text"), str):
                return content["text"]

        if isinstance(resp_json.get("text"), str):
            return resp_json["text"]

        # Last resort: return JSON for inspection
        logger.warning("No text part in Gemini response")
        return json.dumps(resp_json, separators=(",", ":"))
