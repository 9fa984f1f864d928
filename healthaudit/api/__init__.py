"""HTTP extraction endpoint and its client."""

from .api import create_app, ParseRequest, ParseResponse, PARSE_PATH
from .client import ParseClient

__all__ = ["create_app", "ParseRequest", "ParseResponse", "PARSE_PATH", "ParseClient"]
