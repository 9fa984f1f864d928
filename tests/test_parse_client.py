from unittest.mock import MagicMock

import requests

from healthaudit.config import LLM_TIMEOUT
from healthaudit.api import PARSE_PATH, ParseClient
from healthaudit.interview.catalog import default_catalog
from healthaudit.interview.schemas import ExtractionResult


def make_response(status_code=200, payload=None):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


def test_posts_message_step_and_question():
    session = MagicMock()
    session.post.return_value = make_response(payload={"update": True, "field": "age", "value": "34"})
    client = ParseClient("http://api.local/", session=session)
    step = default_catalog().get("age")

    result = client.extract("I am 34", step)

    assert result == ExtractionResult(True, "age", "34")
    assert session.post.call_args.args[0] == f"http://api.local{PARSE_PATH}"
    assert session.post.call_args.kwargs["json"] == {
        "message": "I am 34", "step": "age", "question": step.question,
    }
    assert client.error is None


def test_no_update_response():
    session = MagicMock()
    session.post.return_value = make_response(payload={"update": False})
    client = ParseClient(session=session)
    assert client.extract("hmm", default_catalog().get("age")) == ExtractionResult.no_update()


def test_http_error_sets_error_message():
    session = MagicMock()
    session.post.return_value = make_response(
        status_code=400, payload={"error": "Missing message or step in request body"}
    )
    client = ParseClient(session=session)
    result = client.extract("x", default_catalog().get("age"))
    assert not result.update_needed
    assert client.error == "Missing message or step in request body"


def test_transport_error_is_no_update():
    session = MagicMock()
    session.post.side_effect = requests.ConnectionError("refused")
    client = ParseClient(session=session)
    result = client.extract("I am 34", default_catalog().get("age"))
    assert result == ExtractionResult.no_update()
    assert "refused" in client.error


def test_default_timeout_outlasts_oracle_call():
    session = MagicMock()
    session.post.return_value = make_response(payload={"update": False})
    client = ParseClient(session=session)
    client.extract("I am 34", default_catalog().get("age"))
    assert session.post.call_args.kwargs["timeout"] > LLM_TIMEOUT
