import pytest

from healthaudit.interview.catalog import default_catalog
from healthaudit.interview.errors import ValidationError
from healthaudit.interview.prompts import ExtractionPrompts
from healthaudit.interview.schemas import ExtractionResult, parse_extraction_result, strip_code_fences


def test_plain_update():
    result = parse_extraction_result('{"updateNeeded": true, "profileField": "age", "extractedValue": "34"}')
    assert result == ExtractionResult(update_needed=True, field="age", value="34")


def test_fenced_response():
    raw = '```json\n{"updateNeeded": true, "profileField": "helmetUsage", "extractedValue": "Always"}\n```'
    result = parse_extraction_result(raw)
    assert result.update_needed
    assert result.field == "helmetUsage"
    assert result.value == "Always"


def test_bare_fences():
    assert strip_code_fences('```\n{"updateNeeded": false}\n```') == '{"updateNeeded": false}'


def test_json_surrounded_by_prose():
    result = parse_extraction_result('Sure! {"updateNeeded": false} Hope that helps.')
    assert result == ExtractionResult.no_update()


def test_no_json_raises_with_raw_text():
    with pytest.raises(ValidationError) as excinfo:
        parse_extraction_result("I cannot help with that")
    assert excinfo.value.raw_text == "I cannot help with that"


@pytest.mark.parametrize("raw", [
    '{"updateNeeded": "true", "profileField": "age", "extractedValue": "34"}',
    '{"profileField": "age", "extractedValue": "34"}',
    '["updateNeeded"]',
])
def test_missing_or_non_boolean_flag_raises(raw):
    with pytest.raises(ValidationError):
        parse_extraction_result(raw)


@pytest.mark.parametrize("payload", [
    {"updateNeeded": True, "profileField": "age", "extractedValue": None},
    {"updateNeeded": True, "profileField": "age", "extractedValue": "   "},
    {"updateNeeded": True, "extractedValue": "34"},
])
def test_update_without_usable_value_collapses(payload):
    result = ExtractionResult.from_payload(payload)
    assert not result.update_needed
    assert result.validate()


def test_numeric_value_is_coerced():
    result = ExtractionResult.from_payload({"updateNeeded": True, "profileField": "age", "extractedValue": 34})
    assert result.value == "34"


def test_value_is_trimmed():
    result = ExtractionResult.from_payload(
        {"updateNeeded": True, "profileField": "medications", "extractedValue": "  Metformin  "}
    )
    assert result.value == "Metformin"


def test_to_response():
    assert ExtractionResult.no_update().to_response() == {"update": False}
    assert ExtractionResult(True, "age", "34").to_response() == {"update": True, "field": "age", "value": "34"}


def test_task_prompt_names_field_and_shape():
    step = default_catalog().get("recordPermission")
    task = ExtractionPrompts.task_prompt(step)
    assert '"profileField": "recordPermission"' in task
    assert '{"updateNeeded": false}' in task
    assert "Yes" in task


def test_extraction_prompt_includes_question_and_quoted_message():
    prompt = ExtractionPrompts.extraction_prompt("TASK", 'I said "hi"', "How old are you?")
    assert prompt.startswith("TASK")
    assert 'The user was just asked: "How old are you?"' in prompt
    assert 'User Message: "I said \\"hi\\""' in prompt
    assert prompt.endswith("Respond strictly with the JSON structure specified in the initial instruction.")


def test_extraction_prompt_without_question():
    prompt = ExtractionPrompts.extraction_prompt("TASK", "hello", None)
    assert "The user provided the following message:" in prompt
