import asyncio
import threading

from healthaudit.config import SUMMARY_STEP, WELCOME_STEP
from healthaudit.interview.models import ConnectionStatus, Speaker
from healthaudit.interview.schemas import ExtractionResult
from healthaudit.interview.session import InterviewSession
from healthaudit.interview.testing import (
    MockVoiceChannel, create_mock_session, create_test_answers, extraction_json,
)


def user(text):
    return {"source": "user", "message": text}


class BlockingExtractor:
    """Extractor that holds the oracle call open until released."""

    def __init__(self):
        self.started = threading.Event()
        self.release = threading.Event()

    def extract(self, utterance, current_step, question_text=None):
        self.started.set()
        self.release.wait(5)
        return ExtractionResult(True, current_step.extracted_field_name, "34")


def test_full_interview_reaches_summary():
    async def scenario():
        answers = create_test_answers()
        setup = create_mock_session([extraction_json(key, a["value"]) for key, a in answers.items()])
        session = setup["session"]

        assert await session.start()
        assert session.current_step_key == "age"
        for answer in answers.values():
            await session.on_message(user(answer["utterance"]))
        return session, answers

    session, answers = asyncio.run(scenario())
    assert session.current_step_key == SUMMARY_STEP
    assert session.progress().percentage == 100
    assert session.profile.as_dict() == {key: a["value"] for key, a in answers.items()}
    result = session.result()
    assert result.is_complete
    assert result.summary_rows[0] == ("Age", "34")
    metrics = session.metrics.get_metrics()
    assert metrics["fields_extracted"] == 8
    assert metrics["interviews_completed"] == 1


def test_unclear_answer_keeps_question():
    async def scenario():
        setup = create_mock_session([extraction_json(update=False)])
        session = setup["session"]
        await session.start()
        await session.on_message(user("I'd rather not say"))
        return session

    session = asyncio.run(scenario())
    assert session.current_step_key == "age"
    assert session.progress().percentage == 0


def test_utterances_are_serialized_and_stale_step_discarded():
    async def scenario():
        setup = create_mock_session([extraction_json("age", "34"), extraction_json("age", "40")])
        session = setup["session"]
        await session.start()
        await asyncio.gather(
            session.on_message(user("I'm 34")),
            session.on_message(user("actually 40")),
        )
        return session, setup["llm_client"]

    session, client = asyncio.run(scenario())
    assert session.current_step_key == "lifeStage"
    assert session.profile.get("age") == "34"
    assert client.call_count == 1
    assert session.metrics.get("extractions_discarded") == 1


def test_result_discarded_when_session_ends_mid_extraction():
    async def scenario():
        extractor = BlockingExtractor()
        session = InterviewSession(extractor, voice_channel=MockVoiceChannel())
        await session.start()
        task = asyncio.create_task(session.process_utterance("I am 34"))
        while not extractor.started.is_set():
            await asyncio.sleep(0.01)
        assert session.is_parsing
        await session.end()
        extractor.release.set()
        result = await task
        return session, result

    session, result = asyncio.run(scenario())
    assert result is None
    assert not session.is_active
    assert not session.is_parsing
    assert session.status == ConnectionStatus.DISCONNECTED
    assert session.profile.as_dict() == {}
    assert session.current_step_key == "age"
    assert session.metrics.get("extractions_discarded") == 1


def test_reconnect_starts_fresh():
    async def scenario():
        setup = create_mock_session([extraction_json("age", "34")])
        session = setup["session"]
        await session.start()
        await session.on_message(user("I am 34"))
        await session.end()
        assert session.profile.get("age") == "34"
        await session.start()
        return session

    session = asyncio.run(scenario())
    assert session.profile.as_dict() == {}
    assert session.current_step_key == "age"
    assert session.state.transcript == []
    assert session.error_message == ""


def test_messages_ignored_when_inactive():
    async def scenario():
        setup = create_mock_session([extraction_json("age", "34")])
        session = setup["session"]
        result = await session.on_message(user("I am 34"))
        return session, setup["llm_client"], result

    session, client, result = asyncio.run(scenario())
    assert result is None
    assert client.call_count == 0
    assert session.current_step_key == WELCOME_STEP


def test_transcript_records_both_sides_and_skips_malformed():
    async def scenario():
        setup = create_mock_session([extraction_json(update=False)])
        session = setup["session"]
        await session.start()
        await setup["voice_channel"].say(session.current_question)
        await session.on_message({"source": "ai", "message": "Take your time."})
        await session.on_message(user("hmm"))
        await session.on_message({"source": "user"})
        await session.on_message({"source": "robot", "message": "beep"})
        await session.on_message("not a dict")
        return session, setup["llm_client"]

    session, client = asyncio.run(scenario())
    speakers = [entry.speaker for entry in session.state.transcript]
    assert speakers == [Speaker.AGENT, Speaker.AGENT, Speaker.USER]
    assert [e.text for e in session.state.user_turns()] == ["hmm"]
    assert client.call_count == 1


def test_blank_user_message_is_recorded_but_not_extracted():
    async def scenario():
        setup = create_mock_session()
        session = setup["session"]
        await session.start()
        await session.on_message(user("   "))
        return session, setup["llm_client"]

    session, client = asyncio.run(scenario())
    assert len(session.state.transcript) == 1
    assert client.call_count == 0


def test_channel_error_adds_transcript_line():
    async def scenario():
        setup = create_mock_session()
        session = setup["session"]
        await session.start()
        session.on_error("connection dropped")
        return session

    session = asyncio.run(scenario())
    assert session.error_message == "connection dropped"
    assert session.state.transcript[-1].text == "Error: connection dropped"
    assert session.state.transcript[-1].speaker == Speaker.AGENT
    assert session.metrics.get("errors_occurred") == 1


def test_start_failure_is_reported():
    async def scenario():
        setup = create_mock_session(fail_on_start=RuntimeError("microphone denied"))
        session = setup["session"]
        started = await session.start()
        return session, started

    session, started = asyncio.run(scenario())
    assert not started
    assert session.error_message == "Failed to start conversation: microphone denied"
    assert session.status == ConnectionStatus.DISCONNECTED
    assert session.current_step_key == WELCOME_STEP


def test_start_when_channel_does_not_report_connect():
    async def scenario():
        setup = create_mock_session(report_connect=False)
        session = setup["session"]
        await session.start()
        return session

    session = asyncio.run(scenario())
    assert session.status == ConnectionStatus.CONNECTED
    assert session.current_step_key == "age"


def test_mute_only_while_connected():
    async def scenario():
        setup = create_mock_session()
        session = setup["session"]
        channel = setup["voice_channel"]
        before = await session.toggle_mute()
        await session.start()
        muted = await session.toggle_mute()
        muted_state = session.is_muted
        unmuted = await session.toggle_mute()
        return session, channel, before, muted, muted_state, unmuted

    session, channel, before, muted, muted_state, unmuted = asyncio.run(scenario())
    assert not before
    assert muted and muted_state
    assert unmuted and not session.is_muted
    assert channel.volume_history == [0.0, 1.0]


def test_mute_failure_sets_error():
    async def scenario():
        setup = create_mock_session(fail_on_volume=RuntimeError("device busy"))
        session = setup["session"]
        await session.start()
        changed = await session.toggle_mute()
        return session, changed

    session, changed = asyncio.run(scenario())
    assert not changed
    assert not session.is_muted
    assert session.error_message == "Failed to change volume"
