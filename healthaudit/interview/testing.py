"""
Testing infrastructure with mock services for the interview system.
"""
import json
from typing import Any, Dict, List, Optional, Sequence, Union

from .catalog import QuestionCatalog, default_catalog
from .extractor import FieldExtractor
from .session import InterviewSession
from ..infrastructure.voice import VoiceChannel


def extraction_json(field: Optional[str] = None, value: Optional[str] = None,
                    update: bool = True, fenced: bool = False) -> str:
    """Oracle reply in the mandated shape."""
    if update:
        payload: Dict[str, Any] = {"updateNeeded": True, "profileField": field, "extractedValue": value}
    else:
        payload = {"updateNeeded": False}
    text = json.dumps(payload)
    if fenced:
        return f"```json\n{text}\n```"
    return text


class MockLLMClient:
    """Mock LLM client returning scripted responses in order."""

    FALLBACK_RESPONSE = '{"updateNeeded": false}'

    def __init__(self, mock_responses: Sequence[Union[str, Exception]] = ()):
        self.mock_responses = list(mock_responses)
        self.current_response_idx = 0
        self.request_history: List[Dict[str, Any]] = []

    def generate_content(self, prompt: str, temperature: float = 0.0, **kwargs) -> str:
        """Return the next scripted response, raising it if it is an exception."""
        self.request_history.append({
            "prompt": prompt,
            "temperature": temperature,
            "kwargs": kwargs
        })

        if self.current_response_idx < len(self.mock_responses):
            response = self.mock_responses[self.current_response_idx]
            self.current_response_idx += 1
        else:
            response = self.FALLBACK_RESPONSE

        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.request_history)


class MockVoiceChannel(VoiceChannel):
    """Mock voice channel that records what the agent said and volume changes."""

    def __init__(self, fail_on_start: Optional[Exception] = None,
                 fail_on_volume: Optional[Exception] = None,
                 report_connect: bool = True):
        super().__init__()
        self.fail_on_start = fail_on_start
        self.fail_on_volume = fail_on_volume
        self.report_connect = report_connect
        self.spoken_messages: List[str] = []
        self.volume_history: List[float] = []
        self.sessions_started = 0
        self.sessions_ended = 0

    async def start_session(self) -> None:
        if self.fail_on_start is not None:
            raise self.fail_on_start
        self.sessions_started += 1
        if self.listener is not None and self.report_connect:
            self.listener.on_connect()

    async def end_session(self) -> None:
        self.sessions_ended += 1
        if self.listener is not None:
            self.listener.on_disconnect()

    async def set_volume(self, volume: float) -> None:
        if self.fail_on_volume is not None:
            raise self.fail_on_volume
        await super().set_volume(volume)
        self.volume_history.append(self.volume)

    async def say(self, text: str) -> None:
        self.spoken_messages.append(text)
        await super().say(text)


def create_mock_session(mock_responses: Sequence[Union[str, Exception]] = (),
                        catalog: Optional[QuestionCatalog] = None,
                        **channel_kwargs) -> Dict[str, Any]:
    """Create a session wired to a scripted oracle and a mock voice channel."""
    llm_client = MockLLMClient(mock_responses)
    extractor = FieldExtractor(llm_client)
    voice_channel = MockVoiceChannel(**channel_kwargs)
    session = InterviewSession(
        extractor,
        catalog=catalog or default_catalog(),
        voice_channel=voice_channel,
        session_id="test_session",
    )
    return {
        "llm_client": llm_client,
        "extractor": extractor,
        "voice_channel": voice_channel,
        "session": session,
    }


def create_test_answers() -> Dict[str, Dict[str, str]]:
    """One unambiguous answer per default step, with the value the oracle should return."""
    return {
        "age": {"utterance": "I am 34 years old", "value": "34"},
        "lifeStage": {"utterance": "I'm pretty settled in my career now", "value": "Established Career"},
        "helmetUsage": {"utterance": "I always wear a helmet when I ride", "value": "Always"},
        "healthVision": {"utterance": "Staying mobile as I get older matters most", "value": "Physical Mobility"},
        "moneyRelationship": {"utterance": "I'm careful, I don't spend much", "value": "Cautious"},
        "medications": {"utterance": "nothing", "value": "None"},
        "recordPermission": {"utterance": "Sure, go ahead", "value": "Yes"},
        "additionalHealthInfo": {"utterance": "I had knee surgery last year", "value": "Knee surgery last year"},
    }
