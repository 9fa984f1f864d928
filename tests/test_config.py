import os

import pytest

from healthaudit import config as config_module
from healthaudit.config import Config, get_config

ENV_VARS = [
    "GEMINI_API_KEY", "GOOGLE_CLOUD_PROJECT", "GOOGLE_APPLICATION_CREDENTIALS",
    "HEALTHAUDIT_MODEL", "HEALTHAUDIT_VERTEX_LOCATION", "HEALTHAUDIT_LLM_TIMEOUT",
    "HEALTHAUDIT_LOG_FILE", "HEALTHAUDIT_LOG_LEVEL", "HEALTHAUDIT_API_HOST",
    "HEALTHAUDIT_API_PORT", "HEALTHAUDIT_SPEAKER_VOLUME",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep any developer .env files out of the test
    monkeypatch.chdir(tmp_path)
    yield
    # load_dotenv writes straight into os.environ
    for name in ENV_VARS:
        os.environ.pop(name, None)


def test_defaults():
    config = get_config()
    assert config.model_name == config_module.MODEL_NAME
    assert config.api_port == 8000
    assert not config.has_credentials


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "abc")
    monkeypatch.setenv("HEALTHAUDIT_MODEL", "gemini-2.0-flash")
    monkeypatch.setenv("HEALTHAUDIT_API_PORT", "9000")
    monkeypatch.setenv("HEALTHAUDIT_LLM_TIMEOUT", "2.5")
    monkeypatch.setenv("HEALTHAUDIT_LOG_LEVEL", "debug")
    config = get_config()
    assert config.has_credentials
    assert config.model_name == "gemini-2.0-flash"
    assert config.api_port == 9000
    assert config.llm_timeout == 2.5
    assert config.log_level == "DEBUG"


def test_env_file_is_loaded(tmp_path):
    (tmp_path / ".env").write_text("GOOGLE_CLOUD_PROJECT=from-dotenv\n")
    config = get_config()
    assert config.google_cloud_project == "from-dotenv"
    assert config.has_credentials


def test_volume_is_clamped(monkeypatch):
    monkeypatch.setenv("HEALTHAUDIT_SPEAKER_VOLUME", "3")
    assert get_config().speaker_volume == 1.0


def test_invalid_number_raises(monkeypatch):
    monkeypatch.setenv("HEALTHAUDIT_API_PORT", "eighty")
    with pytest.raises(ValueError, match="HEALTHAUDIT_API_PORT"):
        get_config()


def test_config_credentials_property():
    assert Config(google_cloud_project="p").has_credentials
    assert not Config().has_credentials
