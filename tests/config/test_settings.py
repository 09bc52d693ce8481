from __future__ import annotations

import pytest

from what_should_i_do.config.profiles import get_profile
from what_should_i_do.config.settings import PROJECT_ROOT, load_api_keys, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "OPENROUTER_API_KEY1", "OPENROUTER_API_KEY2", "OPENROUTER_API_KEY3", "OPENROUTER_API_KEYS",
        "WSID_ANALYZER", "WSID_REMOTE_TIMEOUT", "WSID_LOG_FILE", "WSID_RULE_PROFILE",
    ):
        monkeypatch.delenv(name, raising=False)


def test_api_keys_keep_order_and_skip_duplicates(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENROUTER_API_KEY1", "k1")
    monkeypatch.setenv("OPENROUTER_API_KEY3", "k3")
    monkeypatch.setenv("OPENROUTER_API_KEYS", "k4, k1 ,")

    assert load_api_keys() == ["k1", "k3", "k4"]


def test_settings_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WSID_ANALYZER", " Ollama ")
    monkeypatch.setenv("WSID_REMOTE_TIMEOUT", "7.5")
    monkeypatch.setenv("WSID_LOG_FILE", "logs/wsid.log")

    settings = load_settings()

    assert settings.analyzer == "ollama"
    assert settings.remote_timeout == 7.5
    assert settings.log_file == PROJECT_ROOT / "logs" / "wsid.log"
    assert settings.rule_profile == "standard"


def test_bad_timeout_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("WSID_REMOTE_TIMEOUT", "soon")
    with pytest.raises(RuntimeError):
        load_settings()


def test_profiles() -> None:
    assert get_profile().name == "standard"
    assert get_profile(" STRICT ").rules.min_sentence_length == 40
    assert get_profile("standard", summary_strategy="decision").summary.strategy == "decision"
    with pytest.raises(ValueError):
        get_profile("lenient")
