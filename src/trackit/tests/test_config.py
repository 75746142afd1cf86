import logging

import pytest

from trackit import config
from trackit.config import Settings, load_settings

ENV_VARS = [
    "OPENAI_API_KEY",
    "TRACKIT_MODEL",
    "TRACKIT_TEMPERATURE",
    "TRACKIT_REGRESSION_WINDOW_DAYS",
    "TRACKIT_TIMELINE_WIDTH",
    "TRACKIT_BAND_HEIGHT",
    "TRACKIT_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    # no .env file and no inherited settings
    monkeypatch.setattr(config, "load_dotenv", lambda: None)
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


# ----------------------------------------------------------------
# 1. DEFAULTS & OVERRIDES
# ----------------------------------------------------------------
def test_defaults_when_nothing_is_set(clean_env):
    assert load_settings() == Settings()


def test_values_read_from_environment(clean_env):
    clean_env.setenv("OPENAI_API_KEY", "sk-test")
    clean_env.setenv("TRACKIT_TEMPERATURE", "0.9")
    clean_env.setenv("TRACKIT_REGRESSION_WINDOW_DAYS", "14")
    clean_env.setenv("TRACKIT_LOG_LEVEL", "debug")

    s = load_settings()

    assert s.openai_api_key == "sk-test"
    assert s.temperature == 0.9
    assert s.regression_window_days == 14
    assert s.log_level == "DEBUG"


# ----------------------------------------------------------------
# 2. INVALID NUMBERS FALL BACK
# ----------------------------------------------------------------
def test_unparsable_number_falls_back_with_warning(clean_env, caplog):
    clean_env.setenv("TRACKIT_BAND_HEIGHT", "abc")

    with caplog.at_level(logging.WARNING, logger="trackit.config"):
        s = load_settings()

    assert s.band_height == 60
    assert "TRACKIT_BAND_HEIGHT" in caplog.text


@pytest.mark.parametrize(
    "name, raw, field, default",
    [
        ("TRACKIT_REGRESSION_WINDOW_DAYS", "-5", "regression_window_days", 7),
        ("TRACKIT_REGRESSION_WINDOW_DAYS", "0", "regression_window_days", 7),
        ("TRACKIT_TIMELINE_WIDTH", "0", "timeline_width", 800),
        ("TRACKIT_BAND_HEIGHT", "-1", "band_height", 60),
    ],
)
def test_out_of_range_number_falls_back_with_warning(clean_env, caplog, name, raw, field, default):
    clean_env.setenv(name, raw)

    with caplog.at_level(logging.WARNING, logger="trackit.config"):
        s = load_settings()

    assert getattr(s, field) == default
    assert "below minimum" in caplog.text
