# trackit/config.py

import os
import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# -----------------------------------------------------------
# Visual constants – Bold Flat Palette
# -----------------------------------------------------------
FLAT_COLORS = {
    "blue": "#1E88E5",   # primary
    "green": "#43A047",  # success
    "amber": "#FB8C00",  # warning
    "red": "#E53935",    # danger
    "purple": "#8E24AA", # accent
    "grey": "#757575",   # neutral
    "navy": "#232F3E",
    "orange": "#FF9900",
}

STATUS_COLORS = {
    "ON_TRACK": FLAT_COLORS["green"],
    "AT_RISK": FLAT_COLORS["amber"],
    "DELAYED": FLAT_COLORS["red"],
    "COMPLETED": FLAT_COLORS["blue"],
}

STATUS_LABELS = {
    "ON_TRACK": "On Track",
    "AT_RISK": "At Risk",
    "DELAYED": "Delayed",
    "COMPLETED": "Completed",
}


# -----------------------------------------------------------
# Runtime settings (environment / .env)
# -----------------------------------------------------------

@dataclass(frozen=True)
class Settings:
    openai_api_key: Optional[str] = None
    model: str = "gpt-4o-mini"
    temperature: float = 0.4
    regression_window_days: int = 7
    timeline_width: int = 800
    band_height: int = 60
    log_level: str = "INFO"


def _env_number(name: str, default, cast, minimum=None):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {name}={raw!r}; using default {default!r}")
        return default
    if minimum is not None and value < minimum:
        logger.warning(f"Ignoring {name}={raw!r} below minimum {minimum!r}; using default {default!r}")
        return default
    return value


def load_settings() -> Settings:
    """
    Build Settings from the process environment.

    A local .env file is read first (python-dotenv) without overriding
    variables that are already set.
    """
    load_dotenv()

    defaults = Settings()
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY") or None,
        model=os.getenv("TRACKIT_MODEL", defaults.model),
        temperature=_env_number("TRACKIT_TEMPERATURE", defaults.temperature, float),
        regression_window_days=_env_number(
            "TRACKIT_REGRESSION_WINDOW_DAYS", defaults.regression_window_days, int, minimum=1
        ),
        timeline_width=_env_number("TRACKIT_TIMELINE_WIDTH", defaults.timeline_width, int, minimum=1),
        band_height=_env_number("TRACKIT_BAND_HEIGHT", defaults.band_height, int, minimum=1),
        log_level=os.getenv("TRACKIT_LOG_LEVEL", defaults.log_level).upper(),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()
