"""Engine settings, read from the environment."""

import os
from dataclasses import dataclass

# Same ceiling as the display formatter of the calculator screen (toFixed).
MAX_PRECISION = 100
DEFAULT_PRECISION = 2
# The precision control of the calculator screen flips between these two.
PRECISION_CHOICES = (2, 4)
DEFAULT_MAX_EXPRESSION_LENGTH = 2000
DEFAULT_LOG_LEVEL = "WARNING"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class Settings:
    precision: int = DEFAULT_PRECISION
    max_expression_length: int = DEFAULT_MAX_EXPRESSION_LENGTH
    log_level: str = DEFAULT_LOG_LEVEL

    def validate(self) -> None:
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise ValueError("precision must be an integer")
        if not 0 <= self.precision <= MAX_PRECISION:
            raise ValueError(f"precision must be 0..{MAX_PRECISION}")
        if self.max_expression_length < 1:
            raise ValueError("max_expression_length must be positive")
        if self.log_level.upper() not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")


def _int_from_env(env, name, default):
    raw = env.get(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def load_settings(environ=None) -> Settings:
    """Build validated settings from CALC_* environment variables."""
    env = os.environ if environ is None else environ
    settings = Settings(
        precision=_int_from_env(env, "CALC_PRECISION", DEFAULT_PRECISION),
        max_expression_length=_int_from_env(
            env, "CALC_MAX_EXPRESSION_LENGTH", DEFAULT_MAX_EXPRESSION_LENGTH
        ),
        log_level=env.get("CALC_LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper() or DEFAULT_LOG_LEVEL,
    )
    settings.validate()
    return settings
