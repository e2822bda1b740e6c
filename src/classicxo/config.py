"""Environment-driven settings for the ClassicXO server."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional
import os

from .ai import DEFAULT_RANDOM_MOVE_PROBABILITY, DifficultyConfig

ENV_PREFIX = "CLASSICXO_"


@dataclass(frozen=True)
class Settings:
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    random_move_probability: float = DEFAULT_RANDOM_MOVE_PROBABILITY


def _env(environ: Mapping[str, str], name: str, default: str) -> str:
    v = environ.get(ENV_PREFIX + name)
    if v is not None and v.strip() != "":
        return v.strip()
    return default


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Read ``CLASSICXO_*`` variables, falling back to the defaults."""

    if environ is None:
        environ = os.environ
    defaults = Settings()

    port_raw = _env(environ, "PORT", str(defaults.port))
    try:
        port = int(port_raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}PORT must be an integer, got {port_raw!r}") from exc

    prob_raw = _env(
        environ, "RANDOM_MOVE_PROBABILITY", str(defaults.random_move_probability)
    )
    try:
        probability = DifficultyConfig(float(prob_raw)).random_move_probability
    except ValueError as exc:
        raise ValueError(
            f"{ENV_PREFIX}RANDOM_MOVE_PROBABILITY must be a number in [0, 1], "
            f"got {prob_raw!r}"
        ) from exc

    return Settings(
        host=_env(environ, "HOST", defaults.host),
        port=port,
        log_level=_env(environ, "LOG_LEVEL", defaults.log_level).upper(),
        random_move_probability=probability,
    )
