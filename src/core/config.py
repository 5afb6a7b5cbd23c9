"""
Runtime settings.

Defaults are what the game plays with. Any of them can be overridden with an environment variable
named XIANGQI_<FIELD NAME IN CAPITALS>, e.g. XIANGQI_AI_DELAY_SECONDS=0.2
"""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from src.core.shared_types import Color

ENV_PREFIX = "XIANGQI_"


class Settings(BaseModel):
    ai_delay_seconds: float = Field(0.8, ge=0.0)
    ai_strategy: str = "random"
    ai_color: Color = Color.BLACK
    # chance that a capture opens a dare (otherwise a reward)
    dare_probability: float = Field(0.5, ge=0.0, le=1.0)
    random_seed: Optional[int] = None

    model_config = {"extra": "forbid"}


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment. Invalid values raise a pydantic ValidationError."""
    environ = os.environ if environ is None else environ
    overrides = {
        name: environ[f"{ENV_PREFIX}{name.upper()}"]
        for name in Settings.model_fields
        if f"{ENV_PREFIX}{name.upper()}" in environ
    }
    return Settings.model_validate(overrides)
