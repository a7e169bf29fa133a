"""
Runtime settings.

Defaults reproduce the timings of the desktop tutor. Every field can be overridden through an environment
variable named CHESSTUTOR_<FIELD NAME IN CAPITALS>.
"""

import os
from typing import Self

from pydantic import BaseModel, field_validator

ENV_PREFIX = "CHESSTUTOR_"


class TutorSettings(BaseModel):
    # puzzle replay timings (milliseconds)
    opponent_reply_delay_ms: int = 1000
    solution_step_delay_ms: int = 1000
    solution_pause_ms: int = 500
    solution_finish_delay_ms: int = 2500

    # presentation hints
    capture_particles: int = 30

    # scoring
    elo_k_factor: int = 32
    starting_elo: int = 1200

    # puzzle source
    max_puzzle_draws: int = 500
    database_url: str = "sqlite:///chesstutor.db"

    @field_validator(
        "opponent_reply_delay_ms",
        "solution_step_delay_ms",
        "solution_pause_ms",
        "solution_finish_delay_ms",
    )
    @classmethod
    def validate_delay(cls, value: int) -> int:
        if value < 0:
            raise ValueError(f"Delays cannot be negative, got {value} ms.")
        return value

    @field_validator("capture_particles", "elo_k_factor", "max_puzzle_draws")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError(f"Value must be positive, got {value}.")
        return value

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        """Collect overrides from the environment. Pydantic takes care of the type conversion."""
        environ = dict(os.environ) if environ is None else environ
        overrides = {
            name: environ[f"{ENV_PREFIX}{name.upper()}"]
            for name in cls.model_fields
            if f"{ENV_PREFIX}{name.upper()}" in environ
        }
        return cls(**overrides)
