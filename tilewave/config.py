"""
Generation settings.

GenerationConfig bundles the knobs of a generation run. Values can come from
code or from TILEWAVE_* environment variables (a .env file is honored).
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

ENV_PREFIX = "TILEWAVE_"


class GenerationConfig(BaseModel):
    """Settings for one generation run."""

    model_config = ConfigDict(frozen=True)

    width: int = Field(default=16, ge=1)
    height: int = Field(default=16, ge=1)
    seed: int | None = None

    # None = keep attempting until every slot is decided
    attempts: int | None = Field(default=None, ge=1)

    # Fresh-grid restarts after a contradiction (0 = fail on the first one)
    max_retries: int = Field(default=0, ge=0)

    # Pixels compared per edge by the default constraint
    samples: int = Field(default=3, ge=2)

    tile_dir: Path | None = None

    @classmethod
    def from_env(cls, env_file: Path | str | None = None, **overrides) -> GenerationConfig:
        """
        Build a config from TILEWAVE_* environment variables.

        TILEWAVE_WIDTH=32 sets `width`, TILEWAVE_TILE_DIR=tiles sets
        `tile_dir`, and so on. Keyword overrides win over the environment.
        """
        load_dotenv(env_file)

        values = {}
        for name in cls.model_fields:
            raw = os.environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw is not None and raw != "":
                values[name] = raw
        values.update(overrides)
        return cls.model_validate(values)
