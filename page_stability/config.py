"""Configuration for PageStability."""

import os
from pathlib import Path
from typing import Literal, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, model_validator

from .core.errors import ConfigurationError

ENV_PREFIX = "PAGE_STABILITY_"


class StabilityConfig(BaseModel):
    """Defaults shared by waits, frame switching and the browser session."""
    timeout: float = Field(default=30.0, gt=0)
    poll_interval: float = Field(default=0.1, gt=0)
    frame_switch_attempts: int = Field(default=2, ge=1)
    verbose: int = Field(default=0, ge=0, le=3)
    headless: bool = True
    browser: Literal["chromium", "firefox", "webkit"] = "chromium"

    @model_validator(mode="after")
    def _interval_within_timeout(self) -> "StabilityConfig":
        if self.poll_interval > self.timeout:
            raise ValueError("poll_interval must not exceed timeout")
        return self

    @classmethod
    def from_env(cls, env_file: Optional[Union[str, Path]] = None, **overrides) -> "StabilityConfig":
        """
        Build a config from PAGE_STABILITY_* environment variables.

        A .env file is loaded first (without overriding variables already
        set in the process). Explicit keyword overrides win over both.

        Raises:
            ConfigurationError: If a value fails validation
        """
        load_dotenv(env_file or find_dotenv(usecwd=True), override=False)

        values = {}
        for field in cls.model_fields:
            raw = os.getenv(f"{ENV_PREFIX}{field.upper()}")
            if raw is not None and raw != "":
                values[field] = raw
        values.update(overrides)

        try:
            return cls(**values)
        except ValidationError as e:
            raise ConfigurationError(str(e)) from e
