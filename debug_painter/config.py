"""
Painter Configuration
"""
import os
import logging
from typing import Any, Dict, Mapping, Optional, Union

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class PainterConfig(BaseModel):
    """
    Options for a DebugPainter instance.

    Fixed at construction. Unknown keys are accepted and dropped, and the
    camelCase spellings (showTimings, showMemory, slowThreshold) are
    accepted next to the snake_case field names.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    show_timings: bool = Field(default=True, alias="showTimings")
    show_memory: bool = Field(default=True, alias="showMemory")
    colorize: bool = Field(default=True)
    slow_threshold: float = Field(default=100.0, ge=0, alias="slowThreshold")  # ms

    @classmethod
    def build(
        cls,
        options: Optional[Union["PainterConfig", Mapping[str, Any]]] = None,
        **overrides: Any,
    ) -> "PainterConfig":
        """
        Merge options over the defaults.

        Args:
            options: A PainterConfig or a mapping of option names to values
            **overrides: Applied after options

        Raises:
            ConfigurationError: If a recognised option has an invalid value
        """
        if isinstance(options, PainterConfig):
            merged: Dict[str, Any] = options.model_dump()
        else:
            merged = dict(options or {})
        merged.update(overrides)

        try:
            return cls.model_validate(merged)
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid debug painter options: {e.errors()[0]['msg']}",
                context={"options": merged},
            ) from e

    @classmethod
    def from_env(cls, **overrides: Any) -> "PainterConfig":
        """
        Build a configuration from DEBUG_PAINTER_* environment variables.

        A .env file found from the working directory upwards is loaded
        first. NO_COLOR (any non-empty value) turns colour off unless
        DEBUG_PAINTER_COLORIZE says otherwise.
        """
        load_dotenv(find_dotenv(usecwd=True))

        options: Dict[str, Any] = {}
        for field, env_name in (
            ("show_timings", "DEBUG_PAINTER_SHOW_TIMINGS"),
            ("show_memory", "DEBUG_PAINTER_SHOW_MEMORY"),
            ("colorize", "DEBUG_PAINTER_COLORIZE"),
        ):
            raw = os.getenv(env_name)
            if raw is not None:
                options[field] = _parse_bool(env_name, raw)

        if "colorize" not in options and os.getenv("NO_COLOR"):
            options["colorize"] = False

        raw_threshold = os.getenv("DEBUG_PAINTER_SLOW_THRESHOLD_MS")
        if raw_threshold is not None:
            try:
                options["slow_threshold"] = float(raw_threshold)
            except ValueError as e:
                raise ConfigurationError(
                    f"DEBUG_PAINTER_SLOW_THRESHOLD_MS must be a number (got {raw_threshold!r})"
                ) from e

        config = cls.build(options, **overrides)
        logger.debug(f"[DEBUG_PAINTER] Loaded config from environment: {config.model_dump()}")
        return config


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag (got {raw!r})")
