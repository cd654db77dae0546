"""Configuration models describing Tagger settings."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class TaggerBaseModel(BaseModel):
    """Shared configuration for Tagger Pydantic models."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ResolutionOptions(TaggerBaseModel):
    """Options governing how search roots are resolved.

    Attributes:
        workers: Number of roots resolved concurrently. ``1`` resolves roots
            one after another on the calling thread.
    """

    workers: int = Field(default=1, ge=1)


class LoggingSettings(TaggerBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level for the ``tagger`` logger.
    """

    level: str = "WARNING"


class TaggerConfig(TaggerBaseModel):
    """Top-level settings stored in ``~/.config/tagger/settings.yaml``.

    Attributes:
        dirs: Default search roots; ``~`` and glob patterns are expanded.
        or_mode: Report the union of label hits instead of the intersection.
            Serialized under the ``or`` key.
        resolution: Root resolution options.
        logging: Logging configuration.
    """

    dirs: List[str] = Field(default_factory=list)
    or_mode: bool = Field(default=False, alias="or")
    resolution: ResolutionOptions = Field(default_factory=ResolutionOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    def to_mapping(self) -> dict:
        """Return the settings as plain data keyed the way the file stores them."""
        return self.model_dump(mode="python", by_alias=True)


__all__ = [
    "TaggerBaseModel",
    "ResolutionOptions",
    "LoggingSettings",
    "TaggerConfig",
]
