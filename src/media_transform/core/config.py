"""Handler configuration sourced from the environment."""

import os
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .formats import FormatAlias, OutputFormat

DEFAULT_REGION = "ap-southeast-1"
DEFAULT_QUALITY = 85
DEFAULT_MAX_DIMENSION = 3000


def _positive_int_or(value: Any, default: int) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


class HandlerConfig(BaseModel):
    """Configuration for the handler, built once per process."""

    model_config = ConfigDict(frozen=True)

    source_bucket: str = ""
    region: str = DEFAULT_REGION
    default_format: OutputFormat = OutputFormat.WEBP
    default_quality: int = DEFAULT_QUALITY
    max_width: int = DEFAULT_MAX_DIMENSION
    max_height: int = DEFAULT_MAX_DIMENSION

    @field_validator("default_format", mode="before")
    @classmethod
    def _coerce_format(cls, value: Any) -> OutputFormat:
        if isinstance(value, OutputFormat):
            return value
        alias = FormatAlias.lookup(str(value) if value is not None else None)
        return alias.target or OutputFormat.WEBP

    @field_validator("default_quality", mode="before")
    @classmethod
    def _coerce_quality(cls, value: Any) -> int:
        return _positive_int_or(value, DEFAULT_QUALITY)

    @field_validator("max_width", "max_height", mode="before")
    @classmethod
    def _coerce_dimension(cls, value: Any) -> int:
        return _positive_int_or(value, DEFAULT_MAX_DIMENSION)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "HandlerConfig":
        """
        Build the configuration from environment variables.

        Environment Variables:
            SOURCE_BUCKET: Bucket holding the source objects
            AWS_REGION: Region of the bucket (defaults to ap-southeast-1)
            DEFAULT_FMT: Output format when none is requested (defaults to webp)
            DEFAULT_QUAL: Quality when none is requested (defaults to 85)
            MAX_W / MAX_H: Largest accepted resize per axis (default 3000)
        """
        env = os.environ if environ is None else environ
        return cls(
            source_bucket=env.get("SOURCE_BUCKET", ""),
            region=env.get("AWS_REGION") or DEFAULT_REGION,
            default_format=env.get("DEFAULT_FMT"),
            default_quality=env.get("DEFAULT_QUAL"),
            max_width=env.get("MAX_W"),
            max_height=env.get("MAX_H"),
        )
