"""Shared data models for the media transform handler."""

import base64
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from .formats import OutputFormat

IMMUTABLE_CACHE_CONTROL = "public, max-age=31536000, immutable"


class ParsedResize(BaseModel):
    """Target box of a resize; None leaves that axis unconstrained."""

    model_config = ConfigDict(frozen=True)

    width: Optional[int] = None
    height: Optional[int] = None

    @property
    def requested(self) -> bool:
        return bool(self.width or self.height)


class ParsedCrop(BaseModel):
    """Rectangle to extract from the source, in source pixels."""

    model_config = ConfigDict(frozen=True)

    left: int = Field(ge=0)
    top: int = Field(ge=0)
    width: int = Field(ge=0)
    height: int = Field(ge=0)

    @property
    def box(self) -> tuple:
        """Pillow (left, upper, right, lower) box."""
        return (self.left, self.top, self.left + self.width, self.top + self.height)


class DirectivePresence(BaseModel):
    """Which raw query parameters the caller supplied."""

    model_config = ConfigDict(frozen=True)

    resize: bool = False
    crop: bool = False
    format: bool = False
    quality: bool = False

    @property
    def any(self) -> bool:
        return self.resize or self.crop or self.format or self.quality


class TransformRequest(BaseModel):
    """Typed, validated directives for one inbound request."""

    model_config = ConfigDict(frozen=True)

    object_key: str
    resize: ParsedResize = Field(default_factory=ParsedResize)
    crop: Optional[ParsedCrop] = None
    format: OutputFormat = OutputFormat.WEBP
    requested_format: Optional[str] = None
    quality: int
    present: DirectivePresence = Field(default_factory=DirectivePresence)


class ImageInfo(BaseModel):
    """Result of probing encoded image bytes."""

    width: int
    height: int
    format: str
    pages: int = 1

    @property
    def animated(self) -> bool:
        return self.pages > 1


class FetchedObject(BaseModel):
    """Object body and declared metadata as returned by the store."""

    key: str
    body: bytes
    content_type: Optional[str] = None


class ResponseEnvelope(BaseModel):
    """Binary success response before it is rendered for the proxy."""

    status_code: int = 200
    content_type: str
    cache_control: str = IMMUTABLE_CACHE_CONTROL
    body: bytes
    is_binary: bool = True

    def to_proxy_response(self) -> Dict[str, Any]:
        """Render in the API Gateway proxy integration shape."""
        return {
            "statusCode": self.status_code,
            "headers": {
                "Content-Type": self.content_type,
                "Cache-Control": self.cache_control,
                "Content-Length": str(len(self.body)),
            },
            "body": base64.b64encode(self.body).decode("ascii"),
            "isBase64Encoded": self.is_binary,
        }
