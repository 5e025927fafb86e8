"""Custom exceptions for the media transform handler."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Closed set of failure kinds exposed to callers."""

    MISSING_OBJECT_KEY = "missing_object_key"
    DIMENSION_EXCEEDED = "dimension_exceeded"
    OBJECT_NOT_FOUND = "object_not_found"
    UNSUPPORTED_OUTPUT_FORMAT = "unsupported_output_format"
    ANIMATED_SOURCE_UNSUPPORTED = "animated_source_unsupported"
    UNSUPPORTED_INPUT_FORMAT = "unsupported_input_format"
    INTERNAL_ERROR = "internal_error"


class MediaTransformError(Exception):
    """Base exception for all media transform errors."""

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class MissingObjectKeyError(MediaTransformError):
    """The request carried no object key in its path."""

    kind = ErrorKind.MISSING_OBJECT_KEY


class DimensionExceededError(MediaTransformError):
    """Requested resize is larger than the configured bounds."""

    kind = ErrorKind.DIMENSION_EXCEEDED

    def __init__(
        self,
        message: str = "Requested dimensions exceed the configured maximum",
        max_width: Optional[int] = None,
        max_height: Optional[int] = None,
    ):
        super().__init__(message)
        self.max_width = max_width
        self.max_height = max_height


class ObjectNotFoundError(MediaTransformError):
    """The object store has no object under the requested key."""

    kind = ErrorKind.OBJECT_NOT_FOUND


class UnsupportedOutputFormatError(MediaTransformError):
    """GIF (or another non-encodable target) was requested as output."""

    kind = ErrorKind.UNSUPPORTED_OUTPUT_FORMAT


class AnimatedSourceUnsupportedError(MediaTransformError):
    """A multi-frame source was asked to be transformed."""

    kind = ErrorKind.ANIMATED_SOURCE_UNSUPPORTED


class UnsupportedInputFormatError(MediaTransformError):
    """The codec could not decode the fetched bytes."""

    kind = ErrorKind.UNSUPPORTED_INPUT_FORMAT


class S3Error(MediaTransformError):
    """Error raised for S3 related failures other than a missing key."""


class ConfigurationError(MediaTransformError):
    """Error raised for invalid or missing configuration."""


class ImageProcessingError(MediaTransformError):
    """Error raised when the codec fails on a decodable image."""
