# src/media_transform/core/error_handling.py

import functools
import json
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from botocore.exceptions import ClientError as BotocoreClientError
from PIL import UnidentifiedImageError as PILUnidentifiedImageError

from .exceptions import (
    DimensionExceededError,
    ErrorKind,
    ImageProcessingError,
    MediaTransformError,
    ObjectNotFoundError,
    S3Error,
    UnsupportedInputFormatError,
)

NOT_FOUND_CODES = ("NoSuchKey", "NotFound", "404")
_NOT_FOUND_MESSAGE = re.compile(r"NoSuchKey|Not ?Found", re.IGNORECASE)
_UNSUPPORTED_INPUT_MESSAGE = re.compile(
    r"unsupported image format|cannot identify image", re.IGNORECASE
)

ERROR_STATUS: Dict[ErrorKind, int] = {
    ErrorKind.MISSING_OBJECT_KEY: 400,
    ErrorKind.DIMENSION_EXCEEDED: 400,
    ErrorKind.OBJECT_NOT_FOUND: 404,
    ErrorKind.UNSUPPORTED_OUTPUT_FORMAT: 400,
    ErrorKind.ANIMATED_SOURCE_UNSUPPORTED: 400,
    ErrorKind.UNSUPPORTED_INPUT_FORMAT: 400,
    ErrorKind.INTERNAL_ERROR: 500,
}

ERROR_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.MISSING_OBJECT_KEY: "Missing image path",
    ErrorKind.DIMENSION_EXCEEDED: "Image dimensions exceed maximum allowed size",
    ErrorKind.OBJECT_NOT_FOUND: "Image not found",
    ErrorKind.UNSUPPORTED_OUTPUT_FORMAT: "GIF output is not supported",
    ErrorKind.ANIMATED_SOURCE_UNSUPPORTED: (
        "Animated GIF cannot be transformed; request it without "
        "transformation parameters to get the original"
    ),
    ErrorKind.UNSUPPORTED_INPUT_FORMAT: "Unsupported image format",
    ErrorKind.INTERNAL_ERROR: "Internal server error",
}


@dataclass(frozen=True)
class ClassifiedError:
    """External view of a failure: kind, status and the public body."""

    kind: ErrorKind
    status_code: int
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_body(self) -> Dict[str, Any]:
        return {"error": self.message, **self.details}


def _field(source: Any, name: str) -> Any:
    """Read ``name`` from a mapping key or an attribute, whichever exists."""
    if source is None:
        return None
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _error_payloads(error: Any):
    """The error itself plus any mapping it was raised with."""
    yield error
    if isinstance(error, BaseException):
        for arg in error.args:
            if isinstance(arg, Mapping):
                yield arg


def is_not_found_error(error: Any) -> bool:
    """
    Heuristic detection of a "missing key" failure from the object store.

    The store's failure shape is not stable, so this accepts any of: a
    ``name``/``Code``/``code`` field of NoSuchKey, a ``$metadata`` block with
    HTTP status 404, a botocore ClientError with a not-found code or status,
    or a message mentioning NoSuchKey / Not Found.
    """
    if isinstance(error, ObjectNotFoundError):
        return True

    if isinstance(error, BotocoreClientError):
        error_info = error.response.get("Error", {})
        status = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        if error_info.get("Code") in NOT_FOUND_CODES or status == 404:
            return True

    if type(error).__name__ == "NoSuchKey":
        return True

    for payload in _error_payloads(error):
        for name in ("name", "Code", "code"):
            if _field(payload, name) == "NoSuchKey":
                return True
        metadata = _field(payload, "$metadata")
        if _field(metadata, "httpStatusCode") == 404:
            return True

    message = _field(error, "message")
    if not isinstance(message, str) and isinstance(error, BaseException):
        message = str(error)
    return isinstance(message, str) and bool(_NOT_FOUND_MESSAGE.search(message))


def is_unsupported_input_error(error: Any) -> bool:
    """Detect a codec failure caused by undecodable input bytes."""
    if isinstance(error, (UnsupportedInputFormatError, PILUnidentifiedImageError)):
        return True
    return isinstance(error, BaseException) and bool(
        _UNSUPPORTED_INPUT_MESSAGE.search(str(error))
    )


def classify_error(error: BaseException) -> ClassifiedError:
    """
    Map any failure raised while fetching or transforming to an external error.

    Typed errors are matched on their kind. Untyped failures that slipped past
    the adapters are matched heuristically; everything else becomes a 500.
    """
    if isinstance(error, MediaTransformError):
        kind = error.kind
    elif is_not_found_error(error):
        kind = ErrorKind.OBJECT_NOT_FOUND
    elif is_unsupported_input_error(error):
        kind = ErrorKind.UNSUPPORTED_INPUT_FORMAT
    else:
        kind = ErrorKind.INTERNAL_ERROR

    details: Dict[str, Any] = {}
    if isinstance(error, DimensionExceededError):
        details = {"maxWidth": error.max_width, "maxHeight": error.max_height}

    return ClassifiedError(
        kind=kind,
        status_code=ERROR_STATUS[kind],
        message=ERROR_MESSAGES[kind],
        details=details,
    )


def error_response(classified: ClassifiedError) -> Dict[str, Any]:
    """Render a classified error as a JSON proxy response without caching."""
    return {
        "statusCode": classified.status_code,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(classified.to_body()),
    }


def with_error_handling(func):
    """
    A decorator translating raw store and codec failures into typed errors.

    Meant for the adapter boundary only: typed errors pass through untouched.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__ + '.' + func.__name__)
        try:
            return func(*args, **kwargs)
        except MediaTransformError:
            raise
        except Exception as e:
            if is_not_found_error(e):
                logger.info(f"Object not found in '{func.__name__}': {e}")
                raise ObjectNotFoundError(str(e)) from e
            logger.error(
                f"Error in '{func.__name__}': {e}",
                exc_info=True
            )
            if is_unsupported_input_error(e):
                raise UnsupportedInputFormatError(
                    f"Failed to identify image in {func.__name__}: {e}"
                ) from e
            if isinstance(e, BotocoreClientError):
                raise S3Error(f"S3 operation failed in {func.__name__}: {e}") from e
            if isinstance(e, (OSError, ValueError)):
                raise ImageProcessingError(
                    f"Image operation failed in {func.__name__}: {e}"
                ) from e
            raise
    return wrapper
