"""Core components of the media transform handler."""

from .config import HandlerConfig
from .directives import parse_crop, parse_directives, parse_quality, parse_resize
from .error_handling import ClassifiedError, classify_error, error_response
from .exceptions import (
    AnimatedSourceUnsupportedError,
    ConfigurationError,
    DimensionExceededError,
    ErrorKind,
    ImageProcessingError,
    MediaTransformError,
    MissingObjectKeyError,
    ObjectNotFoundError,
    S3Error,
    UnsupportedInputFormatError,
    UnsupportedOutputFormatError,
)
from .formats import (
    OutputFormat,
    SourceFormat,
    SourceFormatClass,
    classify_source,
    content_type_for,
    infer_generic_content_type,
    resolve_output_format,
)
from .limits import ensure_within_limits, within_limits
from .logging_config import get_logger, setup_logger
from .models import (
    ParsedCrop,
    ParsedResize,
    ResponseEnvelope,
    TransformRequest,
)

__all__ = [
    "HandlerConfig",
    "parse_crop",
    "parse_directives",
    "parse_quality",
    "parse_resize",
    "ClassifiedError",
    "classify_error",
    "error_response",
    "AnimatedSourceUnsupportedError",
    "ConfigurationError",
    "DimensionExceededError",
    "ErrorKind",
    "ImageProcessingError",
    "MediaTransformError",
    "MissingObjectKeyError",
    "ObjectNotFoundError",
    "S3Error",
    "UnsupportedInputFormatError",
    "UnsupportedOutputFormatError",
    "OutputFormat",
    "SourceFormat",
    "SourceFormatClass",
    "classify_source",
    "content_type_for",
    "infer_generic_content_type",
    "resolve_output_format",
    "ensure_within_limits",
    "within_limits",
    "get_logger",
    "setup_logger",
    "ParsedCrop",
    "ParsedResize",
    "ResponseEnvelope",
    "TransformRequest",
]
