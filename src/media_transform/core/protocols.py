"""Protocol definitions for dependency injection and testability."""

from typing import Any, Dict, Optional, Protocol

from .formats import OutputFormat
from .models import FetchedObject, ImageInfo, ParsedCrop


class S3ClientProtocol(Protocol):
    """Protocol for S3 client operations."""

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        ...


class ObjectStoreProtocol(Protocol):
    """Fetch-by-key access to source objects."""

    def fetch(self, key: str) -> FetchedObject:
        """Fetch an object; raises ObjectNotFoundError for a missing key."""
        ...


class CodecProtocol(Protocol):
    """Image decode, geometry and encode operations.

    ``decode`` returns an opaque image handle that the other operations
    accept and return, so intermediate steps are not re-encoded.
    """

    def probe(self, image_bytes: bytes) -> ImageInfo:
        """Read dimensions, format and frame count without transforming."""
        ...

    def decode(self, image_bytes: bytes) -> Any:
        """Decode bytes into an image handle."""
        ...

    def crop(self, image: Any, rect: ParsedCrop) -> Any:
        """Extract a rectangle."""
        ...

    def resize(
        self, image: Any, width: Optional[int], height: Optional[int], fit: str
    ) -> Any:
        """Resize into a target box."""
        ...

    def encode(
        self, image: Any, fmt: OutputFormat, quality: Optional[int] = None
    ) -> bytes:
        """Encode an image handle to bytes."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...
