"""Fake implementations for testing purposes."""

import io
import time
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from botocore.exceptions import ClientError
from PIL import Image


@dataclass
class S3Object:
    """Fake S3 object for testing."""

    key: str
    body: bytes
    content_type: Optional[str] = None
    size: int = 0

    def __post_init__(self):
        if self.size == 0:
            self.size = len(self.body)


@dataclass
class S3Bucket:
    """Fake S3 bucket for testing."""

    name: str
    objects: Dict[str, S3Object] = field(default_factory=dict)

    def add_object(
        self, key: str, body: bytes, content_type: Optional[str] = None
    ) -> None:
        """Add object to bucket."""
        self.objects[key] = S3Object(key=key, body=body, content_type=content_type)

    def get_object(self, key: str) -> Optional[S3Object]:
        """Get object from bucket."""
        return self.objects.get(key)


def no_such_key_error(key: str) -> ClientError:
    """A ClientError shaped like the one boto3 raises for a missing key."""
    return ClientError(
        {
            "Error": {"Code": "NoSuchKey", "Message": "The specified key does not exist.", "Key": key},
            "ResponseMetadata": {"HTTPStatusCode": 404},
        },
        "GetObject",
    )


class FakeS3Client:
    """Fake S3 client for testing."""

    def __init__(self):
        self.buckets: Dict[str, S3Bucket] = {}
        self.operation_count = 0
        self.failure: Optional[BaseException] = None

    def create_bucket(self, name: str) -> S3Bucket:
        """Create a new bucket."""
        bucket = S3Bucket(name=name)
        self.buckets[name] = bucket
        return bucket

    def get_bucket(self, name: str) -> Optional[S3Bucket]:
        """Get bucket by name."""
        return self.buckets.get(name)

    def set_failure(self, failure: Optional[BaseException]) -> None:
        """Raise ``failure`` from every subsequent call."""
        self.failure = failure

    def get_object(self, Bucket: str, Key: str) -> Dict[str, Any]:
        """Get object from S3."""
        self.operation_count += 1

        if self.failure is not None:
            raise self.failure

        bucket = self.buckets.get(Bucket)
        if not bucket:
            raise ClientError(
                {
                    "Error": {"Code": "NoSuchBucket", "Message": f"Bucket {Bucket} does not exist"},
                    "ResponseMetadata": {"HTTPStatusCode": 404},
                },
                "GetObject",
            )

        obj = bucket.get_object(Key)
        if not obj:
            raise no_such_key_error(Key)

        response: Dict[str, Any] = {
            "Body": io.BytesIO(obj.body),
            "ContentLength": obj.size,
        }
        if obj.content_type:
            response["ContentType"] = obj.content_type
        return response


class FakeLogger:
    """Fake logger for testing with support for LogContext."""

    def __init__(self, name: str = "test_logger"):
        self.name = name
        self.logs: List[Dict[str, Any]] = []

    def _log(
        self, level: str, message: str, context: Any = None, **kwargs: Any
    ) -> None:
        """Internal logging method with context support."""
        log_entry = {
            "level": level,
            "message": message,
            "timestamp": time.time(),
            **kwargs,
        }

        if context is not None:
            if hasattr(context, "correlation_id"):
                log_entry["correlation_id"] = context.correlation_id
            if hasattr(context, "operation"):
                log_entry["operation"] = context.operation
            if hasattr(context, "metadata"):
                log_entry.update(context.metadata)

        self.logs.append(log_entry)

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        self._log("DEBUG", message, context, **kwargs)

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        self._log("INFO", message, context, **kwargs)

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        self._log("WARNING", message, context, **kwargs)

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        self._log("ERROR", message, context, **kwargs)

    def get_logs(self, level: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get logged messages, optionally filtered by level."""
        if level:
            return [log for log in self.logs if log["level"] == level]
        return self.logs.copy()


def create_test_image(
    width: int = 100,
    height: int = 100,
    image_format: str = "JPEG",
    color: Any = "red",
) -> bytes:
    """Create a single-colour test image in memory."""
    image = Image.new("RGB", (width, height), color=color)
    img_bytes = io.BytesIO()
    image.save(img_bytes, format=image_format)
    return img_bytes.getvalue()


def create_split_image(width: int = 200, height: int = 100) -> bytes:
    """PNG whose left half is red and right half is blue."""
    image = Image.new("RGB", (width, height), color=(255, 0, 0))
    image.paste((0, 0, 255), (width // 2, 0, width, height))
    img_bytes = io.BytesIO()
    image.save(img_bytes, format="PNG")
    return img_bytes.getvalue()


def create_animated_gif(width: int = 40, height: int = 30, frames: int = 3) -> bytes:
    """Create a multi-frame GIF in memory."""
    colors = ["red", "green", "blue", "yellow"]
    images = [
        Image.new("RGB", (width, height), color=colors[i % len(colors)])
        for i in range(frames)
    ]
    img_bytes = io.BytesIO()
    images[0].save(
        img_bytes,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=100,
        loop=0,
    )
    return img_bytes.getvalue()


def setup_test_s3_environment(bucket: str = "test-media") -> FakeS3Client:
    """Set up a fake bucket holding a mix of images and other files."""
    s3_client = FakeS3Client()

    media = s3_client.create_bucket(bucket)
    media.add_object("photos/photo.jpg", create_test_image(200, 150), "image/jpeg")
    media.add_object("photos/split.png", create_split_image(200, 100), "image/png")
    media.add_object("photos/still.gif", create_test_image(60, 40, "GIF"), "image/gif")
    media.add_object("photos/animated.gif", create_animated_gif(), "image/gif")
    media.add_object("docs/manual.pdf", b"%PDF-1.4 fake", "application/pdf")
    media.add_object("docs/readme.txt", b"This is not an image")
    media.add_object("photos/broken.jpg", b"not really a jpeg", "image/jpeg")

    return s3_client
