"""Testing utilities and fakes for the media transform handler."""

from .fakes import (
    FakeS3Client,
    FakeLogger,
    S3Object,
    S3Bucket,
    create_animated_gif,
    create_split_image,
    create_test_image,
    no_such_key_error,
    setup_test_s3_environment,
)

__all__ = [
    "FakeS3Client",
    "FakeLogger",
    "S3Object",
    "S3Bucket",
    "create_animated_gif",
    "create_split_image",
    "create_test_image",
    "no_such_key_error",
    "setup_test_s3_environment",
]
