"""On-the-fly image transformation for objects stored in S3."""

__version__ = "0.1.0"
