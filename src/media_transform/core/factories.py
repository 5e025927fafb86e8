"""Factory classes for creating configured service instances."""

from typing import TYPE_CHECKING, Any, Optional

import boto3

from .config import HandlerConfig
from .logging_config import setup_logger
from .observability import MetricsCollector, StructuredLogger
from .protocols import CodecProtocol, LoggerProtocol, S3ClientProtocol
from .services import (
    MediaRequestHandler,
    PillowCodec,
    S3ObjectStore,
    TransformationOrchestrator,
)

if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str = "media-transform") -> LoggerProtocol:
        """Create a structured logger on the centrally configured stdlib logger."""
        return StructuredLogger(setup_logger(name))


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(region: Optional[str] = None, **kwargs: Any) -> "S3Client":
        """Create S3 client with optional configuration."""
        session = boto3.Session()
        return session.client("s3", region_name=region, **kwargs)


class HandlerFactory:
    """Factory for creating the complete request handler."""

    @staticmethod
    def create_handler(
        config: Optional[HandlerConfig] = None,
        s3_client: Optional[S3ClientProtocol] = None,
        codec: Optional[CodecProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> MediaRequestHandler:
        """Create a fully wired handler; missing pieces come from the environment."""
        if config is None:
            config = HandlerConfig.from_env()

        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client(region=config.region)

        if logger is None:
            logger = LoggerFactory.create_logger()

        if codec is None:
            codec = PillowCodec()

        object_store = S3ObjectStore(s3_client, config.source_bucket)
        orchestrator = TransformationOrchestrator(codec, logger, metrics_collector)

        return MediaRequestHandler(
            config=config,
            object_store=object_store,
            orchestrator=orchestrator,
            logger=logger,
            metrics_collector=metrics_collector,
        )
