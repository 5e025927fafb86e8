"""Service implementations for the media transform handler."""

from typing import Any, Dict, Optional

from .config import HandlerConfig
from .directives import parse_directives
from .error_handling import classify_error, error_response, with_error_handling
from .exceptions import (
    AnimatedSourceUnsupportedError,
    ConfigurationError,
    MissingObjectKeyError,
    UnsupportedOutputFormatError,
)
from .formats import (
    OutputFormat,
    SourceFormat,
    SourceFormatClass,
    content_type_for,
    infer_generic_content_type,
    source_format_for,
)
from .image_utils import (
    FIT_COVER,
    crop_image,
    decode_image,
    encode_image,
    probe_image,
    resize_cover,
)
from .limits import ensure_within_limits
from .models import (
    FetchedObject,
    ImageInfo,
    ParsedCrop,
    ResponseEnvelope,
    TransformRequest,
)
from .observability import LogContext, MetricsCollector, timed_operation
from .protocols import (
    CodecProtocol,
    LoggerProtocol,
    ObjectStoreProtocol,
    S3ClientProtocol,
)

GIF_TOKEN = "gif"


class PillowCodec:
    """Codec backed by Pillow. Raw Pillow failures leave as typed errors."""

    @with_error_handling
    def probe(self, image_bytes: bytes) -> ImageInfo:
        return probe_image(image_bytes)

    @with_error_handling
    def decode(self, image_bytes: bytes) -> Any:
        return decode_image(image_bytes)

    @with_error_handling
    def crop(self, image: Any, rect: ParsedCrop) -> Any:
        return crop_image(image, rect)

    @with_error_handling
    def resize(
        self,
        image: Any,
        width: Optional[int],
        height: Optional[int],
        fit: str = FIT_COVER,
    ) -> Any:
        if fit != FIT_COVER:
            raise ValueError(f"Unsupported fit mode: {fit}")
        return resize_cover(image, width, height)

    @with_error_handling
    def encode(
        self, image: Any, fmt: OutputFormat, quality: Optional[int] = None
    ) -> bytes:
        return encode_image(image, fmt, quality)


class S3ObjectStore:
    """Object store reading source objects from a single S3 bucket."""

    def __init__(self, s3_client: S3ClientProtocol, bucket: str):
        self._s3_client = s3_client
        self._bucket = bucket

    @with_error_handling
    def fetch(self, key: str) -> FetchedObject:
        """Fetch an object body and its declared content type."""
        if not self._bucket:
            raise ConfigurationError("SOURCE_BUCKET is not configured")

        response = self._s3_client.get_object(Bucket=self._bucket, Key=key)
        body = response["Body"].read()
        return FetchedObject(
            key=key, body=body, content_type=response.get("ContentType") or None
        )


class TransformationOrchestrator:
    """Decides between passthrough, rejection and transformation."""

    def __init__(
        self,
        codec: CodecProtocol,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._codec = codec
        self._logger = logger
        self._metrics_collector = metrics_collector

    def render(
        self,
        request: TransformRequest,
        source: FetchedObject,
        log_context: Optional[LogContext] = None,
    ) -> ResponseEnvelope:
        """
        Produce the response for a fetched source object.

        Non-image sources and requests without any directive are passed
        through untouched. GIF output and animated sources are refused.
        Everything else is cropped, resized and encoded in that order.
        """
        log_context = log_context or LogContext(component="orchestrator")
        source_format = source_format_for(request.object_key)

        if source_format.format_class is SourceFormatClass.PASSTHROUGH:
            content_type = source.content_type or infer_generic_content_type(
                request.object_key
            )
            self._logger.info(
                "Passing through non-image object",
                log_context,
                content_type=content_type,
            )
            return ResponseEnvelope(content_type=content_type, body=source.body)

        if not request.present.any:
            self._logger.info(
                "No transformation parameters, returning original image", log_context
            )
            return ResponseEnvelope(
                content_type=content_type_for(source_format), body=source.body
            )

        self._guard_source(request, source, source_format, log_context)

        with timed_operation(
            "transform", self._logger, log_context, self._metrics_collector
        ):
            body = self._transform(request, source.body, log_context)

        self._logger.info(
            "Transformed image",
            log_context,
            output_format=request.format.value,
            original_bytes=len(source.body),
            output_bytes=len(body),
        )
        return ResponseEnvelope(content_type=content_type_for(request.format), body=body)

    def _guard_source(
        self,
        request: TransformRequest,
        source: FetchedObject,
        source_format: SourceFormat,
        log_context: LogContext,
    ) -> None:
        if request.requested_format == GIF_TOKEN:
            raise UnsupportedOutputFormatError("GIF output requested")

        if source_format is SourceFormat.GIF:
            info = self._codec.probe(source.body)
            if info.animated:
                self._logger.info(
                    "Refusing to transform animated GIF", log_context, pages=info.pages
                )
                raise AnimatedSourceUnsupportedError(
                    f"{request.object_key} has {info.pages} frames"
                )

    def _transform(
        self, request: TransformRequest, image_bytes: bytes, log_context: LogContext
    ) -> bytes:
        image = self._codec.decode(image_bytes)

        if request.crop is not None:
            self._logger.debug(
                "Applying crop", log_context, crop=request.crop.model_dump()
            )
            image = self._codec.crop(image, request.crop)

        if request.resize.requested:
            self._logger.debug(
                "Applying resize", log_context, resize=request.resize.model_dump()
            )
            image = self._codec.resize(
                image, request.resize.width, request.resize.height, FIT_COVER
            )

        quality = request.quality if request.format.is_lossy else None
        return self._codec.encode(image, request.format, quality)


class MediaRequestHandler:
    """Turns an inbound proxy event into a proxy response."""

    def __init__(
        self,
        config: HandlerConfig,
        object_store: ObjectStoreProtocol,
        orchestrator: TransformationOrchestrator,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._config = config
        self._object_store = object_store
        self._orchestrator = orchestrator
        self._logger = logger
        self._metrics_collector = metrics_collector

    def handle(
        self, event: Dict[str, Any], request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Process one event; every failure is returned as an error response."""
        log_context = LogContext(component="media_request_handler")
        if request_id:
            log_context = LogContext(
                correlation_id=request_id, component="media_request_handler"
            )

        try:
            object_key = (event.get("pathParameters") or {}).get("proxy")
            if not object_key:
                raise MissingObjectKeyError("No proxy path parameter")

            request = parse_directives(
                object_key, event.get("queryStringParameters"), self._config
            )
            log_context = log_context.with_metadata(key=object_key)
            self._logger.info(
                "Processing request",
                log_context,
                resize=request.resize.model_dump() if request.present.resize else None,
                crop=request.crop.model_dump() if request.crop else None,
                format=request.format.value if request.present.format else None,
                quality=request.quality,
            )

            ensure_within_limits(request.resize, self._config)

            with timed_operation(
                "fetch_object", self._logger, log_context, self._metrics_collector
            ):
                source = self._object_store.fetch(object_key)
            self._logger.debug(
                "Fetched object", log_context, size_bytes=len(source.body)
            )

            envelope = self._orchestrator.render(request, source, log_context)
            return envelope.to_proxy_response()

        except Exception as e:
            classified = classify_error(e)
            error_context = log_context.with_metadata(
                kind=classified.kind.value, status=classified.status_code
            )
            if classified.status_code >= 500:
                self._logger.error(
                    f"Request failed: {e}", error_context, exc_info=True
                )
            else:
                self._logger.warning(f"Request rejected: {e}", error_context)
            return error_response(classified)
