"""Format resolution: output formats, source classification and content types."""

from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Union


class OutputFormat(str, Enum):
    """Formats the codec is allowed to encode to. GIF is intentionally absent."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"

    @property
    def is_lossy(self) -> bool:
        return self is not OutputFormat.PNG

    @property
    def pil_format(self) -> str:
        return self.value.upper()


class FormatAlias(Enum):
    """Accepted spellings of an output format in the ``format`` query parameter."""

    JPG = ("jpg", OutputFormat.JPEG)
    JPEG = ("jpeg", OutputFormat.JPEG)
    PNG = ("png", OutputFormat.PNG)
    WEBP = ("webp", OutputFormat.WEBP)
    AVIF = ("avif", OutputFormat.AVIF)
    UNRECOGNIZED = ("", None)

    def __init__(self, token: str, target: Optional[OutputFormat]):
        self.token = token
        self.target = target

    @classmethod
    def lookup(cls, token: Optional[str]) -> "FormatAlias":
        normalized = (token or "").strip().lower()
        for alias in cls:
            if alias.token and alias.token == normalized:
                return alias
        return cls.UNRECOGNIZED


class SourceFormatClass(str, Enum):
    """Whether a source object can go through the image codec."""

    IMAGE = "image"
    PASSTHROUGH = "passthrough"


class SourceFormat(str, Enum):
    """Format of the source object as told by its key's extension."""

    JPEG = "jpeg"
    PNG = "png"
    WEBP = "webp"
    AVIF = "avif"
    GIF = "gif"
    OTHER = "other"

    @property
    def format_class(self) -> SourceFormatClass:
        if self is SourceFormat.OTHER:
            return SourceFormatClass.PASSTHROUGH
        return SourceFormatClass.IMAGE


_SOURCE_EXTENSIONS: Mapping[str, SourceFormat] = MappingProxyType(
    {
        "jpg": SourceFormat.JPEG,
        "jpeg": SourceFormat.JPEG,
        "png": SourceFormat.PNG,
        "webp": SourceFormat.WEBP,
        "avif": SourceFormat.AVIF,
        "gif": SourceFormat.GIF,
    }
)


class ContentType(str, Enum):
    """Response content types for formats the handler labels itself."""

    JPEG = "image/jpeg"
    PNG = "image/png"
    WEBP = "image/webp"
    AVIF = "image/avif"
    GIF = "image/gif"
    MP3 = "audio/mpeg"

    @classmethod
    def lookup(cls, token: str) -> "ContentType":
        member = cls.__members__.get(token.upper())
        if member is None:
            # unmapped formats are labelled as the default output format
            return cls.WEBP
        return member


OCTET_STREAM = "application/octet-stream"

# Best-effort table for passthrough of non-image objects
GENERIC_MIME_TYPES: Mapping[str, str] = MappingProxyType(
    {
        # images
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "webp": "image/webp",
        "avif": "image/avif",
        "gif": "image/gif",
        "svg": "image/svg+xml",
        # audio
        "mp3": "audio/mpeg",
        "m4a": "audio/mp4",
        "aac": "audio/aac",
        "oga": "audio/ogg",
        "ogg": "audio/ogg",
        "wav": "audio/wav",
        "flac": "audio/flac",
        # video
        "mp4": "video/mp4",
        "m4v": "video/x-m4v",
        "mov": "video/quicktime",
        "webm": "video/webm",
        "ogv": "video/ogg",
        "mkv": "video/x-matroska",
        # documents
        "pdf": "application/pdf",
        "txt": "text/plain; charset=utf-8",
        "csv": "text/csv; charset=utf-8",
        "json": "application/json",
        "xml": "application/xml",
        "html": "text/html; charset=utf-8",
        "htm": "text/html; charset=utf-8",
        "md": "text/markdown; charset=utf-8",
        # web assets
        "css": "text/css; charset=utf-8",
        "js": "application/javascript; charset=utf-8",
        "mjs": "application/javascript; charset=utf-8",
        # archives
        "zip": "application/zip",
        "gz": "application/gzip",
        "tar": "application/x-tar",
        "7z": "application/x-7z-compressed",
        "rar": "application/vnd.rar",
        # fonts
        "woff": "font/woff",
        "woff2": "font/woff2",
        "ttf": "font/ttf",
        "otf": "font/otf",
        # office
        "doc": "application/msword",
        "docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "xls": "application/vnd.ms-excel",
        "xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "ppt": "application/vnd.ms-powerpoint",
        "pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    }
)


def file_extension(object_key: str) -> str:
    """Return the lower-cased extension of the last path segment, or ""."""
    filename = object_key.rsplit("/", 1)[-1]
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def resolve_output_format(
    requested: Optional[str], default: OutputFormat = OutputFormat.WEBP
) -> OutputFormat:
    """
    Map a requested format token to an output format.

    Args:
        requested: Raw ``format`` value, any case, possibly None
        default: Format used when the token is missing or unrecognized

    Returns:
        The resolved output format
    """
    alias = FormatAlias.lookup(requested)
    if alias is FormatAlias.UNRECOGNIZED:
        return default
    return alias.target  # type: ignore[return-value]


def content_type_for(fmt: Union[OutputFormat, SourceFormat, str]) -> str:
    """Content type for a format token, falling back to image/webp."""
    token = fmt.value if isinstance(fmt, Enum) else str(fmt)
    return ContentType.lookup(token.lower()).value


def source_format_for(object_key: str) -> SourceFormat:
    return _SOURCE_EXTENSIONS.get(file_extension(object_key), SourceFormat.OTHER)


def classify_source(object_key: str) -> SourceFormatClass:
    return source_format_for(object_key).format_class


def infer_generic_content_type(object_key: str) -> str:
    """Best-effort MIME type from the key's extension for passthrough content."""
    mime_type = GENERIC_MIME_TYPES.get(file_extension(object_key))
    if mime_type is None:
        return OCTET_STREAM
    return mime_type
