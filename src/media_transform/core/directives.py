"""Parsing of untrusted query parameters into transformation directives."""

import re
from typing import Mapping, Optional

from .config import HandlerConfig
from .formats import resolve_output_format
from .models import DirectivePresence, ParsedCrop, ParsedResize, TransformRequest

RESIZE_PATTERN = re.compile(r"(\d+)?x(\d+)?", re.ASCII)
_LEADING_INT = re.compile(r"\s*([+-]?\d+)", re.ASCII)


def safe_int(value: Optional[str], default: Optional[int] = None) -> Optional[int]:
    """
    Parse the leading integer of a string.

    Trailing garbage is ignored ("80abc" -> 80); anything without a leading
    integer returns the default.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def is_present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def parse_resize(raw: Optional[str]) -> ParsedResize:
    """Parse ``<W>?x<H>?``; any other input means no resize."""
    if not raw:
        return ParsedResize()

    match = RESIZE_PATTERN.fullmatch(raw)
    if not match:
        return ParsedResize()

    return ParsedResize(width=safe_int(match.group(1)), height=safe_int(match.group(2)))


def parse_crop(raw: Optional[str]) -> Optional[ParsedCrop]:
    """Parse ``left,top,width,height``; a malformed crop is dropped entirely."""
    if not raw:
        return None

    parts = [safe_int(part.strip()) for part in raw.split(",")]
    if len(parts) != 4 or any(part is None or part < 0 for part in parts):
        return None

    left, top, width, height = parts
    return ParsedCrop(left=left, top=top, width=width, height=height)


def parse_quality(raw: Optional[str], default: int) -> int:
    quality = safe_int(raw, default)
    return default if quality is None else quality


def parse_directives(
    object_key: str, query: Optional[Mapping[str, str]], config: HandlerConfig
) -> TransformRequest:
    """
    Turn raw query parameters into a TransformRequest.

    Never raises for malformed directives: they degrade to "absent". Presence
    of each raw parameter is kept separately so the orchestrator can tell a
    request with no directives from one with meaningless ones.

    Args:
        object_key: Key of the source object
        query: Raw query string parameters (may be None)
        config: Handler configuration providing defaults

    Returns:
        The parsed request
    """
    query = query or {}
    raw_resize = query.get("resize")
    raw_crop = query.get("crop")
    raw_format = query.get("format")
    raw_quality = query.get("quality")

    return TransformRequest(
        object_key=object_key,
        resize=parse_resize(raw_resize),
        crop=parse_crop(raw_crop),
        format=resolve_output_format(raw_format, config.default_format),
        requested_format=raw_format.strip().lower() if raw_format else None,
        quality=parse_quality(raw_quality, config.default_quality),
        present=DirectivePresence(
            resize=is_present(raw_resize),
            crop=is_present(raw_crop),
            format=is_present(raw_format),
            quality=is_present(raw_quality),
        ),
    )
