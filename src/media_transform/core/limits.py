"""Maximum-dimension policy for resize requests."""

from typing import Optional

from .config import HandlerConfig
from .exceptions import DimensionExceededError
from .models import ParsedResize


def within_limits(
    width: Optional[int], height: Optional[int], config: HandlerConfig
) -> bool:
    """Unset axes are always within limits."""
    if width and width > config.max_width:
        return False
    if height and height > config.max_height:
        return False
    return True


def ensure_within_limits(resize: ParsedResize, config: HandlerConfig) -> None:
    """Raise DimensionExceededError when the resize is out of bounds."""
    if not within_limits(resize.width, resize.height, config):
        raise DimensionExceededError(
            f"Resize {resize.width}x{resize.height} exceeds "
            f"{config.max_width}x{config.max_height}",
            max_width=config.max_width,
            max_height=config.max_height,
        )
