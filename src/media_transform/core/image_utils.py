"""Image processing utilities built on Pillow."""

import io
from typing import Optional, Union

from PIL import Image, ImageOps

from .exceptions import UnsupportedOutputFormatError
from .formats import OutputFormat
from .models import ImageInfo, ParsedCrop

FIT_COVER = "cover"
MIN_QUALITY = 1
MAX_QUALITY = 100


def probe_image(image_bytes: bytes) -> ImageInfo:
    """
    Read basic information about encoded image bytes.

    Args:
        image_bytes: Encoded image

    Returns:
        Width, height, lower-case format name and frame count

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a known image format
    """
    with Image.open(io.BytesIO(image_bytes)) as image:
        return ImageInfo(
            width=image.width,
            height=image.height,
            format=(image.format or "unknown").lower(),
            pages=getattr(image, "n_frames", 1),
        )


def decode_image(image_bytes: bytes) -> "Image.Image":
    """Decode the first frame of an image into an RGB or RGBA image."""
    image = Image.open(io.BytesIO(image_bytes))
    image.load()

    if image.mode in ("RGB", "RGBA", "L"):
        return image
    if image.mode in ("P", "LA", "PA") or "transparency" in image.info:
        return image.convert("RGBA")
    return image.convert("RGB")


def crop_image(image: "Image.Image", rect: ParsedCrop) -> "Image.Image":
    """
    Extract a rectangle from an image.

    Raises:
        ValueError: If the rectangle is empty or falls outside the image
    """
    right = rect.left + rect.width
    bottom = rect.top + rect.height
    if rect.width == 0 or rect.height == 0 or right > image.width or bottom > image.height:
        raise ValueError(
            f"Bad extract area {rect.left},{rect.top},{rect.width},{rect.height} "
            f"for {image.width}x{image.height} image"
        )
    return image.crop(rect.box)


def resize_cover(
    image: "Image.Image", width: Optional[int], height: Optional[int]
) -> "Image.Image":
    """
    Resize to fill the target box, cropping overflow around the centre.

    The image is never enlarged. When the target is larger than the source on
    either axis the scale stays at 1 and the box shrinks to the source size on
    that axis, so the overflow on the other axis is still cropped. With a
    single axis the aspect ratio is kept.
    """
    src_width, src_height = image.size

    if width and height:
        if width > src_width or height > src_height:
            box = (min(src_width, width), min(src_height, height))
            if box == image.size:
                return image
            left = (src_width - box[0]) // 2
            top = (src_height - box[1]) // 2
            return image.crop((left, top, left + box[0], top + box[1]))
        return ImageOps.fit(image, (width, height), method=Image.Resampling.LANCZOS)

    if width:
        if width >= src_width:
            return image
        scaled = max(1, round(src_height * width / src_width))
        return image.resize((width, scaled), Image.Resampling.LANCZOS)

    if height:
        if height >= src_height:
            return image
        scaled = max(1, round(src_width * height / src_height))
        return image.resize((scaled, height), Image.Resampling.LANCZOS)

    return image


def clamp_quality(quality: int) -> int:
    return max(MIN_QUALITY, min(MAX_QUALITY, quality))


def encode_image(
    image: "Image.Image",
    fmt: Union[OutputFormat, str],
    quality: Optional[int] = None,
) -> bytes:
    """
    Encode an image to one of the supported output formats.

    Args:
        image: Decoded image
        fmt: Target format; GIF and unknown formats are refused
        quality: Quality for lossy formats, ignored for PNG

    Returns:
        Encoded bytes
    """
    try:
        output_format = OutputFormat(fmt)
    except ValueError:
        raise UnsupportedOutputFormatError(f"Cannot encode to {fmt!r}")

    if output_format is OutputFormat.JPEG and image.mode not in ("RGB", "L"):
        image = image.convert("RGB")

    params = {}
    if output_format.is_lossy and quality is not None:
        params["quality"] = clamp_quality(quality)

    output_stream = io.BytesIO()
    image.save(output_stream, format=output_format.pil_format, **params)
    return output_stream.getvalue()
