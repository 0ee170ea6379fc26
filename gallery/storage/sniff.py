from enum import Enum


class ImageFormat(Enum):
    JPEG = ".jpg"
    PNG = ".png"
    GIF = ".gif"
    WEBP = ".webp"


DEFAULT_FORMAT = ImageFormat.JPEG

# Checked in order; first match wins.
MAGIC_PREFIXES = [
    (b"\xff\xd8", ImageFormat.JPEG),
    (b"\x89PNG", ImageFormat.PNG),
    (b"GIF", ImageFormat.GIF),
    # RIFF container only, the WEBP fourcc is not checked
    (b"RIFF", ImageFormat.WEBP),
]


def sniff_format(data: bytes) -> ImageFormat:
    """Classify image bytes by their magic prefix.

    Anything shorter than 4 bytes or with an unknown prefix is treated as JPEG.
    """
    if len(data) < 4:
        return DEFAULT_FORMAT
    for prefix, fmt in MAGIC_PREFIXES:
        if data.startswith(prefix):
            return fmt
    return DEFAULT_FORMAT


def sniff_extension(data: bytes) -> str:
    return sniff_format(data).value
