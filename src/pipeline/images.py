"""Image preparation before vision provider calls.

- resolve_mime_type(): Trust a specific declared type, else sniff magic bytes
- exceeds_size_limit(): Check MAX_IMAGE_SIZE_MB (oversize images are still processed)
- compress_image(): Pillow JPEG re-encode for large images
- prepare_image(): Build the ImageBlob handed to the orchestrator
"""

from io import BytesIO
from typing import Optional

import filetype
from PIL import Image

from src.models.models import ImageBlob
from src.utils.config import config
from src.utils.logger import logger
from src.utils.safe_execute import safe_execute_sync


DEFAULT_MIME_TYPE = "image/jpeg"
GENERIC_MIME_TYPES = ("", "application/octet-stream", "binary/octet-stream")


def resolve_mime_type(image_bytes: bytes, declared: Optional[str] = None) -> str:
    """Return the MIME type to send with the image.

    A declared image/* type wins. Otherwise the type is read from magic bytes
    with filetype, defaulting to image/jpeg when nothing is recognized.
    """
    declared = (declared or "").split(";")[0].strip().lower()
    if declared not in GENERIC_MIME_TYPES and declared.startswith("image/"):
        return declared

    kind = filetype.guess(image_bytes)
    if kind is None or not kind.mime.startswith("image/"):
        logger.debug(f"Unrecognized image type (declared: {declared or 'none'}), assuming {DEFAULT_MIME_TYPE}")
        return DEFAULT_MIME_TYPE
    return kind.mime


def exceeds_size_limit(image_bytes: bytes) -> bool:
    """Return True when the image is larger than MAX_IMAGE_SIZE_MB."""
    size_mb = len(image_bytes) / (1024 * 1024)
    if size_mb > config.MAX_IMAGE_SIZE_MB:
        logger.warning(f"Image size {size_mb:.2f}MB exceeds limit of {config.MAX_IMAGE_SIZE_MB}MB, forcing compression")
        return True
    return False


def compress_image(image_bytes: bytes, max_width: int = 1024, force: bool = False) -> bytes:
    """Compress image for API transmission using Pillow.

    Uses JPEG format with quality=85 + optimize + progressive. Resizes oversized
    images and converts color modes to RGB. Images below COMPRESS_IMG_THRESHOLD_KB
    are returned unchanged unless force is set.

    Args:
        image_bytes: Raw image bytes to compress
        max_width: Maximum image width in pixels
        force: Compress regardless of the size threshold

    Returns:
        Compressed JPEG bytes, or the original bytes if compression is skipped or fails
    """
    size_kb = len(image_bytes) / 1024
    if not force and size_kb < config.COMPRESS_IMG_THRESHOLD_KB:
        logger.debug(
            f"Image size {size_kb:.1f}KB below compression threshold "
            f"({config.COMPRESS_IMG_THRESHOLD_KB}KB), skipping compression"
        )
        return image_bytes

    def _compress():
        img = Image.open(BytesIO(image_bytes))

        # Flatten alpha/palette modes onto white
        if img.mode in ("RGBA", "LA", "P"):
            img = img.convert("RGBA")
            rgb_img = Image.new("RGB", img.size, (255, 255, 255))
            rgb_img.paste(img, mask=img.split()[-1])
            img = rgb_img
        elif img.mode != "RGB":
            img = img.convert("RGB")

        if img.width > max_width:
            ratio = max_width / img.width
            img = img.resize((max_width, int(img.height * ratio)), Image.Resampling.LANCZOS)

        output = BytesIO()
        img.save(output, format="JPEG", quality=85, optimize=True, progressive=True)
        compressed_bytes = output.getvalue()

        logger.debug(
            f"Image compressed: {size_kb:.1f}KB → {len(compressed_bytes) / 1024:.1f}KB",
            extra={"stage": "vision"},
        )
        return compressed_bytes

    return safe_execute_sync(_compress, "Image compression", log_level="warning", default_return=image_bytes)


def prepare_image(image_bytes: bytes, declared_mime_type: Optional[str] = None) -> ImageBlob:
    """Build the ImageBlob sent to vision providers.

    Compression runs when COMPRESS_IMG is enabled, and always for images above
    MAX_IMAGE_SIZE_MB. A successful compression changes the MIME type to JPEG.
    """
    mime_type = resolve_mime_type(image_bytes, declared_mime_type)
    oversize = exceeds_size_limit(image_bytes)

    if config.COMPRESS_IMG or oversize:
        compressed = compress_image(image_bytes, force=oversize)
        if compressed is not image_bytes:
            return ImageBlob(data=compressed, mime_type="image/jpeg")

    return ImageBlob(data=image_bytes, mime_type=mime_type)
