# ABOUTME: Cover thumbnail generation using Pillow.
# ABOUTME: Crops any cover image to a fixed portrait box anchored at the top and saves a JPEG.

import io
import logging
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, ImageOps

from librarium.config import LibraryConfig
from librarium.core.storage import discard

logger = logging.getLogger(__name__)

# Keep the horizontal center, crop only from the bottom
_TOP_CENTERING = (0.5, 0.0)


@dataclass
class CoverResult:
    """Outcome of a cover generation attempt. Failure is a value, not an exception."""

    path: Path | None
    success: bool
    error: str | None = None


def _to_rgb(image: Image.Image) -> Image.Image:
    """Flatten transparency onto white so the JPEG has no black background."""
    if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, (255, 255, 255))
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    return image.convert("RGB")


def generate_cover(book_id: str, image_data: bytes, config: LibraryConfig) -> CoverResult:
    """Write a normalized thumbnail for a book to <covers-root>/<book-id>.jpg.

    The image is scaled to fill config.cover_size and cropped, keeping the
    top edge so titles and faces near the top of a cover survive.

    Returns:
        CoverResult with the written path on success, or the error message
        on failure. Never raises for bad image data or write errors.
    """
    out_path = config.cover_path(book_id)

    try:
        with Image.open(io.BytesIO(image_data)) as source:
            source.load()
            image = ImageOps.exif_transpose(source)
            thumbnail = ImageOps.fit(
                _to_rgb(image),
                config.cover_size,
                method=Image.Resampling.LANCZOS,
                centering=_TOP_CENTERING,
            )
        out_path.parent.mkdir(parents=True, exist_ok=True)
        thumbnail.save(out_path, "JPEG", quality=config.cover_quality, optimize=True)
    except Exception as exc:
        # Corrupt images can raise SyntaxError from the PNG decoder, not only OSError
        discard(out_path)
        return CoverResult(path=None, success=False, error=str(exc))

    logger.debug("Wrote cover for %s to %s", book_id, out_path)
    return CoverResult(path=out_path, success=True)
