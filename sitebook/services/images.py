"""Image compression for site and worker photos."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError


def compress_image(image_bytes: bytes, max_dim: int = 1280, quality: int = 60) -> bytes:
    """
    Downscale and re-encode an image as JPEG.

    Args:
        image_bytes: Raw image bytes (any format Pillow can read)
        max_dim: Maximum size of the longest edge in pixels
        quality: JPEG quality (1-95)

    Returns:
        Compressed JPEG bytes; empty input is returned unchanged

    Raises:
        ValueError: If the bytes are not a readable image
    """
    if not image_bytes:
        return image_bytes

    try:
        img = Image.open(io.BytesIO(image_bytes))
        img.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ValueError(f"Unreadable image data: {e}") from e

    # JPEG has no alpha channel; flatten onto white
    if img.mode in ("RGBA", "LA", "P"):
        if img.mode == "P":
            img = img.convert("RGBA")
        background = Image.new("RGB", img.size, (255, 255, 255))
        background.paste(img, mask=img.split()[-1])
        img = background
    elif img.mode != "RGB":
        img = img.convert("RGB")

    if max(img.size) > max_dim:
        img.thumbnail((max_dim, max_dim), Image.Resampling.LANCZOS)

    out = io.BytesIO()
    img.save(out, format="JPEG", quality=quality, optimize=True)
    return out.getvalue()
