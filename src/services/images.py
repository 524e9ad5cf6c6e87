# COMPONENT: IMAGE DOWNLOAD RE-ENCODING
# REQUIREMENTS SATISFIED: clean JPEG downloads of gallery photos

"""
src/services/images.py

Re-encodes stored photos as high quality JPEG files for download.

Visitors downloading a gallery photo get a plain JPEG with the metadata
stripped, whatever format the photo was uploaded in. Pillow does the
decoding and encoding; this module only picks the settings and the file
name offered to the browser.
"""
from __future__ import annotations

import io
import os

from PIL import Image, UnidentifiedImageError

from src.errors import ValidationError
from src.services.keys import display_name

JPEG_QUALITY = 95


def to_jpeg(data: bytes) -> bytes:
    try:
        with Image.open(io.BytesIO(data)) as img:
            rgb = img.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise ValidationError(f"Stored object is not a decodable image: {e}") from e

    out = io.BytesIO()
    # no exif/icc passed through: the download carries pixels only
    rgb.save(out, format="JPEG", quality=JPEG_QUALITY, optimize=True, subsampling=0)
    return out.getvalue()


def download_file_name(key: str, fallback: str = "photo") -> str:
    name = display_name(key)
    if name.startswith("thumb-"):
        name = name[len("thumb-"):]
    stem = os.path.splitext(name)[0] or fallback
    return f"{stem}.jpg"
