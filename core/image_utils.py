"""Low-level image operations."""

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from .errors import ImageDecodeError


def load_image(file_path):
    """Load image from path and return as numpy array (RGB)."""
    try:
        with Image.open(file_path) as pic:
            return np.array(pic.convert("RGB"))
    except (OSError, UnidentifiedImageError) as e:
        raise ImageDecodeError(f"Could not load image: {file_path} ({e})") from e


def decode_image(data):
    """Decode encoded image bytes (PNG, JPEG, ...) to an RGB numpy array."""
    if not data:
        raise ImageDecodeError("No image data")

    buf = np.frombuffer(bytes(data), dtype=np.uint8)
    img = cv2.imdecode(buf, cv2.IMREAD_COLOR)
    if img is None:
        raise ImageDecodeError(f"Could not decode image data ({len(buf)} bytes)")
    return cv2.cvtColor(img, cv2.COLOR_BGR2RGB)


def to_rgb_array(image):
    """Accept a PIL image or numpy array and return a numpy array."""
    if image is None:
        raise ImageDecodeError("No image")
    if isinstance(image, Image.Image):
        return np.array(image.convert("RGB"))

    arr = np.asarray(image)
    if arr.ndim < 2:
        raise ImageDecodeError(f"Expected a 2D or 3D pixel array, got shape {arr.shape}")
    return arr


def resize_image(image, width=None, height=None):
    """Resize image maintaining aspect ratio if only one dimension given."""
    h, w = image.shape[:2]

    if width is None and height is None:
        return image

    if width is None:
        ratio = height / h
        width = max(1, int(w * ratio))
    elif height is None:
        ratio = width / w
        height = max(1, int(h * ratio))

    return cv2.resize(image, (width, height), interpolation=cv2.INTER_AREA)
