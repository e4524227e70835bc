"""Image payload utilities."""

import base64
import binascii
import re

from pdf2imagefill.pdf.base import DecodeError

DATA_URL_PREFIX = re.compile(r"^data:[\w/+.-]+;base64,", re.IGNORECASE)


def encode_base64_image(image_bytes: bytes) -> str:
    """Encode image bytes as a plain base64 string."""
    return base64.b64encode(image_bytes).decode("ascii")


def decode_base64_image(payload: str) -> bytes:
    """Decode a base64 image payload.

    Accepts plain base64 or a `data:image/...;base64,` URL. Whitespace and
    missing padding are tolerated.

    Args:
        payload: Base64 text

    Returns:
        Decoded image bytes

    Raises:
        DecodeError: If the payload is not valid base64 or is empty
    """
    data = DATA_URL_PREFIX.sub("", payload.strip(), count=1)
    data = "".join(data.split())
    data += "=" * (-len(data) % 4)

    try:
        decoded = base64.b64decode(data)
    except (binascii.Error, ValueError) as e:
        raise DecodeError("Failed to decode image", f"invalid base64: {e}") from e

    if not decoded:
        raise DecodeError("Failed to decode image", "empty image data")

    return decoded
