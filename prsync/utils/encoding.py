# prsync Encoding Utilities
# Base64 transfer encoding used by the contents API

import base64
import binascii


def encode_content(content: str | bytes) -> str:
    """
    Encode file content for upload.

    Args:
        content: String or bytes content.

    Returns:
        Base64 text.
    """
    if isinstance(content, str):
        content = content.encode("utf-8")
    return base64.b64encode(content).decode("ascii")


def decode_content(encoded: str) -> bytes:
    """
    Decode base64 file content as returned by the contents API.

    The API wraps encoded content at 60 columns, so embedded newlines
    are stripped before decoding.

    Args:
        encoded: Base64 text, possibly containing newlines.

    Returns:
        Raw bytes.

    Raises:
        ValueError: If the text is not valid base64.
    """
    compact = "".join(encoded.split())
    try:
        return base64.b64decode(compact, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 content: {e}") from e
