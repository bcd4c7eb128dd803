"""Base64Url utilities module.

URL-safe, unpadded Base64 as used by every segment of a compact SD-JWT.
Decoding restores the stripped padding and validates the alphabet strictly.
"""

import base64
import binascii
import json
from typing import Any

from .errors import MalformedEncoding


def encode(data: bytes) -> str:
    """Encode bytes to unpadded Base64Url text.

    Args:
        data: Raw bytes to encode

    Returns:
        Base64Url string without ``=`` padding
    """
    encoded = base64.b64encode(data).decode("ascii")
    return encoded.replace("+", "-").replace("/", "_").rstrip("=")


def decode(text: str) -> bytes:
    """Decode Base64Url text to bytes.

    Args:
        text: Base64Url string, with or without padding

    Returns:
        Decoded bytes

    Raises:
        MalformedEncoding: If the text is not valid Base64Url
    """
    standard = text.replace("-", "+").replace("_", "/")
    padding = len(standard) % 4
    if padding:
        standard += "=" * (4 - padding)
    try:
        return base64.b64decode(standard, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEncoding(f"Invalid Base64Url input: {exc}") from exc


def encode_json(obj: Any) -> str:
    """Serialize an object as compact UTF-8 JSON and Base64Url-encode it."""
    raw = json.dumps(obj, separators=(",", ":"), ensure_ascii=False)
    return encode(raw.encode("utf-8"))


def decode_json(text: str) -> Any:
    """Base64Url-decode text and parse the result as UTF-8 JSON.

    Args:
        text: Base64Url string holding a JSON document

    Returns:
        The parsed JSON value

    Raises:
        MalformedEncoding: If either the encoding or the JSON is invalid
    """
    raw = decode(text)
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedEncoding(f"Segment is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedEncoding("Segment JSON is nested too deeply") from exc
