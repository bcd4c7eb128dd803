"""Compact-token splitting and JWT payload extraction.

No signature verification happens here: the payload is read only so that
its verifiable-credential envelope and digest list can be inspected.
"""

import logging
from typing import Any, NamedTuple, Optional, Union

from . import b64_utils
from .errors import MalformedEncoding

logger = logging.getLogger(__name__)

JSONValue = Union[str, int, float, bool, None, list["JSONValue"], dict[str, "JSONValue"]]
JwtPayload = dict[str, JSONValue]

DISCLOSURE_SEPARATOR = "~"


class SDJWTParts(NamedTuple):
    """The pieces of a compact SD-JWT."""

    jwt: str
    disclosures: list[str]
    key_binding_jwt: Optional[str]


def looks_like_jwt(segment: str) -> bool:
    """Return True if a segment has the three-part ``a.b.c`` shape."""
    return segment.count(".") == 2


def split_sd_jwt(token: str) -> SDJWTParts:
    """Split a compact token into its JWT, disclosure segments and KB-JWT.

    Empty segments (such as the trailing ``~`` of an issued token) are
    skipped. A trailing segment shaped like a JWT is a key-binding JWT and is
    returned separately rather than as a disclosure.

    Args:
        token: Compact SD-JWT string

    Returns:
        SDJWTParts with the issuer JWT, raw disclosure segments in order and
        the key-binding JWT if one is present
    """
    jwt, *rest = token.strip().split(DISCLOSURE_SEPARATOR)

    key_binding_jwt = None
    if rest and looks_like_jwt(rest[-1]):
        key_binding_jwt = rest.pop()

    return SDJWTParts(jwt, [segment for segment in rest if segment], key_binding_jwt)


def _parse_segment(jwt: str, index: int, label: str) -> Optional[dict[str, Any]]:
    segments = jwt.split(".")
    if len(segments) < 2:
        logger.debug("JWT has %d segment(s), cannot read %s", len(segments), label)
        return None

    try:
        decoded = b64_utils.decode_json(segments[index])
    except MalformedEncoding as exc:
        logger.debug("Could not decode JWT %s: %s", label, exc)
        return None

    if not isinstance(decoded, dict):
        logger.debug("JWT %s is not a JSON object", label)
        return None
    return decoded


def parse_jwt(jwt: str) -> Optional[JwtPayload]:
    """Decode the payload (middle segment) of a JWT.

    This is a soft failure: malformed input yields ``None`` so the caller can
    decide how to react.

    Args:
        jwt: ``header.payload.signature`` string

    Returns:
        The payload as a dictionary, or None if it cannot be read
    """
    return _parse_segment(jwt, 1, "payload")


def parse_jwt_header(jwt: str) -> Optional[dict[str, Any]]:
    """Decode the protected header of a JWT, or return None."""
    return _parse_segment(jwt, 0, "header")
