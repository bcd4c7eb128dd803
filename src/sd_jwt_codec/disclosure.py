"""Disclosure parsing for SD-JWT.

A disclosure is the Base64Url encoding of the JSON array
``[salt, claim_name, claim_value]``. The encoded form is kept alongside the
parsed triple because digests and rebuilt presentations must use the exact
bytes the issuer produced.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from . import b64_utils
from .errors import InvalidDisclosureShape, MalformedEncoding, ParseResult, ParseWarning
from .jwt_utils import JSONValue, split_sd_jwt

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Disclosure:
    """One decoded disclosure and its original encoded segment."""

    salt: str
    key: str
    value: JSONValue
    disclosure: str

    def to_dict(self) -> dict:
        return {
            "salt": self.salt,
            "key": self.key,
            "value": self.value,
            "disclosure": self.disclosure,
        }


def _validate_shape(decoded: object) -> tuple[str, str, JSONValue]:
    if not isinstance(decoded, list) or len(decoded) != 3:
        raise InvalidDisclosureShape(
            f"Disclosure must be a 3-element array, got {type(decoded).__name__}"
            + (f" of length {len(decoded)}" if isinstance(decoded, list) else "")
        )

    salt, key, value = decoded
    if not isinstance(salt, str) or not salt:
        raise InvalidDisclosureShape("Disclosure salt must be a non-empty string")
    if not isinstance(key, str) or not key:
        raise InvalidDisclosureShape("Disclosure claim name must be a non-empty string")
    return salt, key, value


def try_parse_disclosure(segment: str, index: Optional[int] = None) -> ParseResult[Disclosure]:
    """Parse a disclosure segment, reporting any problem as a warning.

    Args:
        segment: Base64Url-encoded disclosure
        index: Optional position of the segment in the compact token

    Returns:
        ParseResult holding the Disclosure, or None with one warning
    """
    try:
        salt, key, value = _validate_shape(b64_utils.decode_json(segment))
    except (MalformedEncoding, InvalidDisclosureShape) as exc:
        logger.warning("Dropping malformed disclosure (segment %s): %s", index, exc)
        return ParseResult(None, [ParseWarning.from_error(exc, index)])

    return ParseResult(Disclosure(salt=salt, key=key, value=value, disclosure=segment))


def parse_disclosure(segment: str) -> Optional[Disclosure]:
    """Parse a single disclosure segment.

    Never raises: malformed segments are logged and yield None.

    Args:
        segment: Base64Url-encoded disclosure

    Returns:
        The parsed Disclosure, or None if the segment is invalid
    """
    return try_parse_disclosure(segment).value


def parse_disclosure_segments(segments: list[str]) -> ParseResult[list[Disclosure]]:
    """Parse raw disclosure segments, keeping valid ones in their original order.

    Args:
        segments: Encoded disclosure segments, excluding the JWT

    Returns:
        ParseResult with the valid disclosures and one warning per dropped segment
    """
    disclosures = []
    warnings = []
    for index, segment in enumerate(segments, start=1):
        result = try_parse_disclosure(segment, index)
        warnings.extend(result.warnings)
        if result.value is not None:
            disclosures.append(result.value)
    return ParseResult(disclosures, warnings)


def parse_disclosures(token: str) -> list[Disclosure]:
    """Parse every disclosure carried by a compact SD-JWT.

    Args:
        token: Compact token ``<jwt>~<disclosure>~...``

    Returns:
        Valid disclosures in token order (empty if there are none)
    """
    return parse_disclosure_segments(split_sd_jwt(token).disclosures).value
