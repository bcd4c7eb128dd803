"""Decoding of SD-JWT verifiable credentials into a display view.

The decoder never raises for per-disclosure problems. Malformed disclosures
are dropped, disclosures that cannot be digested count as undisclosed, and
only an unreadable JWT or a payload without a ``vc`` object produces no
credential at all.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from .config import DEFAULT_SETTINGS, CodecSettings
from .digest import digest_disclosures
from .disclosure import parse_disclosure_segments
from .errors import InvalidCredential, ParseWarning, WarningCode
from .jwt_utils import JSONValue, parse_jwt, split_sd_jwt

logger = logging.getLogger(__name__)

SD_DIGESTS_KEY = "_sd"
SD_ALG_KEY = "_sd_alg"


@dataclass(frozen=True)
class DecodedCredential:
    """Verifiable-credential view of a compact SD-JWT."""

    id: str
    issuer: str
    issuance_date: str
    subject_id: str
    types: tuple[str, ...]
    disclosed_claims: dict[str, JSONValue]
    undisclosed_keys: tuple[str, ...]
    raw_credential: str
    expiration_date: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Render the view with the camelCase field names wallets display."""
        result = {
            "id": self.id,
            "issuer": self.issuer,
            "issuanceDate": self.issuance_date,
            "subjectId": self.subject_id,
            "types": list(self.types),
            "disclosedClaims": dict(self.disclosed_claims),
            "undisclosedKeys": list(self.undisclosed_keys),
            "rawCredential": self.raw_credential,
        }
        if self.expiration_date is not None:
            result["expirationDate"] = self.expiration_date
        return result


@dataclass
class DecodeReport:
    """A decoded credential (or None) plus every warning raised on the way."""

    credential: Optional[DecodedCredential]
    warnings: list[ParseWarning] = field(default_factory=list)


def format_timestamp(moment: datetime) -> str:
    """Format a datetime as UTC ISO-8601 with milliseconds, e.g. ``2024-01-01T00:00:00.000Z``."""
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _invalid(message: str) -> DecodeReport:
    logger.warning("Cannot decode SD-JWT: %s", message)
    return DecodeReport(None, [ParseWarning.from_error(InvalidCredential(message), 0)])


def _declared_digests(subject: dict[str, Any], warnings: list[ParseWarning]) -> list[str]:
    declared = subject.get(SD_DIGESTS_KEY, [])
    if not isinstance(declared, list):
        warnings.append(ParseWarning(
            WarningCode.INVALID_CREDENTIAL,
            f"credentialSubject.{SD_DIGESTS_KEY} is not an array; ignoring it",
        ))
        return []

    digests = []
    for entry in declared:
        if isinstance(entry, str):
            digests.append(entry)
        else:
            warnings.append(ParseWarning(
                WarningCode.INVALID_CREDENTIAL,
                f"Ignoring non-string digest in credentialSubject.{SD_DIGESTS_KEY}: {entry!r}",
            ))
    return digests


def _types(vc: dict[str, Any], settings: CodecSettings) -> tuple[str, ...]:
    declared = vc.get("type")
    if isinstance(declared, str):
        return (declared,)
    if isinstance(declared, list):
        return tuple(str(t) for t in declared)
    return tuple(settings.DEFAULT_TYPES)


def _issuer(vc: dict[str, Any], settings: CodecSettings) -> str:
    issuer = vc.get("issuer")
    # W3C VC allows the issuer as an object carrying its id
    if isinstance(issuer, dict):
        issuer = issuer.get("id")
    return issuer or settings.DEFAULT_ISSUER


def _expiration(payload: dict[str, Any]) -> Optional[str]:
    exp = payload.get("exp")
    if isinstance(exp, bool) or not isinstance(exp, (int, float)):
        return None
    try:
        return format_timestamp(datetime.fromtimestamp(exp, tz=timezone.utc))
    except (OverflowError, OSError, ValueError):
        logger.warning("Ignoring out-of-range exp claim: %r", exp)
        return None


def decode_sd_jwt_report(token: str, settings: Optional[CodecSettings] = None) -> DecodeReport:
    """Decode a compact SD-JWT, returning the credential with its diagnostics.

    Args:
        token: Compact SD-JWT string
        settings: Optional settings (defaults to DEFAULT_SETTINGS)

    Returns:
        DecodeReport whose credential is None only when the JWT cannot be
        read or carries no ``vc`` object
    """
    settings = settings or DEFAULT_SETTINGS
    parts = split_sd_jwt(token)

    payload = parse_jwt(parts.jwt)
    if payload is None:
        return _invalid("JWT payload cannot be decoded")
    vc = payload.get("vc")
    if not isinstance(vc, dict):
        return _invalid("JWT payload has no vc object")

    subject = vc.get("credentialSubject")
    if not isinstance(subject, dict):
        subject = {}

    parsed = parse_disclosure_segments(parts.disclosures)
    warnings = list(parsed.warnings)

    disclosed_claims: dict[str, JSONValue] = {}
    for disclosure in parsed.value:
        disclosed_claims[disclosure.key] = disclosure.value

    hash_alg = payload.get(SD_ALG_KEY) or settings.DEFAULT_HASH_ALG
    digested = digest_disclosures(parsed.value, str(hash_alg))
    warnings.extend(digested.warnings)
    disclosed_digests = set(digested.value)

    undisclosed = [
        d for d in _declared_digests(subject, warnings) if d not in disclosed_digests
    ]
    undisclosed_keys = tuple(
        f"{settings.UNDISCLOSED_LABEL_PREFIX}{n}" for n in range(1, len(undisclosed) + 1)
    )

    for key, value in subject.items():
        if key not in (SD_DIGESTS_KEY, "id"):
            disclosed_claims[key] = value

    credential = DecodedCredential(
        id=vc.get("id") or settings.DEFAULT_CREDENTIAL_ID,
        issuer=_issuer(vc, settings),
        issuance_date=vc.get("issuanceDate") or format_timestamp(datetime.now(timezone.utc)),
        subject_id=subject.get("id") or settings.DEFAULT_SUBJECT_ID,
        types=_types(vc, settings),
        disclosed_claims=disclosed_claims,
        undisclosed_keys=undisclosed_keys,
        raw_credential=token,
        expiration_date=_expiration(payload),
    )
    return DecodeReport(credential, warnings)


def decode_sd_jwt(token: str, settings: Optional[CodecSettings] = None) -> Optional[DecodedCredential]:
    """Decode a compact SD-JWT into a DecodedCredential.

    Args:
        token: Compact SD-JWT string
        settings: Optional settings (defaults to DEFAULT_SETTINGS)

    Returns:
        The decoded credential, or None if the token is not a credential
    """
    return decode_sd_jwt_report(token, settings).credential


def decode_sd_jwt_many(
    tokens: Iterable[str], settings: Optional[CodecSettings] = None
) -> list[DecodedCredential]:
    """Decode a stored list of tokens, skipping those that are not credentials."""
    credentials = []
    for token in tokens:
        credential = decode_sd_jwt(token, settings)
        if credential is not None:
            credentials.append(credential)
    return credentials
