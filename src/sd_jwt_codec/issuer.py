"""SD-JWT issuance helper.

Turns a verifiable-credential envelope plus a set of selectively disclosable
claims into a compact SD-JWT: each claim becomes a salted disclosure, its
digest goes into ``credentialSubject._sd``, and the JWT is signed with a
caller-supplied signer.
"""

import copy
import json
import secrets
from typing import Any, NamedTuple, Optional, Protocol

from . import b64_utils
from .credential import SD_ALG_KEY, SD_DIGESTS_KEY
from .digest import DEFAULT_HASH_ALG, SUPPORTED_HASH_ALGS, digest
from .disclosure import Disclosure
from .jwt_utils import DISCLOSURE_SEPARATOR, JSONValue
from .signers import Signer


class SaltGenerator(Protocol):
    """Protocol for generating cryptographic salts for disclosures."""

    def generate_salt(self, length: int = 16) -> bytes:
        """Generate a cryptographic salt.

        Args:
            length: Salt length in bytes (default 16 for 128 bits)

        Returns:
            Random salt bytes
        """


class SecureSaltGenerator:
    """Cryptographically secure salt generator using secrets module."""

    def generate_salt(self, length: int = 16) -> bytes:
        return secrets.token_bytes(length)


class SeededSaltGenerator:
    """Deterministic salt generator for testing purposes.

    WARNING: This generator is NOT cryptographically secure and should
    only be used for testing and reproducible examples.
    """

    def __init__(self, seed: int = 42):
        import random

        self._random = random.Random(seed)

    def generate_salt(self, length: int = 16) -> bytes:
        return bytes(self._random.getrandbits(8) for _ in range(length))


_default_salt_generator = SecureSaltGenerator()


class IssuedCredential(NamedTuple):
    """A freshly issued compact token and the disclosures it carries."""

    token: str
    disclosures: list[Disclosure]


def create_disclosure(salt: str, key: str, value: JSONValue) -> Disclosure:
    """Create a disclosure for a claim.

    SD-JWT format: [salt, key, value]

    Args:
        salt: Base64Url salt string
        key: Claim name
        value: Claim value

    Returns:
        Disclosure with its encoded segment
    """
    if not salt or not key:
        raise ValueError("Disclosure salt and claim name must be non-empty")
    return Disclosure(salt=salt, key=key, value=value, disclosure=b64_utils.encode_json([salt, key, value]))


def _sign_jwt(header: dict[str, Any], payload: dict[str, Any], signer: Optional[Signer]) -> str:
    signing_input = f"{b64_utils.encode_json(header)}.{b64_utils.encode_json(payload)}"
    signature = b64_utils.encode(signer.sign(signing_input.encode("ascii"))) if signer else ""
    return f"{signing_input}.{signature}"


def issue_sd_jwt(
    vc: dict[str, Any],
    disclosable_claims: dict[str, JSONValue],
    signer: Optional[Signer] = None,
    salt_generator: Optional[SaltGenerator] = None,
    hash_alg: str = DEFAULT_HASH_ALG,
    exp: Optional[int] = None,
) -> IssuedCredential:
    """Issue a compact SD-JWT credential.

    Args:
        vc: Verifiable-credential envelope (``id``, ``issuer``, ``type``, ...);
            plain claims in its ``credentialSubject`` stay always visible
        disclosable_claims: Claims to hide behind disclosures
        signer: Optional JWS signer (unsigned ``alg: none`` token if None)
        salt_generator: Optional salt generator for deterministic testing
        hash_alg: Digest algorithm written to ``_sd_alg``
        exp: Optional expiration time in seconds since the epoch

    Returns:
        IssuedCredential with the compact token and its disclosures

    Raises:
        ValueError: If the hash algorithm is unsupported or a claim name
            collides with a plain claim
    """
    if hash_alg not in SUPPORTED_HASH_ALGS:
        raise ValueError(f"Unsupported hash algorithm: {hash_alg}")
    salt_generator = salt_generator or _default_salt_generator

    envelope = copy.deepcopy(vc)
    subject = envelope.setdefault("credentialSubject", {})
    for key in disclosable_claims:
        if key in subject:
            raise ValueError(f"Claim {key!r} is both plain and selectively disclosable")

    disclosures = [
        create_disclosure(b64_utils.encode(salt_generator.generate_salt()), key, value)
        for key, value in disclosable_claims.items()
    ]
    # Sorted so the digest order reveals nothing about claim order
    subject[SD_DIGESTS_KEY] = sorted(digest(d, hash_alg) for d in disclosures)

    payload: dict[str, Any] = {"vc": envelope, SD_ALG_KEY: hash_alg}
    if exp is not None:
        payload["exp"] = exp
    header = {"alg": signer.algorithm if signer else "none", "typ": "vc+sd-jwt"}

    jwt = _sign_jwt(header, payload, signer)
    token = DISCLOSURE_SEPARATOR.join([jwt] + [d.disclosure for d in disclosures])
    return IssuedCredential(token, disclosures)


def load_claims_file(path: str) -> dict[str, Any]:
    """Read an issuance request ``{"vc": {...}, "disclosable": {...}}`` from JSON.

    Raises:
        OSError: If the file cannot be read
        ValueError: If the file is not JSON or its shape is wrong
    """
    with open(path, encoding="utf-8") as f:
        request = json.load(f)

    if not isinstance(request, dict):
        raise ValueError("Issuance request must be a JSON object")
    for section in ("vc", "disclosable"):
        if not isinstance(request.get(section, {}), dict):
            raise ValueError(f"Issuance request field {section!r} must be a JSON object")
    return request
