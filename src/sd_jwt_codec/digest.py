"""Disclosure digests.

The digest of a disclosure is taken over the bytes obtained by decoding its
original Base64Url segment. Hashing a re-serialization of the parsed JSON
would not reproduce the issuer's digest whenever key order, whitespace or
number formatting differ.
"""

import logging
from typing import Union

from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes

from . import b64_utils
from .disclosure import Disclosure
from .errors import DigestComputationFailure, MalformedEncoding, ParseResult, ParseWarning

logger = logging.getLogger(__name__)

DEFAULT_HASH_ALG = "sha-256"

# IANA "Named Information Hash Algorithm" names
SUPPORTED_HASH_ALGS = {
    "sha-256": hashes.SHA256,
    "sha-384": hashes.SHA384,
    "sha-512": hashes.SHA512,
    "sha3-256": hashes.SHA3_256,
    "sha3-512": hashes.SHA3_512,
}


def hash_bytes(data: bytes, hash_alg: str = DEFAULT_HASH_ALG) -> bytes:
    """Hash raw bytes with a named algorithm.

    Args:
        data: Bytes to hash
        hash_alg: Algorithm name, e.g. ``sha-256``

    Returns:
        Hash digest bytes

    Raises:
        DigestComputationFailure: If the algorithm is unknown or unavailable
    """
    algorithm = SUPPORTED_HASH_ALGS.get(hash_alg)
    if algorithm is None:
        raise DigestComputationFailure(f"Unsupported hash algorithm: {hash_alg}")

    try:
        hasher = hashes.Hash(algorithm())
        hasher.update(data)
        return hasher.finalize()
    except UnsupportedAlgorithm as exc:
        raise DigestComputationFailure(
            f"Hash algorithm {hash_alg} is not available from the crypto backend"
        ) from exc


def digest(disclosure: Union[Disclosure, str], hash_alg: str = DEFAULT_HASH_ALG) -> str:
    """Compute the digest string of a disclosure.

    Args:
        disclosure: Parsed Disclosure or its raw encoded segment
        hash_alg: Algorithm name, e.g. ``sha-256``

    Returns:
        ``"<hash_alg>:"`` followed by the Base64Url-encoded hash

    Raises:
        DigestComputationFailure: If the segment cannot be decoded or hashed
    """
    segment = disclosure.disclosure if isinstance(disclosure, Disclosure) else disclosure
    try:
        raw = b64_utils.decode(segment)
    except MalformedEncoding as exc:
        raise DigestComputationFailure(f"Cannot decode disclosure for hashing: {exc}") from exc

    return f"{hash_alg}:{b64_utils.encode(hash_bytes(raw, hash_alg))}"


def digest_disclosures(
    disclosures: list[Disclosure], hash_alg: str = DEFAULT_HASH_ALG
) -> ParseResult[dict[str, Disclosure]]:
    """Digest every disclosure, skipping those whose digest fails.

    Args:
        disclosures: Parsed disclosures
        hash_alg: Algorithm name

    Returns:
        ParseResult mapping digest string to disclosure, with a warning for
        each disclosure that could not be digested
    """
    digests: dict[str, Disclosure] = {}
    warnings = []
    for disclosure in disclosures:
        try:
            digests[digest(disclosure, hash_alg)] = disclosure
        except DigestComputationFailure as exc:
            logger.warning("Treating disclosure %r as undisclosed: %s", disclosure.key, exc)
            warnings.append(ParseWarning.from_error(exc))
    return ParseResult(digests, warnings)
