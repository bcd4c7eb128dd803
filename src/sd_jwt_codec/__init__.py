"""SD-JWT codec: decode, digest and reduce selective-disclosure credentials."""

__version__ = "0.1.0"

from .b64_utils import decode as base64url_decode
from .b64_utils import encode as base64url_encode
from .config import DEFAULT_SETTINGS, CodecSettings
from .credential import (
    DecodedCredential,
    DecodeReport,
    decode_sd_jwt,
    decode_sd_jwt_many,
    decode_sd_jwt_report,
)
from .digest import digest_disclosures
from .digest import digest as disclosure_digest
from .disclosure import (
    Disclosure,
    parse_disclosure,
    parse_disclosures,
    try_parse_disclosure,
)
from .errors import (
    DigestComputationFailure,
    InvalidCredential,
    InvalidDisclosureShape,
    MalformedEncoding,
    ParseResult,
    ParseWarning,
    SDJWTError,
    WarningCode,
)
from .issuer import (
    IssuedCredential,
    SaltGenerator,
    SecureSaltGenerator,
    SeededSaltGenerator,
    create_disclosure,
    issue_sd_jwt,
)
from .jwt_utils import SDJWTParts, parse_jwt, split_sd_jwt
from .presentation import (
    create_presentation_submission,
    rebuild_sd_jwt,
    select_disclosures_by_claim_names,
)
from .signers import ES256Signer, Signer, generate_es256_private_key


__all__ = [
    "__version__",
    # Base64Url transcoder
    "base64url_encode",
    "base64url_decode",
    # JWT payload extraction
    "parse_jwt",
    "split_sd_jwt",
    "SDJWTParts",
    # Disclosures and digests
    "Disclosure",
    "parse_disclosure",
    "parse_disclosures",
    "try_parse_disclosure",
    "disclosure_digest",
    "digest_disclosures",
    # Credential decoding
    "DecodedCredential",
    "DecodeReport",
    "decode_sd_jwt",
    "decode_sd_jwt_report",
    "decode_sd_jwt_many",
    # Presentations
    "rebuild_sd_jwt",
    "select_disclosures_by_claim_names",
    "create_presentation_submission",
    # Issuance
    "IssuedCredential",
    "create_disclosure",
    "issue_sd_jwt",
    "SaltGenerator",
    "SecureSaltGenerator",
    "SeededSaltGenerator",
    "Signer",
    "ES256Signer",
    "generate_es256_private_key",
    # Configuration
    "CodecSettings",
    "DEFAULT_SETTINGS",
    # Errors and diagnostics
    "SDJWTError",
    "MalformedEncoding",
    "InvalidDisclosureShape",
    "InvalidCredential",
    "DigestComputationFailure",
    "ParseWarning",
    "ParseResult",
    "WarningCode",
]
