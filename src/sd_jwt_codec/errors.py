"""Error taxonomy and soft-failure diagnostics for the SD-JWT codec.

Low-level helpers raise the exceptions below. The parse and decode entry
points catch them and report a ``ParseWarning`` instead, so that a single
bad disclosure never aborts decoding of the rest of the token.
"""

import enum
from dataclasses import dataclass, field
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class SDJWTError(ValueError):
    """Base class for all codec errors."""


class MalformedEncoding(SDJWTError):
    """Raised when Base64Url (or the JSON inside it) cannot be decoded."""


class InvalidDisclosureShape(SDJWTError):
    """Raised when a disclosure is not a ``[salt, key, value]`` array."""


class InvalidCredential(SDJWTError):
    """Raised when the JWT payload carries no ``vc`` object."""


class DigestComputationFailure(SDJWTError):
    """Raised when a disclosure digest cannot be computed."""


class WarningCode(str, enum.Enum):
    """Machine-readable category of a ``ParseWarning``."""

    MALFORMED_ENCODING = "malformed_encoding"
    INVALID_DISCLOSURE_SHAPE = "invalid_disclosure_shape"
    INVALID_CREDENTIAL = "invalid_credential"
    DIGEST_COMPUTATION_FAILURE = "digest_computation_failure"


_ERROR_CODES = {
    MalformedEncoding: WarningCode.MALFORMED_ENCODING,
    InvalidDisclosureShape: WarningCode.INVALID_DISCLOSURE_SHAPE,
    InvalidCredential: WarningCode.INVALID_CREDENTIAL,
    DigestComputationFailure: WarningCode.DIGEST_COMPUTATION_FAILURE,
}


@dataclass(frozen=True)
class ParseWarning:
    """A recovered, non-fatal problem found while parsing a token.

    Attributes:
        code: Category of the problem
        message: Human readable description
        segment: Index of the ``~``-delimited segment involved, if any
            (0 is the JWT, 1 the first disclosure)
    """

    code: WarningCode
    message: str
    segment: Optional[int] = None

    @classmethod
    def from_error(cls, error: SDJWTError, segment: Optional[int] = None) -> "ParseWarning":
        """Build a warning from a codec exception.

        Args:
            error: The exception that was recovered from
            segment: Optional segment index

        Returns:
            ParseWarning with the code matching the exception type
        """
        for error_type, code in _ERROR_CODES.items():
            if isinstance(error, error_type):
                return cls(code=code, message=str(error), segment=segment)
        raise TypeError(f"No warning code for {type(error).__name__}")

    def to_dict(self) -> dict:
        return {"code": self.code.value, "message": self.message, "segment": self.segment}


@dataclass
class ParseResult(Generic[T]):
    """Best-effort value paired with the warnings collected producing it."""

    value: Optional[T]
    warnings: list[ParseWarning] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.value is not None
