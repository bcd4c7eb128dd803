"""
Runtime configuration for the SD-JWT codec.

Holds the display sentinels used when a credential omits metadata, the
placeholder prefix for undisclosed claims, and the default digest algorithm.
Settings are environment-driven via ``CodecSettings.from_env()`` and are
immutable once constructed.
"""

from __future__ import annotations

import logging
import os

from pydantic import BaseModel, Field, field_validator

from .digest import SUPPORTED_HASH_ALGS


class CodecSettings(BaseModel):
    """
    Settings consulted by the credential decoder and the CLI.

    None of these values influence digest matching except
    ``DEFAULT_HASH_ALG``, which applies only when a token does not name its
    own ``_sd_alg``.
    """

    # ------------------------------------------------------------------
    # Display sentinels
    # ------------------------------------------------------------------

    UNDISCLOSED_LABEL_PREFIX: str = Field(
        "未揭露欄位_",
        description="Prefix of the numbered placeholder for each undisclosed digest",
    )

    DEFAULT_CREDENTIAL_ID: str = Field(
        "未指定ID",
        description="Credential id reported when vc.id is absent",
    )

    DEFAULT_ISSUER: str = Field(
        "未知發行者",
        description="Issuer reported when vc.issuer is absent",
    )

    DEFAULT_SUBJECT_ID: str = Field(
        "未知持有者",
        description="Subject id reported when credentialSubject.id is absent",
    )

    DEFAULT_TYPES: tuple[str, ...] = Field(
        ("VerifiableCredential",),
        description="Credential types reported when vc.type is absent",
    )

    # ------------------------------------------------------------------
    # Digest and logging
    # ------------------------------------------------------------------

    DEFAULT_HASH_ALG: str = Field(
        "sha-256",
        description="Digest algorithm used when the payload has no _sd_alg",
    )

    LOG_LEVEL: str = Field(
        "WARNING",
        description="Console log level used by the command-line tool",
    )

    @field_validator("DEFAULT_HASH_ALG")
    @classmethod
    def validate_hash_alg(cls, v: str) -> str:
        if v not in SUPPORTED_HASH_ALGS:
            raise ValueError(
                f"Unsupported DEFAULT_HASH_ALG '{v}'. "
                f"Allowed values: {sorted(SUPPORTED_HASH_ALGS)}"
            )
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown LOG_LEVEL '{v}'")
        return level

    @field_validator("DEFAULT_TYPES")
    @classmethod
    def validate_default_types(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("DEFAULT_TYPES must name at least one type")
        return v

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "CodecSettings":
        """
        Load settings from ``SD_JWT_CODEC_*`` environment variables.

        Unset variables keep their defaults. ``SD_JWT_CODEC_DEFAULT_TYPES``
        is a comma-separated list.
        """
        defaults = cls()

        raw_types = os.getenv("SD_JWT_CODEC_DEFAULT_TYPES")
        types = (
            tuple(t.strip() for t in raw_types.split(",") if t.strip())
            if raw_types is not None
            else defaults.DEFAULT_TYPES
        )

        return cls(
            UNDISCLOSED_LABEL_PREFIX=os.getenv(
                "SD_JWT_CODEC_UNDISCLOSED_LABEL_PREFIX", defaults.UNDISCLOSED_LABEL_PREFIX
            ),
            DEFAULT_CREDENTIAL_ID=os.getenv(
                "SD_JWT_CODEC_DEFAULT_CREDENTIAL_ID", defaults.DEFAULT_CREDENTIAL_ID
            ),
            DEFAULT_ISSUER=os.getenv(
                "SD_JWT_CODEC_DEFAULT_ISSUER", defaults.DEFAULT_ISSUER
            ),
            DEFAULT_SUBJECT_ID=os.getenv(
                "SD_JWT_CODEC_DEFAULT_SUBJECT_ID", defaults.DEFAULT_SUBJECT_ID
            ),
            DEFAULT_TYPES=types,
            DEFAULT_HASH_ALG=os.getenv(
                "SD_JWT_CODEC_DEFAULT_HASH_ALG", defaults.DEFAULT_HASH_ALG
            ),
            LOG_LEVEL=os.getenv("SD_JWT_CODEC_LOG_LEVEL", defaults.LOG_LEVEL),
        )

    model_config = {
        "frozen": True,
    }


DEFAULT_SETTINGS = CodecSettings()
