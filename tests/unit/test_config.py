"""Unit tests for codec settings."""

import os

import pytest
from pydantic import ValidationError

from sd_jwt_codec.config import DEFAULT_SETTINGS, CodecSettings


class TestCodecSettings:

    @pytest.mark.unit
    def test_defaults(self):
        settings = CodecSettings()
        assert settings.UNDISCLOSED_LABEL_PREFIX == "未揭露欄位_"
        assert settings.DEFAULT_CREDENTIAL_ID == "未指定ID"
        assert settings.DEFAULT_ISSUER == "未知發行者"
        assert settings.DEFAULT_SUBJECT_ID == "未知持有者"
        assert settings.DEFAULT_TYPES == ("VerifiableCredential",)
        assert settings.DEFAULT_HASH_ALG == "sha-256"
        assert settings == DEFAULT_SETTINGS

    @pytest.mark.unit
    def test_frozen(self):
        with pytest.raises(ValidationError):
            DEFAULT_SETTINGS.DEFAULT_ISSUER = "changed"

    @pytest.mark.unit
    def test_rejects_unknown_hash_alg(self):
        with pytest.raises(ValidationError, match="DEFAULT_HASH_ALG"):
            CodecSettings(DEFAULT_HASH_ALG="md5")

    @pytest.mark.unit
    def test_rejects_unknown_log_level(self):
        with pytest.raises(ValidationError, match="LOG_LEVEL"):
            CodecSettings(LOG_LEVEL="LOUD")

    @pytest.mark.unit
    def test_normalizes_log_level(self):
        assert CodecSettings(LOG_LEVEL="debug").LOG_LEVEL == "DEBUG"

    @pytest.mark.unit
    def test_rejects_empty_types(self):
        with pytest.raises(ValidationError):
            CodecSettings(DEFAULT_TYPES=())


class TestFromEnv:

    @pytest.mark.unit
    def test_without_variables_matches_defaults(self):
        for name in list(os.environ):
            if name.startswith("SD_JWT_CODEC_"):
                del os.environ[name]
        assert CodecSettings.from_env() == CodecSettings()

    @pytest.mark.unit
    def test_reads_variables(self):
        os.environ["SD_JWT_CODEC_UNDISCLOSED_LABEL_PREFIX"] = "undisclosed_"
        os.environ["SD_JWT_CODEC_DEFAULT_ISSUER"] = "unknown issuer"
        os.environ["SD_JWT_CODEC_DEFAULT_TYPES"] = "VerifiableCredential, EmployeeCard"
        os.environ["SD_JWT_CODEC_DEFAULT_HASH_ALG"] = "sha-512"
        os.environ["SD_JWT_CODEC_LOG_LEVEL"] = "info"

        settings = CodecSettings.from_env()
        assert settings.UNDISCLOSED_LABEL_PREFIX == "undisclosed_"
        assert settings.DEFAULT_ISSUER == "unknown issuer"
        assert settings.DEFAULT_TYPES == ("VerifiableCredential", "EmployeeCard")
        assert settings.DEFAULT_HASH_ALG == "sha-512"
        assert settings.LOG_LEVEL == "INFO"

    @pytest.mark.unit
    def test_invalid_variable(self):
        os.environ["SD_JWT_CODEC_DEFAULT_HASH_ALG"] = "crc32"
        with pytest.raises(ValidationError):
            CodecSettings.from_env()
