"""Unit tests for the disclosure digest engine."""

import base64
import hashlib
import json
from unittest.mock import patch

import pytest
from cryptography.exceptions import UnsupportedAlgorithm

from sd_jwt_codec.digest import SUPPORTED_HASH_ALGS, digest, digest_disclosures, hash_bytes
from sd_jwt_codec.disclosure import parse_disclosure
from sd_jwt_codec.errors import DigestComputationFailure, WarningCode


class TestDigest:
    """Test cases for single digests."""

    @pytest.mark.unit
    def test_matches_independent_sha256(self, token_factory):
        """The digest is SHA-256 over the decoded segment bytes, Base64Url, prefixed."""
        segment = token_factory.disclosure("saltA", "name", "Alice")
        raw = json.dumps(["saltA", "name", "Alice"]).encode("utf-8")
        expected = "sha-256:" + base64.urlsafe_b64encode(
            hashlib.sha256(raw).digest()
        ).rstrip(b"=").decode("ascii")

        assert digest(segment) == expected

    @pytest.mark.unit
    def test_accepts_parsed_disclosure(self, token_factory):
        """A Disclosure hashes its original encoded segment."""
        segment = token_factory.disclosure("s", "k", "v")
        assert digest(parse_disclosure(segment)) == digest(segment)

    @pytest.mark.unit
    def test_hashes_original_bytes_not_reserialization(self, token_factory):
        """Two encodings of the same triple have different digests."""
        spaced = token_factory.segment(["s", "k", {"a": 1, "b": 2}])
        compact = base64.urlsafe_b64encode(
            b'["s","k",{"b":2,"a":1}]'
        ).rstrip(b"=").decode("ascii")

        assert parse_disclosure(spaced).value == parse_disclosure(compact).value
        assert digest(spaced) != digest(compact)
        assert digest(spaced) == token_factory.digest(spaced)
        assert digest(compact) == token_factory.digest(compact)

    @pytest.mark.unit
    def test_is_stable(self, token_factory):
        """Repeated calls give the same digest."""
        segment = token_factory.disclosure("s", "k", [1, 2, 3])
        assert len({digest(segment) for _ in range(5)}) == 1

    @pytest.mark.unit
    def test_sha256_digest_length(self, token_factory):
        """Base64Url of 32 bytes is 43 characters."""
        value = digest(token_factory.disclosure("s", "k", "v"))
        assert value.startswith("sha-256:")
        assert len(value.split(":", 1)[1]) == 43

    @pytest.mark.unit
    @pytest.mark.parametrize("hash_alg", sorted(SUPPORTED_HASH_ALGS))
    def test_supported_algorithms(self, token_factory, hash_alg: str):
        """Every supported algorithm prefixes its own name."""
        segment = token_factory.disclosure("s", "k", "v")
        assert digest(segment, hash_alg).startswith(f"{hash_alg}:")

    @pytest.mark.unit
    def test_sha512_matches_hashlib(self):
        """Non-default algorithms hash the same bytes."""
        assert hash_bytes(b"abc", "sha-512") == hashlib.sha512(b"abc").digest()

    @pytest.mark.unit
    def test_unknown_algorithm(self, token_factory):
        """Unknown algorithms fail with DigestComputationFailure."""
        with pytest.raises(DigestComputationFailure, match="Unsupported hash algorithm"):
            digest(token_factory.disclosure("s", "k", "v"), "md5")

    @pytest.mark.unit
    def test_undecodable_segment(self):
        """A segment that is not Base64Url cannot be digested."""
        with pytest.raises(DigestComputationFailure):
            digest("###")

    @pytest.mark.unit
    def test_backend_failure(self, token_factory):
        """Crypto backend errors surface as DigestComputationFailure."""
        with patch(
            "sd_jwt_codec.digest.hashes.Hash",
            side_effect=UnsupportedAlgorithm("no backend"),
        ):
            with pytest.raises(DigestComputationFailure, match="not available"):
                digest(token_factory.disclosure("s", "k", "v"))


class TestDigestDisclosures:
    """Test cases for digesting a disclosure set."""

    @pytest.mark.unit
    def test_maps_digest_to_disclosure(self, token_factory):
        """Each digest maps back to its disclosure."""
        disclosures = [
            parse_disclosure(token_factory.disclosure(f"s{i}", f"k{i}", i)) for i in range(3)
        ]
        result = digest_disclosures(disclosures)

        assert result.warnings == []
        assert {d.key for d in result.value.values()} == {"k0", "k1", "k2"}
        for disclosure in disclosures:
            assert result.value[token_factory.digest(disclosure.disclosure)] is disclosure

    @pytest.mark.unit
    def test_failures_become_warnings(self, token_factory):
        """A failing algorithm skips every disclosure with one warning each."""
        disclosures = [parse_disclosure(token_factory.disclosure("s", "k", "v"))]
        result = digest_disclosures(disclosures, "sha-1")

        assert result.value == {}
        assert [w.code for w in result.warnings] == [WarningCode.DIGEST_COMPUTATION_FAILURE]
