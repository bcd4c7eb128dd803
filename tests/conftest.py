"""Pytest configuration and shared fixtures for SD-JWT codec tests."""

import base64
import hashlib
import json
import os
from typing import Any, Dict, Optional

import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from cryptography.hazmat.primitives.asymmetric.ec import EllipticCurvePrivateKey


def b64url(data: bytes) -> str:
    """Independent Base64Url encoder so tests do not rely on the code under test."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


class TokenFactory:
    """Builds compact SD-JWTs by hand for precise control over every byte."""

    def segment(self, obj: Any) -> str:
        """Base64Url-encode a JSON value."""
        return b64url(json.dumps(obj).encode("utf-8"))

    def raw_segment(self, text: str) -> str:
        """Base64Url-encode JSON text as given, for documents json.dumps cannot build."""
        return b64url(text.encode("utf-8"))

    def disclosure(self, salt: str, key: str, value: Any) -> str:
        return self.segment([salt, key, value])

    def digest(self, disclosure_segment: str) -> str:
        """Expected digest: SHA-256 over the decoded disclosure bytes."""
        padded = disclosure_segment + "=" * (-len(disclosure_segment) % 4)
        raw = base64.urlsafe_b64decode(padded)
        return "sha-256:" + b64url(hashlib.sha256(raw).digest())

    def jwt(self, payload: Dict[str, Any], header: Optional[Dict[str, Any]] = None) -> str:
        header = header or {"alg": "ES256", "typ": "vc+sd-jwt"}
        return f"{self.segment(header)}.{self.segment(payload)}.c2lnbmF0dXJl"

    def token(self, jwt: str, *disclosures: str) -> str:
        return "~".join([jwt, *disclosures])

    def credential(
        self,
        disclosures: Dict[str, Any],
        plain_claims: Optional[Dict[str, Any]] = None,
        extra_digests: int = 0,
        **vc_fields: Any,
    ) -> str:
        """Build a credential whose _sd list matches the given disclosures.

        Args:
            disclosures: Claim name to value, each becoming one disclosure
            plain_claims: Always-visible claims in credentialSubject
            extra_digests: Number of additional digests with no disclosure
            vc_fields: Extra fields for the vc envelope

        Returns:
            Compact token with every disclosure attached
        """
        segments = [
            self.disclosure(f"salt-{key}", key, value) for key, value in disclosures.items()
        ]
        sd = [self.digest(s) for s in segments]
        sd += [
            "sha-256:" + b64url(hashlib.sha256(f"decoy-{i}".encode()).digest())
            for i in range(extra_digests)
        ]
        subject = {"id": "did:example:holder", "_sd": sd}
        subject.update(plain_claims or {})
        vc = {
            "id": "urn:uuid:credential-1",
            "issuer": "did:example:issuer",
            "issuanceDate": "2024-01-01T00:00:00.000Z",
            "type": ["VerifiableCredential", "StudentCard"],
            "credentialSubject": subject,
        }
        vc.update(vc_fields)
        return self.token(self.jwt({"vc": vc}), *segments)


@pytest.fixture
def token_factory() -> TokenFactory:
    """Provide a hand-rolled token builder."""
    return TokenFactory()


@pytest.fixture(scope="session")
def ec_private_key() -> EllipticCurvePrivateKey:
    """Generate an EC P-256 private key for signing tests."""
    return ec.generate_private_key(ec.SECP256R1())


@pytest.fixture(scope="session")
def es256_private_key_bytes(ec_private_key: EllipticCurvePrivateKey) -> bytes:
    """Raw 32-byte scalar of the session signing key."""
    return ec_private_key.private_numbers().private_value.to_bytes(32, byteorder="big")


@pytest.fixture
def sample_vc() -> Dict[str, Any]:
    """Provide a verifiable-credential envelope without disclosable claims."""
    return {
        "id": "urn:uuid:3978344f-8596-4c3a-a978-8fcaba3903c5",
        "issuer": "did:example:university",
        "issuanceDate": "2024-03-01T08:00:00.000Z",
        "type": ["VerifiableCredential", "UniversityDegreeCredential"],
        "credentialSubject": {
            "id": "did:example:student",
            "degree": "BSc",
        },
    }


@pytest.fixture
def selective_disclosure_claims() -> Dict[str, Any]:
    """Claims marked for selective disclosure."""
    return {
        "given_name": "王小明",
        "family_name": "Wang",
        "email": "ming@example.com",
        "birthdate": "1990-01-01",
        "address": {"city": "Taipei", "country": "TW"},
        "roles": ["student", "librarian"],
    }


@pytest.fixture(autouse=True)
def reset_environment():
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)
