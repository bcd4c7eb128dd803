"""JWS signers used when issuing SD-JWTs.

Keys are managed by the caller; a signer only needs a ``sign`` method and
the JWS ``alg`` name it produces.
"""

from typing import Protocol

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import ec, utils


class Signer(Protocol):
    """Protocol for JWS signers."""

    def sign(self, message: bytes) -> bytes:
        """Sign a message and return the signature.

        Args:
            message: The JWS signing input

        Returns:
            The signature bytes
        """

    @property
    def algorithm(self) -> str:
        """Get the JWS algorithm name (e.g. ``ES256``)."""


class ES256Signer:
    """ECDSA P-256 SHA-256 signer implementation."""

    def __init__(self, private_key_bytes: bytes):
        """Initialize ES256 signer with private key.

        Args:
            private_key_bytes: The private key bytes (32 bytes for P-256)
        """
        private_value = int.from_bytes(private_key_bytes, byteorder="big")
        self.private_key = ec.derive_private_key(private_value, ec.SECP256R1())

    def sign(self, message: bytes) -> bytes:
        """Sign a message with ES256."""
        signature_der = self.private_key.sign(message, ec.ECDSA(hashes.SHA256()))

        # JWS wants raw r||s, not DER
        r, s = utils.decode_dss_signature(signature_der)
        return r.to_bytes(32, byteorder="big") + s.to_bytes(32, byteorder="big")

    @property
    def algorithm(self) -> str:
        return "ES256"

    def public_key(self) -> ec.EllipticCurvePublicKey:
        return self.private_key.public_key()


def generate_es256_private_key() -> bytes:
    """Generate a random P-256 private key.

    Returns:
        The 32-byte private scalar, suitable for ES256Signer
    """
    private_key = ec.generate_private_key(ec.SECP256R1())
    return private_key.private_numbers().private_value.to_bytes(32, byteorder="big")
