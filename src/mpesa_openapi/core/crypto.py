"""
RSA helpers used to build the gateway's bearer tokens.

The gateway hands out its public key as base64-encoded DER
(SubjectPublicKeyInfo). Secrets are encrypted with PKCS#1 v1.5 padding, which
is what the gateway decrypts with; OAEP is rejected on its side.
"""

from __future__ import annotations

import base64
import binascii
from typing import Any

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from .errors import EncryptionError, KeyFormatError

__all__ = ["encrypt_key", "load_public_key"]

_PEM_MARKER = "-----BEGIN"


def load_public_key(public_key: str) -> rsa.RSAPublicKey:
    """
    Parse ``public_key`` into an RSA public key.

    Raises:
        KeyFormatError: if the material is not a decodable RSA public key.
    """
    raw = public_key.strip()
    if not raw:
        raise KeyFormatError("Public key must not be empty")

    try:
        if raw.startswith(_PEM_MARKER):
            key: Any = serialization.load_pem_public_key(raw.encode("utf-8"))
        else:
            der = base64.b64decode("".join(raw.split()), validate=True)
            key = serialization.load_der_public_key(der)
    except (ValueError, TypeError, binascii.Error) as exc:
        raise KeyFormatError(f"Invalid public key: {exc}") from exc

    if not isinstance(key, rsa.RSAPublicKey):
        raise KeyFormatError(f"Expected an RSA public key, got {type(key).__name__}")
    return key


def encrypt_key(plaintext: str, public_key: str) -> str:
    """Encrypt ``plaintext`` and return the ciphertext as base64 text."""
    key = load_public_key(public_key)
    try:
        ciphertext = key.encrypt(plaintext.encode("utf-8"), padding.PKCS1v15())
    except ValueError as exc:
        raise EncryptionError(f"Encryption failed: {exc}") from exc
    return base64.b64encode(ciphertext).decode("ascii")
