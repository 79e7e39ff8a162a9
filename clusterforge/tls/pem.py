"""RSA key helpers: creation, PEM encoding and asset path normalization."""

from __future__ import annotations

import posixpath

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from clusterforge.config import MIN_RSA_KEY_BITS

# Directory, relative to the asset root, that holds all TLS outputs.
TLS_DIR = "tls"

PUBLIC_EXPONENT = 65537


def asset_file_path(file_name: str) -> str:
    """Place *file_name* under the TLS asset directory.

    >>> asset_file_path("admin.key")
    'tls/admin.key'
    """
    normalized = posixpath.normpath(file_name.replace("\\", "/")).lstrip("/")
    if normalized in ("", ".", "..") or normalized.startswith("../"):
        raise ValueError(f"invalid asset file name: {file_name!r}")
    return posixpath.join(TLS_DIR, normalized)


def private_key(bits: int = MIN_RSA_KEY_BITS) -> rsa.RSAPrivateKey:
    """Generate an RSA private key of *bits* size."""
    if bits < MIN_RSA_KEY_BITS:
        raise ValueError(f"RSA key size {bits} is below {MIN_RSA_KEY_BITS}")
    return rsa.generate_private_key(public_exponent=PUBLIC_EXPONENT, key_size=bits)


def private_key_to_pem(key: rsa.RSAPrivateKey) -> bytes:
    """PKCS#1 ``RSA PRIVATE KEY`` PEM, unencrypted."""
    return key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.TraditionalOpenSSL,
        serialization.NoEncryption(),
    )


def public_key_to_pem(key: rsa.RSAPublicKey) -> bytes:
    """SubjectPublicKeyInfo ``PUBLIC KEY`` PEM."""
    return key.public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    )


def pem_to_private_key(data: bytes) -> rsa.RSAPrivateKey:
    key = serialization.load_pem_private_key(data, password=None)
    if not isinstance(key, rsa.RSAPrivateKey):
        raise ValueError("PEM does not hold an RSA private key")
    return key


def pem_to_public_key(data: bytes) -> rsa.RSAPublicKey:
    key = serialization.load_pem_public_key(data)
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("PEM does not hold an RSA public key")
    return key
