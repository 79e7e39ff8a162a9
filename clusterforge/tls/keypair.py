"""Key pair asset — an RSA private/public pair rendered as two PEM blobs."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from clusterforge.assets.base import Asset, KeyGenerationError, ParentStates
from clusterforge.config import config
from clusterforge.models.state import Content, State
from clusterforge.tls.pem import (
    asset_file_path,
    private_key,
    private_key_to_pem,
    public_key_to_pem,
)

logger = logging.getLogger(__name__)


class KeyPair(Asset):
    """Generates an RSA private / public key pair.

    The resulting State holds exactly two entries, in this order:

    0. ``tls/<priv_key_file_name>`` — private key, PKCS#1 PEM.
    1. ``tls/<pub_key_file_name>`` — public key, SubjectPublicKeyInfo PEM.

    ``key_bits`` defaults to ``config.rsa_key_bits``.
    """

    def __init__(
        self,
        priv_key_file_name: str,
        pub_key_file_name: str,
        *,
        key_bits: int | None = None,
    ) -> None:
        # Resolve names up front so a bad name fails at wiring time.
        self._priv_path = asset_file_path(priv_key_file_name)
        self._pub_path = asset_file_path(pub_key_file_name)
        if self._priv_path == self._pub_path:
            raise ValueError("private and public key file names must differ")
        self.priv_key_file_name = priv_key_file_name
        self.pub_key_file_name = pub_key_file_name
        self.key_bits = key_bits if key_bits is not None else config.rsa_key_bits

    @property
    def asset_id(self) -> str:
        return f"keypair:{self._priv_path}:{self._pub_path}"

    @property
    def name(self) -> str:
        return f"Key Pair ({self.pub_key_file_name})"

    def dependencies(self) -> Sequence[Asset]:
        return ()

    def generate(self, parents: ParentStates) -> State:
        try:
            key = private_key(self.key_bits)
        except Exception as exc:
            raise KeyGenerationError("failed to generate private key") from exc

        try:
            priv_pem = private_key_to_pem(key)
        except Exception as exc:
            raise KeyGenerationError("failed to encode private key") from exc

        try:
            pub_pem = public_key_to_pem(key.public_key())
        except Exception as exc:
            raise KeyGenerationError(
                "failed to get public key data from private key"
            ) from exc

        logger.debug("Generated %d-bit RSA key pair for %s", self.key_bits, self.name)
        return State(
            contents=(
                Content(name=self._priv_path, data=priv_pem),
                Content(name=self._pub_path, data=pub_pem),
            )
        )
