"""TLS key material assets."""

from clusterforge.tls.keypair import KeyPair

__all__ = ["KeyPair"]
