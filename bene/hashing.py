"""
Bene Hashing

Two hash families are in play:

- blake2b-256 over raw script bytes: the ledger's native hash, used for the
  developer-fee recipient check and for script fingerprints committed by the
  minting guard.
- SHA-256 over canonical JSON, prefixed "sha256:", used to identify
  configuration objects (constants, build requests, variants).
"""

import hashlib
from typing import Any, Union

from .canonicalization import canonicalize


def blake2b256(data: bytes) -> bytes:
    """blake2b with a 32-byte digest, matching the ledger's blake2b256."""
    return hashlib.blake2b(data, digest_size=32).digest()


def script_hash(script: bytes) -> str:
    """Lowercase hex blake2b-256 of a script's proposition bytes."""
    return blake2b256(script).hex()


def sha256_hash(data: Union[bytes, str]) -> str:
    """
    SHA-256 with lowercase hex output.

    Returns:
        Hash string in format "sha256:abcdef..."
    """
    if isinstance(data, str):
        data = data.encode('utf-8')

    return f"sha256:{hashlib.sha256(data).hexdigest()}"


def content_hash(obj: Any) -> str:
    """SHA-256 of the canonical JSON encoding of ``obj``."""
    return sha256_hash(canonicalize(obj))


def verify_script_hash(declared: Union[bytes, str], script: bytes) -> bool:
    """
    Check a script against a declared blake2b-256 hash given as raw bytes or hex.
    """
    if isinstance(declared, str):
        try:
            declared = bytes.fromhex(declared)
        except ValueError:
            return False
    return declared == blake2b256(script)
