"""Keccak-256, the hash function behind block hashes."""

from Crypto.Hash import keccak

from .byte_arrays import Hash32


def keccak256(data: bytes) -> Hash32:
    """
    Compute the Keccak-256 digest of `data`.

    This is the original Keccak padding used by Ethereum, not NIST SHA3-256.
    """
    k = keccak.new(digest_bits=256)
    k.update(data)
    return Hash32(k.digest())
