"""
Bene Proposition Equality

Decides "box X belongs to address Y" by comparing an authorization
condition's serialized bytes against a box's raw proposition bytes.

The comparison follows the ledger's script encoding: a tree whose header byte
is 0x00 is stored as-is, anything else carries a header byte plus a VLQ size
prefix that must be skipped before the bodies line up.
"""

# P2PK condition: tree header, SigmaProp constant type, ProveDlog opcode
P2PK_PREFIX = bytes([0x00, 0x08, 0xCD])
PUBLIC_KEY_LENGTH = 33

# Scripts longer than this need a two-byte VLQ size prefix
SINGLE_BYTE_SIZE_LIMIT = 127


def p2pk_condition(public_key: bytes) -> bytes:
    """Serialized pay-to-public-key condition for a compressed secp256k1 key."""
    if not isinstance(public_key, bytes) or len(public_key) != PUBLIC_KEY_LENGTH:
        raise ValueError(f"public key must be {PUBLIC_KEY_LENGTH} bytes")
    if public_key[0] not in (0x02, 0x03):
        raise ValueError("public key must be a compressed point (0x02/0x03 prefix)")
    return P2PK_PREFIX + public_key


def header_length(script: bytes) -> int:
    """Header size to strip from a non-trivial script: 1 tag byte + VLQ size."""
    return 3 if len(script) > SINGLE_BYTE_SIZE_LIMIT else 2


def proposition_equals(condition: bytes, script: bytes) -> bool:
    """
    Return whether ``script`` encodes exactly ``condition``.

    Args:
        condition: Serialized authorization condition (tag byte + body)
        script: Raw proposition bytes of the box under test
    """
    if not condition or not script:
        return False

    if script[0] == 0:
        return script == condition

    return condition[1:] == script[header_length(script):]


def box_guarded_by(condition: bytes, box) -> bool:
    """proposition_equals against a box; an absent box is never guarded."""
    if box is None:
        return False
    return proposition_equals(condition, box.script)
