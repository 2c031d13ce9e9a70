"""
Domain Tags for Parameter Generation

Every value absorbed into a transcript is prefixed with one of these tags.
These tags are PINNED - changing them changes every generated constant.
"""

from enum import IntEnum


class ParamgenTag(IntEnum):
    """Domain separation tags for the constant-derivation transcript."""

    # Transcript framing
    PROTOCOL = 0x50       # Protocol label, absorbed at construction
    MESSAGE = 0x51        # Untyped message
    DOMAIN_SEP = 0x52     # Parameter-generation identifier

    # Instance parameters
    SECURITY_LEVEL = 0x60  # Security target M (bits)
    WIDTH = 0x61           # State width t
    MODULUS = 0x62         # Field modulus p
    ALLOW_INVERSE = 0x63   # Inverse S-box permitted
    FULL_ROUNDS = 0x64     # r_F
    PARTIAL_ROUNDS = 0x65  # r_P
    ALPHA = 0x66           # S-box exponent

    # Outputs
    ROUND_CONSTANT = 0x70  # Round constant squeeze
    FINGERPRINT = 0x71     # Parameter set digest


# Protocol identifiers
ROUND_CONSTANTS_LABEL = b'round-constants'
PARAMGEN_DOMAIN = b'poseidon-paramgen'


def tag_bytes(tag: ParamgenTag) -> bytes:
    """Convert tag to canonical bytes (2 bytes, big-endian)."""
    return tag.to_bytes(2, 'big')
