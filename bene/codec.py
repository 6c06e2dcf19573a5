"""
Bene Register Wire Codec

Positional, fixed-width layout of the campaign registers. Must match
bit-for-bit across every producer and consumer of campaign boxes.

Layout (all integers big-endian, signed):

    R4  block limit          4 bytes
    R5  minimum threshold    8 bytes
    R6  sold                 8 bytes
        refunded             8 bytes
        exchanged            8 bytes
    R7  exchange rate        8 bytes
        asset id length      8 bytes   (RATE_AND_ASSET layout only)
    R8  owner details        4-byte unsigned length + bytes
    R9  project metadata     4-byte unsigned length + bytes
"""

import struct
from enum import Enum

from .box import CampaignRegisters, Counters, PricingDescriptor


class CodecError(ValueError):
    """Raised when registers cannot be encoded to or decoded from the wire layout."""


class RegisterLayout(str, Enum):
    """R7 shape: a single rate (v1_0, v1_1) or [rate, asset id length] (v1_2)."""
    SINGLE_RATE = "SINGLE_RATE"
    RATE_AND_ASSET = "RATE_AND_ASSET"


_INT = struct.Struct(">i")
_LONG = struct.Struct(">q")
_LENGTH = struct.Struct(">I")

INT_MIN, INT_MAX = -(2 ** 31), 2 ** 31 - 1
LONG_MIN, LONG_MAX = -(2 ** 63), 2 ** 63 - 1


def _check_range(value: int, low: int, high: int, name: str) -> None:
    if not low <= value <= high:
        raise CodecError(f"{name}={value} does not fit the wire field [{low}, {high}]")


def layout_of(registers: CampaignRegisters) -> RegisterLayout:
    if registers.pricing.has_asset_descriptor:
        return RegisterLayout.RATE_AND_ASSET
    return RegisterLayout.SINGLE_RATE


def encode_registers(registers: CampaignRegisters) -> bytes:
    """Serialize typed registers to the wire layout implied by their pricing descriptor."""
    longs = [
        ("minimum_threshold", registers.minimum_threshold),
        ("sold", registers.counters.sold),
        ("refunded", registers.counters.refunded),
        ("exchanged", registers.counters.exchanged),
        ("exchange_rate", registers.pricing.exchange_rate),
    ]
    if registers.pricing.has_asset_descriptor:
        longs.append(("asset_id_length", registers.pricing.asset_id_length))

    _check_range(registers.block_limit, INT_MIN, INT_MAX, "block_limit")
    parts = [_INT.pack(registers.block_limit)]
    for name, value in longs:
        _check_range(value, LONG_MIN, LONG_MAX, name)
        parts.append(_LONG.pack(value))

    for name, blob in (("owner_details", registers.owner_details),
                       ("project_metadata", registers.project_metadata)):
        _check_range(len(blob), 0, 2 ** 32 - 1, f"len({name})")
        parts.append(_LENGTH.pack(len(blob)))
        parts.append(blob)

    return b"".join(parts)


class _Reader:
    def __init__(self, data: bytes):
        self._data = data
        self._pos = 0

    def take(self, size: int, name: str) -> bytes:
        end = self._pos + size
        if end > len(self._data):
            raise CodecError(
                f"truncated registers: {name} needs {size} bytes at offset {self._pos}, "
                f"{len(self._data) - self._pos} left"
            )
        chunk = self._data[self._pos:end]
        self._pos = end
        return chunk

    def unpack(self, fmt: struct.Struct, name: str) -> int:
        return fmt.unpack(self.take(fmt.size, name))[0]

    def blob(self, name: str) -> bytes:
        size = self.unpack(_LENGTH, f"len({name})")
        return self.take(size, name)

    def finish(self) -> None:
        if self._pos != len(self._data):
            raise CodecError(f"{len(self._data) - self._pos} trailing bytes after registers")


def decode_registers(data: bytes, layout: RegisterLayout) -> CampaignRegisters:
    """
    Parse the wire layout back into typed registers.

    Raises:
        CodecError: on truncated input, trailing bytes or an unknown layout
    """
    if not isinstance(data, (bytes, bytearray)):
        raise CodecError("register data must be bytes")
    try:
        layout = RegisterLayout(layout)
    except ValueError:
        raise CodecError(f"unknown register layout: {layout!r}")

    reader = _Reader(bytes(data))
    block_limit = reader.unpack(_INT, "block_limit")
    minimum_threshold = reader.unpack(_LONG, "minimum_threshold")
    counters = Counters(
        sold=reader.unpack(_LONG, "sold"),
        refunded=reader.unpack(_LONG, "refunded"),
        exchanged=reader.unpack(_LONG, "exchanged"),
    )
    rate = reader.unpack(_LONG, "exchange_rate")
    if layout == RegisterLayout.RATE_AND_ASSET:
        pricing = PricingDescriptor(rate, reader.unpack(_LONG, "asset_id_length"))
    else:
        pricing = PricingDescriptor(rate)
    owner_details = reader.blob("owner_details")
    project_metadata = reader.blob("project_metadata")
    reader.finish()

    return CampaignRegisters(
        block_limit=block_limit,
        minimum_threshold=minimum_threshold,
        counters=counters,
        pricing=pricing,
        owner_details=owner_details,
        project_metadata=project_metadata,
    )
