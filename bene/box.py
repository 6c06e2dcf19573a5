"""
Bene Ledger Box Model

Typed representation of the ledger records a campaign transaction touches.

A box is an immutable unit of ledger state: an amount of the native asset,
the authorization script guarding it, an ordered token list and (for campaign
boxes) the typed register set R4-R9. Boxes are consumed and replaced wholesale
by every accepted transaction.

Registers are kept typed here; the positional wire layout lives in
``bene.codec`` and is only applied at the serialization boundary.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple


def _hex(data: bytes) -> str:
    return data.hex()


def _unhex(value: str, name: str) -> bytes:
    if not isinstance(value, str):
        raise ValueError(f"{name} must be a hex string")
    try:
        return bytes.fromhex(value)
    except ValueError:
        raise ValueError(f"{name} is not valid hex: {value!r}")


def _mapping(value: Any, name: str) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{name} must be an object")
    return value


def _sequence(value: Any, name: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"{name} must be a list")
    return value


def _int(value: Any, name: str) -> int:
    # bool is an int subclass; a JSON true/false is never a valid amount
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{name} must be an integer")
    return value


@dataclass(frozen=True)
class Token:
    """A (token id, amount) pair held by a box."""
    id: bytes
    amount: int

    def __post_init__(self):
        if not isinstance(self.id, bytes):
            raise ValueError("token id must be bytes")
        _int(self.amount, "token amount")

    def to_dict(self) -> Dict[str, Any]:
        return {"id": _hex(self.id), "amount": self.amount}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Token':
        data = _mapping(data, "token")
        missing = [f for f in ("id", "amount") if f not in data]
        if missing:
            raise ValueError(f"Missing token fields: {missing}")
        return cls(id=_unhex(data["id"], "token id"), amount=_int(data["amount"], "token amount"))


@dataclass(frozen=True)
class Counters:
    """
    R6: running totals of the campaign.

    - sold: participation units bought so far
    - refunded: participation units returned for a refund
    - exchanged: participation units swapped for proof-of-funding tokens
    """
    sold: int = 0
    refunded: int = 0
    exchanged: int = 0

    def to_list(self):
        return [self.sold, self.refunded, self.exchanged]

    @classmethod
    def from_list(cls, values) -> 'Counters':
        if len(values) != 3:
            raise ValueError(f"counters must have exactly 3 entries, got {len(values)}")
        return cls(*(_int(v, "counter") for v in values))


@dataclass(frozen=True)
class PricingDescriptor:
    """
    R7: settlement-asset units per participation unit.

    ``asset_id_length`` is None for the single-rate layout (v1_0, v1_1).
    For v1_2 it is the byte length of the designated asset id, 0 meaning
    the native asset.
    """
    exchange_rate: int
    asset_id_length: Optional[int] = None

    @property
    def has_asset_descriptor(self) -> bool:
        return self.asset_id_length is not None

    def to_list(self):
        if self.asset_id_length is None:
            return [self.exchange_rate]
        return [self.exchange_rate, self.asset_id_length]

    @classmethod
    def from_list(cls, values) -> 'PricingDescriptor':
        if len(values) == 1:
            return cls(exchange_rate=_int(values[0], "exchange rate"))
        if len(values) == 2:
            return cls(
                exchange_rate=_int(values[0], "exchange rate"),
                asset_id_length=_int(values[1], "asset id length"),
            )
        raise ValueError(f"pricing descriptor must have 1 or 2 entries, got {len(values)}")


@dataclass(frozen=True)
class CampaignRegisters:
    """Typed R4-R9 register set of a campaign box."""
    block_limit: int
    minimum_threshold: int
    counters: Counters
    pricing: PricingDescriptor
    owner_details: bytes = b""
    project_metadata: bytes = b""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "block_limit": self.block_limit,
            "minimum_threshold": self.minimum_threshold,
            "counters": self.counters.to_list(),
            "pricing": self.pricing.to_list(),
            "owner_details": _hex(self.owner_details),
            "project_metadata": _hex(self.project_metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CampaignRegisters':
        data = _mapping(data, "registers")
        required = ["block_limit", "minimum_threshold", "counters", "pricing"]
        missing = [f for f in required if f not in data]
        if missing:
            raise ValueError(f"Missing register fields: {missing}")

        return cls(
            block_limit=_int(data["block_limit"], "block_limit"),
            minimum_threshold=_int(data["minimum_threshold"], "minimum_threshold"),
            counters=Counters.from_list(_sequence(data["counters"], "counters")),
            pricing=PricingDescriptor.from_list(_sequence(data["pricing"], "pricing")),
            owner_details=_unhex(data.get("owner_details", ""), "owner_details"),
            project_metadata=_unhex(data.get("project_metadata", ""), "project_metadata"),
        )


@dataclass(frozen=True)
class Box:
    """
    A ledger box.

    ``registers`` is None for plain payout/funding boxes that carry no
    campaign state.
    """
    value: int
    script: bytes
    tokens: Tuple[Token, ...] = field(default_factory=tuple)
    registers: Optional[CampaignRegisters] = None

    def __post_init__(self):
        _int(self.value, "box value")
        if not isinstance(self.script, bytes):
            raise ValueError("box script must be bytes")
        # Accept any iterable of tokens but store a tuple so boxes stay hashable
        object.__setattr__(self, "tokens", tuple(self.tokens))

    def token_amount(self, token_id: bytes) -> int:
        """Amount of the first token with ``token_id``, 0 when absent."""
        for token in self.tokens:
            if token.id == token_id:
                return token.amount
        return 0

    def to_dict(self) -> Dict[str, Any]:
        d = {
            "value": self.value,
            "script": _hex(self.script),
            "tokens": [t.to_dict() for t in self.tokens],
        }
        if self.registers is not None:
            d["registers"] = self.registers.to_dict()
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Box':
        data = _mapping(data, "box")
        missing = [f for f in ("value", "script") if f not in data]
        if missing:
            raise ValueError(f"Missing box fields: {missing}")

        registers = data.get("registers")
        return cls(
            value=_int(data["value"], "box value"),
            script=_unhex(data["script"], "box script"),
            tokens=tuple(Token.from_dict(t) for t in _sequence(data.get("tokens", []), "box tokens")),
            registers=CampaignRegisters.from_dict(registers) if registers is not None else None,
        )
