"""
Bene Campaign Record View

Named, guarded access to the campaign fields of a box. Every accessor raises
RecordError instead of IndexError/AttributeError when the box does not carry
the expected token or register, so callers can turn a malformed record into a
plain rejection.
"""

from typing import Optional

from .box import Box, Counters, PricingDescriptor


class RecordError(ValueError):
    """A box does not carry the campaign field being read."""


class CampaignRecord:
    """
    Read-only view of a campaign box.

    Token 0 is the identity token whose amount is the participation balance;
    token 1, when present, is the proof-of-funding token.
    """

    def __init__(self, box: Optional[Box], label: str = "record"):
        if box is None:
            raise RecordError(f"{label} is absent")
        self.box = box
        self.label = label

    # ---- tokens ------------------------------------------------------

    @property
    def token_count(self) -> int:
        return len(self.box.tokens)

    @property
    def identity_id(self) -> bytes:
        return self._token(0).id

    @property
    def participation(self) -> int:
        return self._token(0).amount

    @property
    def has_proof_of_funding(self) -> bool:
        return self.token_count > 1

    @property
    def proof_of_funding_id(self) -> Optional[bytes]:
        if not self.has_proof_of_funding:
            return None
        return self.box.tokens[1].id

    @property
    def proof_of_funding_amount(self) -> int:
        """Amount of token 1, 0 when the record holds the identity token only."""
        if not self.has_proof_of_funding:
            return 0
        return self.box.tokens[1].amount

    def _token(self, index: int):
        if index >= self.token_count:
            raise RecordError(f"{self.label} has no token at position {index}")
        return self.box.tokens[index]

    # ---- registers ---------------------------------------------------

    @property
    def registers(self):
        if self.box.registers is None:
            raise RecordError(f"{self.label} has no campaign registers")
        return self.box.registers

    @property
    def block_limit(self) -> int:
        return self.registers.block_limit

    @property
    def minimum_threshold(self) -> int:
        return self.registers.minimum_threshold

    @property
    def counters(self) -> Counters:
        return self.registers.counters

    @property
    def sold(self) -> int:
        return self.counters.sold

    @property
    def refunded(self) -> int:
        return self.counters.refunded

    @property
    def exchanged(self) -> int:
        return self.counters.exchanged

    @property
    def pricing(self) -> PricingDescriptor:
        return self.registers.pricing

    @property
    def exchange_rate(self) -> int:
        return self.pricing.exchange_rate

    @property
    def owner_details(self) -> bytes:
        return self.registers.owner_details

    @property
    def project_metadata(self) -> bytes:
        return self.registers.project_metadata

    # ---- value & script ----------------------------------------------

    @property
    def value(self) -> int:
        return self.box.value

    @property
    def script(self) -> bytes:
        return self.box.script

    def __repr__(self) -> str:
        return f"CampaignRecord({self.label}, tokens={self.token_count}, value={self.box.value})"
