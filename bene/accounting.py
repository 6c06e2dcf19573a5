"""
Bene Accounting Primitives

Pure integer functions over a campaign record and its candidate successor.
Sign conventions follow the direction the units move relative to the
campaign box.
"""

from .box import Box
from .records import CampaignRecord


def available_for_exchange(record: CampaignRecord) -> int:
    """
    Participation units that can still be sold or exchanged.

    Sold units may exceed the on-record proof-of-funding amount because part
    of them is still unbacked pending a later exchange. Refunded and
    exchanged units are added back so capacity is not counted twice.
    """
    return (
        record.proof_of_funding_amount
        - record.sold
        + record.refunded
        + record.exchanged
    )


def delta_participation(current: CampaignRecord, successor: CampaignRecord) -> int:
    """Participation units leaving the box (positive on a buy)."""
    return current.participation - successor.participation


def delta_proof_of_funding(current: CampaignRecord, successor: CampaignRecord) -> int:
    """Proof-of-funding units added to the box (negative when withdrawn or exchanged)."""
    return successor.proof_of_funding_amount - current.proof_of_funding_amount


def settlement_amount(box: Box, asset_id: bytes = b"") -> int:
    """
    Settlement balance of a box.

    An empty ``asset_id`` means the native asset (box value); otherwise the
    amount of the first token matching the designated asset, 0 if absent.
    """
    if not asset_id:
        return box.value
    return box.token_amount(asset_id)


def delta_settlement(current: CampaignRecord, successor: CampaignRecord, asset_id: bytes = b"") -> int:
    """Settlement units added to the box (positive on a buy, negative on a refund)."""
    return settlement_amount(successor.box, asset_id) - settlement_amount(current.box, asset_id)


def developer_fee(extracted: int, fee_percent: int) -> int:
    """``extracted * fee_percent / 100`` truncated toward zero, as ledger Long division does."""
    product = extracted * fee_percent
    quotient = abs(product) // 100
    return quotient if product >= 0 else -quotient


def project_amount(extracted: int, fee_percent: int, miner_fee: int) -> int:
    """What the owner receives once the developer fee and miner fee are taken out."""
    return extracted - developer_fee(extracted, fee_percent) - miner_fee
