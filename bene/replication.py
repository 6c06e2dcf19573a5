"""
Bene Replication Invariant

A successor is a replica of the current campaign record when every field
that must never change is byte-identical and the successor still holds one
or two token classes.
"""

from enum import Enum

from .records import CampaignRecord, RecordError


class ReplicationShape(str, Enum):
    """
    LEGACY: v1_0 check, carries a proof-of-funding comparison that is
    always satisfied.
    CORRECTED: v1_1 and later, without that comparison.
    """
    LEGACY = "LEGACY"
    CORRECTED = "CORRECTED"


def _legacy_proof_of_funding_clause(successor: CampaignRecord) -> bool:
    # Kept as shipped in v1_0: the last alternative compares the id with
    # itself, so the clause holds for every successor.
    box = successor.box
    return (
        len(box.tokens) == 1
        or box.tokens[1].id == b""
        or box.tokens[1].id == box.tokens[1].id
    )


def is_replica(
    current: CampaignRecord,
    successor: CampaignRecord,
    shape: ReplicationShape = ReplicationShape.CORRECTED
) -> bool:
    """
    Check the replication invariant.

    The pricing descriptor is compared as a whole, which covers the asset id
    length on the v1_2 layout. A successor missing its identity token or
    registers is never a replica.
    """
    try:
        same_fields = (
            current.identity_id == successor.identity_id
            and current.block_limit == successor.block_limit
            and current.minimum_threshold == successor.minimum_threshold
            and current.pricing == successor.pricing
            and current.owner_details == successor.owner_details
            and current.project_metadata == successor.project_metadata
            and current.script == successor.script
        )
    except RecordError:
        return False

    if not same_fields:
        return False

    if shape == ReplicationShape.LEGACY and not _legacy_proof_of_funding_clause(successor):
        return False

    return successor.token_count in (1, 2)
