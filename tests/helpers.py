"""
Shared fixtures for building campaign boxes and transactions.

Amounts default to a campaign with 100 proof-of-funding tokens, an identity
token supply of 100 participation units, a rate of 1000 native units per
participation unit and a minimum of 50 units sold.
"""

from bene import (
    Box,
    CampaignConstants,
    CampaignRegisters,
    Counters,
    PricingDescriptor,
    Token,
    blake2b256,
    create_context,
    p2pk_condition,
)

IDENTITY_ID = bytes([0xAA]) * 32
PROOF_OF_FUNDING_ID = bytes([0xBB]) * 32
DESIGNATED_ASSET_ID = bytes([0xCC]) * 32
OTHER_TOKEN_ID = bytes([0xDD]) * 32

OWNER_KEY = bytes([0x02]) + bytes(range(1, 33))
OWNER_CONDITION = p2pk_condition(OWNER_KEY)
STRANGER_CONDITION = p2pk_condition(bytes([0x03]) + bytes(range(33, 65)))

DEV_FEE_SCRIPT = bytes([0x10, 0x04]) + b"dev-fee-recipient"
DEV_FEE_SCRIPT_HASH = blake2b256(DEV_FEE_SCRIPT)

# Non-zero header byte, short enough for a single-byte size prefix
CAMPAIGN_SCRIPT = bytes([0x19, 0x40]) + b"bene-campaign-contract"

BLOCK_LIMIT = 1_000
MINIMUM = 50
RATE = 1_000


def make_constants(designated: bool = False, fee_percent: int = 5) -> CampaignConstants:
    return CampaignConstants(
        owner_condition=OWNER_CONDITION,
        dev_fee_script_hash=DEV_FEE_SCRIPT_HASH,
        dev_fee_percent=fee_percent,
        proof_of_funding_token_id=PROOF_OF_FUNDING_ID,
        designated_asset_id=DESIGNATED_ASSET_ID if designated else b"",
    )


def campaign_box(
    value: int = 1_000_000,
    participation: int = 100,
    proof_of_funding: int = 100,
    sold: int = 0,
    refunded: int = 0,
    exchanged: int = 0,
    rate: int = RATE,
    block_limit: int = BLOCK_LIMIT,
    minimum: int = MINIMUM,
    asset_id_length=0,
    script: bytes = CAMPAIGN_SCRIPT,
    extra_tokens=(),
    owner_details: bytes = b"owner",
    project_metadata: bytes = b'{"title":"Bene"}',
) -> Box:
    """
    A campaign box. ``asset_id_length=None`` selects the single-rate (v1_0 /
    v1_1) register layout; ``proof_of_funding=None`` drops token 1.
    """
    tokens = [Token(IDENTITY_ID, participation)]
    if proof_of_funding is not None:
        tokens.append(Token(PROOF_OF_FUNDING_ID, proof_of_funding))
    tokens.extend(extra_tokens)

    return Box(
        value=value,
        script=script,
        tokens=tokens,
        registers=CampaignRegisters(
            block_limit=block_limit,
            minimum_threshold=minimum,
            counters=Counters(sold, refunded, exchanged),
            pricing=PricingDescriptor(rate, asset_id_length),
            owner_details=owner_details,
            project_metadata=project_metadata,
        ),
    )


def evolve(box: Box, value=None, participation=None, proof_of_funding=None,
           sold=None, refunded=None, exchanged=None, script=None) -> Box:
    """Copy of a campaign box with the mutable fields replaced."""
    regs = box.registers
    counters = regs.counters
    participation = box.tokens[0].amount if participation is None else participation
    tokens = [Token(box.tokens[0].id, participation)]
    if len(box.tokens) > 1:
        pft = box.tokens[1].amount if proof_of_funding is None else proof_of_funding
        tokens.append(Token(box.tokens[1].id, pft))
    tokens.extend(box.tokens[2:])

    return Box(
        value=box.value if value is None else value,
        script=box.script if script is None else script,
        tokens=tokens,
        registers=CampaignRegisters(
            block_limit=regs.block_limit,
            minimum_threshold=regs.minimum_threshold,
            counters=Counters(
                counters.sold if sold is None else sold,
                counters.refunded if refunded is None else refunded,
                counters.exchanged if exchanged is None else exchanged,
            ),
            pricing=regs.pricing,
            owner_details=regs.owner_details,
            project_metadata=regs.project_metadata,
        ),
    )


def payout_box(value: int, condition: bytes = OWNER_CONDITION, tokens=()) -> Box:
    return Box(value=value, script=condition, tokens=tokens)


def dev_fee_box(value: int, script: bytes = DEV_FEE_SCRIPT) -> Box:
    return Box(value=value, script=script)


def transaction(self_box, outputs, height: int = 100, extra_inputs=None):
    return create_context(self_box, outputs, height, extra_inputs)


# ---- canonical transitions ---------------------------------------------

def buy_transaction(units: int = 10, **box_kwargs):
    current = campaign_box(**box_kwargs)
    successor = evolve(
        current,
        value=current.value + units * current.registers.pricing.exchange_rate,
        participation=current.tokens[0].amount - units,
        sold=current.registers.counters.sold + units,
    )
    return transaction(current, [successor])


def refund_transaction(units: int = 5, height: int = BLOCK_LIMIT + 1, **box_kwargs):
    box_kwargs.setdefault("sold", 10)
    box_kwargs.setdefault("participation", 90)
    current = campaign_box(**box_kwargs)
    successor = evolve(
        current,
        value=current.value - units * current.registers.pricing.exchange_rate,
        participation=current.tokens[0].amount + units,
        refunded=current.registers.counters.refunded + units,
    )
    return transaction(current, [successor], height=height)


def withdraw_transaction(extracted: int = 100_000_000, remaining: int = 1_000_000,
                         fee_percent: int = 5, **box_kwargs):
    """Partial withdrawal: the campaign box is replicated with ``remaining`` left."""
    box_kwargs.setdefault("sold", 60)
    box_kwargs.setdefault("participation", 40)
    current = campaign_box(value=extracted + remaining, **box_kwargs)
    successor = evolve(current, value=remaining)
    fee = extracted * fee_percent // 100
    return transaction(current, [
        successor,
        payout_box(extracted - fee - 1_100_000),
        dev_fee_box(fee),
    ])


def exchange_transaction(units: int = 10, **box_kwargs):
    box_kwargs.setdefault("sold", 60)
    box_kwargs.setdefault("participation", 40)
    current = campaign_box(**box_kwargs)
    successor = evolve(
        current,
        participation=current.tokens[0].amount + units,
        proof_of_funding=current.tokens[1].amount - units,
        exchanged=current.registers.counters.exchanged + units,
    )
    return transaction(current, [successor])
