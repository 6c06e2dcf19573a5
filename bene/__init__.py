"""
Bene Campaign Validator

Version: 1.2.0

State-transition validator for Bene crowdfunding campaign boxes on an
Ergo-style UTXO ledger. A campaign box holds an identity/participation token,
an optional proof-of-funding token, escrowed funds and typed registers. Every
transaction spending it must satisfy exactly:

    VALID(tx) = STRUCTURE(SELF) AND any(action(tx) for action in ACTIONS)

The predicate is pure: there is no third state. A transaction that cannot be
evaluated (missing output, token or register) is rejected.

Usage:
    from bene import CampaignConstants, CampaignValidator, TransactionContext

    constants = CampaignConstants.from_dict(load_json("constants.json"))
    validator = CampaignValidator(constants, "v1_2")

    result = validator.evaluate(TransactionContext.from_dict(tx_json))
    if result.accepted():
        print(result.matched_actions)
    else:
        for evaluation in result.actions:
            print(evaluation.gate_id, evaluation.failure_code)
"""

__version__ = "1.2.0"

# Ledger model
from .box import (
    Box,
    CampaignRegisters,
    Counters,
    PricingDescriptor,
    Token,
)
from .context import TransactionContext, create_context
from .records import CampaignRecord, RecordError

# Wire codec
from .codec import (
    CodecError,
    RegisterLayout,
    decode_registers,
    encode_registers,
    layout_of,
)

# Canonicalization and hashing
from .canonicalization import canonicalize, canonicalize_str
from .hashing import (
    blake2b256,
    content_hash,
    script_hash,
    sha256_hash,
    verify_script_hash,
)

# Primitives
from .propositions import box_guarded_by, p2pk_condition, proposition_equals
from .accounting import (
    available_for_exchange,
    delta_participation,
    delta_proof_of_funding,
    delta_settlement,
    developer_fee,
    project_amount,
)
from .replication import ReplicationShape, is_replica

# Configuration
from .constants import (
    MINER_FEE,
    AssetMode,
    CampaignConstants,
    ConfigurationError,
    Network,
)
from .variants import (
    ContractVariant,
    ContractVersion,
    UnknownVariantError,
    VariantRegistry,
    create_default_registry,
    resolve_variant,
)

# Gates
from .gates import (
    FailureCode,
    Gate,
    GateEvaluation,
    GateResult,
    StructureGate,
)
from .actions import (
    ACTION_GATES,
    AddTokensGate,
    BuyTokensGate,
    ExchangeFundingTokensGate,
    RefundTokensGate,
    WithdrawFundsGate,
    WithdrawUnsoldTokensGate,
    create_action_gate,
)

# Evaluator
from .evaluator import (
    CampaignValidator,
    Decision,
    EvaluationMode,
    ValidationResult,
    validate,
)

# Minting and builder boundary
from .minting import MintGuard
from .builder import (
    BuildRequest,
    CompiledContract,
    ScriptBuilder,
    StaticScriptBuilder,
    mint_guard_for,
)


__all__ = [
    "__version__",

    # Ledger model
    "Box",
    "CampaignRegisters",
    "Counters",
    "PricingDescriptor",
    "Token",
    "TransactionContext",
    "create_context",
    "CampaignRecord",
    "RecordError",

    # Codec
    "CodecError",
    "RegisterLayout",
    "decode_registers",
    "encode_registers",
    "layout_of",

    # Canonicalization & hashing
    "canonicalize",
    "canonicalize_str",
    "blake2b256",
    "content_hash",
    "script_hash",
    "sha256_hash",
    "verify_script_hash",

    # Primitives
    "box_guarded_by",
    "p2pk_condition",
    "proposition_equals",
    "available_for_exchange",
    "delta_participation",
    "delta_proof_of_funding",
    "delta_settlement",
    "developer_fee",
    "project_amount",
    "ReplicationShape",
    "is_replica",

    # Configuration
    "MINER_FEE",
    "AssetMode",
    "CampaignConstants",
    "ConfigurationError",
    "Network",
    "ContractVariant",
    "ContractVersion",
    "UnknownVariantError",
    "VariantRegistry",
    "create_default_registry",
    "resolve_variant",

    # Gates
    "FailureCode",
    "Gate",
    "GateEvaluation",
    "GateResult",
    "StructureGate",
    "ACTION_GATES",
    "AddTokensGate",
    "BuyTokensGate",
    "ExchangeFundingTokensGate",
    "RefundTokensGate",
    "WithdrawFundsGate",
    "WithdrawUnsoldTokensGate",
    "create_action_gate",

    # Evaluator
    "CampaignValidator",
    "Decision",
    "EvaluationMode",
    "ValidationResult",
    "validate",

    # Minting & builder
    "MintGuard",
    "BuildRequest",
    "CompiledContract",
    "ScriptBuilder",
    "StaticScriptBuilder",
    "mint_guard_for",
]
