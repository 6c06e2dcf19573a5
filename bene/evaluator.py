"""
Bene Evaluator

The top-level campaign validator:

    VALID(tx) = STRUCTURE(SELF) AND (BUY OR REFUND OR WITHDRAW_FUNDS
                OR WITHDRAW_UNSOLD OR ADD_TOKENS OR EXCHANGE)

The boolean decision never depends on the diagnostic detail carried by the
result. Configuration problems are raised when the validator is built,
never during evaluation.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .actions import create_action_gate
from .constants import CampaignConstants
from .context import TransactionContext
from .gates import GateEvaluation, StructureGate
from .variants import ContractVariant, ContractVersion, resolve_variant

logger = logging.getLogger(__name__)


class EvaluationMode(str, Enum):
    """How action gates are evaluated."""
    EXHAUSTIVE = "EXHAUSTIVE"    # every action evaluated, full diagnostics
    FIRST_MATCH = "FIRST_MATCH"  # stop at the first passing action


class Decision(str, Enum):
    ACCEPT = "ACCEPT"
    REJECT = "REJECT"


@dataclass
class ValidationResult:
    """Result of validating one transaction against a campaign box."""
    version: ContractVersion
    structure: GateEvaluation
    actions: List[GateEvaluation] = field(default_factory=list)

    @property
    def matched_actions(self) -> List[str]:
        return [e.gate_id for e in self.actions if e.passed()]

    @property
    def decision(self) -> Decision:
        if self.structure.passed() and self.matched_actions:
            return Decision.ACCEPT
        return Decision.REJECT

    def accepted(self) -> bool:
        return self.decision == Decision.ACCEPT

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version.value,
            "decision": self.decision.value,
            "structure": self.structure.to_dict(),
            "actions": [e.to_dict() for e in self.actions],
            "matched_actions": self.matched_actions,
        }


class CampaignValidator:
    """
    Validator for one campaign contract: a variant plus its constants.

    Example:
        validator = CampaignValidator(constants, "v1_2")
        if validator.validate(tx):
            ...
    """

    def __init__(
        self,
        constants: CampaignConstants,
        variant: Union[ContractVariant, ContractVersion, str] = ContractVersion.V1_2,
        mode: EvaluationMode = EvaluationMode.EXHAUSTIVE
    ):
        if not isinstance(variant, ContractVariant):
            variant = resolve_variant(variant)
        variant.check_constants(constants)

        self.constants = constants
        self.variant = variant
        self.mode = mode
        self.structure_gate = StructureGate("structure", constants, variant)
        self.action_gates = [create_action_gate(a, constants, variant) for a in variant.actions]

    def evaluate(self, tx: TransactionContext) -> ValidationResult:
        """Evaluate every gate and collect per-gate diagnostics."""
        structure = self.structure_gate.evaluate(tx)
        result = ValidationResult(version=self.variant.version, structure=structure)

        for gate in self.action_gates:
            evaluation = gate.evaluate(tx)
            result.actions.append(evaluation)
            if evaluation.passed() and self.mode == EvaluationMode.FIRST_MATCH:
                break

        logger.debug(
            "campaign %s -> %s (matched: %s)",
            self.variant.version.value,
            result.decision.value,
            ", ".join(result.matched_actions) or "none"
        )
        return result

    def validate(self, tx: TransactionContext) -> bool:
        return self.evaluate(tx).accepted()


def validate(
    tx: TransactionContext,
    constants: CampaignConstants,
    version: Optional[Union[ContractVersion, str]] = None
) -> bool:
    """Convenience function: decide a single transaction."""
    validator = CampaignValidator(
        constants,
        version or ContractVersion.V1_2,
        mode=EvaluationMode.FIRST_MATCH
    )
    return validator.validate(tx)
