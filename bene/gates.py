"""
Bene Validation Gates

A gate is one deterministic predicate over a transaction context. Every gate
returns PASS or FAIL and never raises: a record that is missing a token,
register or output is a FAIL, not an error.

Gates carry the failure code plus a required/observed pair so callers can
surface which sub-check rejected a transaction. The boolean verdict does not
depend on that detail.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from .codec import RegisterLayout
from .constants import CampaignConstants
from .context import TransactionContext
from .records import CampaignRecord, RecordError
from .replication import is_replica
from .variants import ContractVariant

logger = logging.getLogger(__name__)


class GateResult(str, Enum):
    """Gate evaluation result."""
    PASS = "PASS"
    FAIL = "FAIL"


class FailureCode(str, Enum):
    MISSING = "MISSING"                  # token, register, input or output absent
    MALFORMED = "MALFORMED"              # wrong number of token classes
    NOT_ALLOWED = "NOT_ALLOWED"          # height / threshold precondition not met
    NOT_REPLICATED = "NOT_REPLICATED"    # successor breaks the replication invariant
    CHANGED = "CHANGED"                  # a field that must stay constant moved
    MISMATCH = "MISMATCH"                # amounts do not balance
    NOT_INCREASING = "NOT_INCREASING"    # zero or negative increment
    EXCEEDED = "EXCEEDED"                # more than available for exchange
    UNAUTHORIZED = "UNAUTHORIZED"        # payout/funding box not guarded by the expected condition


@dataclass
class GateEvaluation:
    """Result of evaluating a single gate."""
    gate_id: str
    result: GateResult
    failure_code: Optional[FailureCode] = None
    required: Optional[str] = None
    observed: Optional[str] = None

    def passed(self) -> bool:
        return self.result == GateResult.PASS

    def to_dict(self) -> Dict[str, Any]:
        d = {"gate_id": self.gate_id, "result": self.result.value}
        if self.failure_code:
            d["failure_code"] = self.failure_code.value
        if self.required:
            d["required"] = self.required
        if self.observed:
            d["observed"] = self.observed
        return d


class Transition:
    """
    SELF and its candidate successor OUTPUTS(0), with the comparisons every
    action shares.
    """

    def __init__(self, tx: TransactionContext, constants: CampaignConstants, variant: ContractVariant):
        self.tx = tx
        self.constants = constants
        self.variant = variant
        self.current = CampaignRecord(tx.self_box, "SELF")
        self._successor: Optional[CampaignRecord] = None

        expects_descriptor = variant.register_layout == RegisterLayout.RATE_AND_ASSET
        if self.current.pricing.has_asset_descriptor != expects_descriptor:
            raise RecordError(
                f"SELF pricing register does not match the {variant.register_layout.value} layout"
            )

    @property
    def successor(self) -> CampaignRecord:
        if self._successor is None:
            self._successor = CampaignRecord(self.tx.output(0), "OUTPUTS(0)")
        return self._successor

    @property
    def settlement_asset_id(self) -> bytes:
        """Designated asset id, or b"" when this record settles in the native asset."""
        if not self.variant.supports_designated_asset:
            return b""
        if not self.current.pricing.asset_id_length:
            return b""
        return self.constants.designated_asset_id

    @property
    def is_native(self) -> bool:
        return not self.settlement_asset_id

    def is_replica(self) -> bool:
        return is_replica(self.current, self.successor, self.variant.replication_shape)

    @property
    def minimum_reached(self) -> bool:
        return self.current.sold >= self.current.minimum_threshold

    # Each returns (field name, self value, successor value) for fields that differ

    def changed_fields(self, *names: str):
        changed = []
        for name in names:
            before = self._field(self.current, name)
            after = self._field(self.successor, name)
            if before != after:
                changed.append((name, before, after))
        return changed

    @staticmethod
    def _field(record: CampaignRecord, name: str) -> int:
        if name == "value":
            return record.value
        if name == "participation":
            return record.participation
        if name == "proof_of_funding":
            return record.proof_of_funding_amount
        return getattr(record.counters, name)


class Gate(ABC):
    """Abstract base class for all gates."""

    def __init__(self, gate_id: str, constants: CampaignConstants, variant: ContractVariant):
        self.gate_id = gate_id
        self.constants = constants
        self.variant = variant

    def evaluate(self, tx: TransactionContext) -> GateEvaluation:
        """Evaluate the gate. Returns PASS or FAIL, never raises."""
        try:
            evaluation = self._evaluate(tx)
        except RecordError as e:
            evaluation = self._fail(FailureCode.MISSING, "well-formed campaign record", str(e))

        logger.debug("gate %s -> %s", self.gate_id, evaluation.result.value,
                     extra={"extra_fields": evaluation.to_dict()})
        return evaluation

    @abstractmethod
    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        pass

    def _pass(self) -> GateEvaluation:
        return GateEvaluation(gate_id=self.gate_id, result=GateResult.PASS)

    def _fail(
        self,
        code: FailureCode,
        required: str = None,
        observed: str = None
    ) -> GateEvaluation:
        return GateEvaluation(
            gate_id=self.gate_id,
            result=GateResult.FAIL,
            failure_code=code,
            required=required,
            observed=observed
        )

    def _fail_changed(self, changed) -> GateEvaluation:
        name, before, after = changed[0]
        return self._fail(FailureCode.CHANGED, f"{name} unchanged ({before})", f"{name}={after}")


class StructureGate(Gate):
    """
    The record was built correctly: one or two token classes, and token 1,
    when present, is the configured proof-of-funding token.
    """

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        box = tx.self_box
        if len(box.tokens) not in (1, 2):
            return self._fail(FailureCode.MALFORMED, "1 or 2 token classes", f"{len(box.tokens)} token classes")

        if len(box.tokens) == 2 and box.tokens[1].id != self.constants.proof_of_funding_token_id:
            return self._fail(
                FailureCode.MISMATCH,
                f"proof-of-funding token {self.constants.proof_of_funding_token_id.hex()}",
                box.tokens[1].id.hex()
            )

        return self._pass()
