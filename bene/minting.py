"""
Bene Minting Guard

The one-shot validator guarding the box that carries a fresh identity token
before the campaign exists. Spending it is allowed only into a campaign box
(OUTPUTS(0)) that receives the whole identity token supply and whose script
matches the committed fingerprint.
"""

import logging
from typing import Union

from .context import TransactionContext
from .gates import FailureCode, GateEvaluation, GateResult
from .hashing import blake2b256
from .constants import SCRIPT_HASH_LENGTH, ConfigurationError

logger = logging.getLogger(__name__)


class MintGuard:
    """
    Validator for the identity-token carrier.

    ``committed_script_hash`` is the blake2b-256 of the campaign contract's
    proposition bytes, raw or hex.
    """

    gate_id = "mint"

    def __init__(self, committed_script_hash: Union[bytes, str]):
        if isinstance(committed_script_hash, str):
            try:
                committed_script_hash = bytes.fromhex(committed_script_hash)
            except ValueError:
                raise ConfigurationError("committed_script_hash must be hex")
        if len(committed_script_hash) != SCRIPT_HASH_LENGTH:
            raise ConfigurationError(
                f"committed_script_hash must be {SCRIPT_HASH_LENGTH} bytes"
            )
        self.committed_script_hash = committed_script_hash

    def evaluate(self, tx: TransactionContext) -> GateEvaluation:
        evaluation = self._evaluate(tx)
        logger.debug("mint guard -> %s", evaluation.result.value,
                     extra={"extra_fields": evaluation.to_dict()})
        return evaluation

    def validate(self, tx: TransactionContext) -> bool:
        return self.evaluate(tx).passed()

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        carrier = tx.self_box
        campaign_box = tx.output(0)

        if not carrier.tokens:
            return self._fail(FailureCode.MISSING, "identity token on SELF", "no tokens")
        if campaign_box is None:
            return self._fail(FailureCode.MISSING, "campaign box at OUTPUTS(0)", "none")
        if not campaign_box.tokens:
            return self._fail(FailureCode.MISSING, "identity token on OUTPUTS(0)", "no tokens")

        identity = carrier.tokens[0]
        moved = campaign_box.tokens[0]
        if moved.id != identity.id:
            return self._fail(FailureCode.MISMATCH, f"token {identity.id.hex()}", moved.id.hex())
        if moved.amount != identity.amount:
            return self._fail(FailureCode.MISMATCH, f"amount {identity.amount}", f"amount {moved.amount}")

        if blake2b256(campaign_box.script) != self.committed_script_hash:
            return self._fail(
                FailureCode.UNAUTHORIZED,
                f"script hash {self.committed_script_hash.hex()}",
                blake2b256(campaign_box.script).hex()
            )

        return GateEvaluation(gate_id=self.gate_id, result=GateResult.PASS)

    def _fail(self, code: FailureCode, required: str, observed: str) -> GateEvaluation:
        return GateEvaluation(
            gate_id=self.gate_id,
            result=GateResult.FAIL,
            failure_code=code,
            required=required,
            observed=observed
        )
