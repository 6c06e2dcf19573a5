"""
Bene Action Gates

One gate per campaign operation. The dispatcher ORs them: any single action
holding authorizes the transaction.

    buy_tokens               participation units out, settlement asset in
    refund_tokens            participation units back, settlement asset out
    withdraw_funds           owner takes raised funds, developer fee split off
    withdraw_unsold_tokens   owner takes back unsold proof-of-funding tokens
    add_tokens               owner tops up proof-of-funding tokens
    exchange_funding_tokens  participation units swapped 1:1 for proof-of-funding tokens
"""

from typing import Dict, Type

from .accounting import (
    available_for_exchange,
    delta_participation,
    delta_proof_of_funding,
    delta_settlement,
    developer_fee,
    project_amount,
)
from .constants import MINER_FEE, CampaignConstants, ConfigurationError
from .context import TransactionContext
from .gates import FailureCode, Gate, GateEvaluation, Transition
from .hashing import blake2b256
from .propositions import box_guarded_by
from .variants import ContractVariant


class BuyTokensGate(Gate):
    """
    Anyone may buy while units remain available, before or after the block
    limit.
    """

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        t = Transition(tx, self.constants, self.variant)
        current, successor = t.current, t.successor

        if not t.is_replica():
            return self._fail(FailureCode.NOT_REPLICATED, "successor replicates SELF", "replication broken")

        changed = t.changed_fields("refunded", "exchanged", "proof_of_funding")
        if changed:
            return self._fail_changed(changed)

        bought = delta_participation(current, successor)
        available = available_for_exchange(current)
        if bought > available:
            return self._fail(FailureCode.EXCEEDED, f"at most {available} units", f"{bought} units")

        paid = delta_settlement(current, successor, t.settlement_asset_id)
        expected = bought * current.exchange_rate
        if paid != expected:
            return self._fail(FailureCode.MISMATCH, f"settlement delta {expected}", f"settlement delta {paid}")

        increment = successor.sold - current.sold
        if increment != bought:
            return self._fail(FailureCode.MISMATCH, f"sold += {bought}", f"sold += {increment}")
        if increment <= 0:
            return self._fail(FailureCode.NOT_INCREASING, "sold increment > 0", f"sold += {increment}")

        return self._pass()


class RefundTokensGate(Gate):
    """
    Refunds open once the block limit has passed without the minimum being
    sold.
    """

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        t = Transition(tx, self.constants, self.variant)
        current = t.current

        if not tx.height > current.block_limit:
            return self._fail(FailureCode.NOT_ALLOWED, f"height > {current.block_limit}", f"height {tx.height}")
        if t.minimum_reached:
            return self._fail(
                FailureCode.NOT_ALLOWED,
                f"sold < {current.minimum_threshold}",
                f"sold {current.sold}"
            )

        successor = t.successor
        if not t.is_replica():
            return self._fail(FailureCode.NOT_REPLICATED, "successor replicates SELF", "replication broken")

        changed = t.changed_fields("sold", "exchanged", "proof_of_funding")
        if changed:
            return self._fail_changed(changed)

        returned_units = -delta_participation(current, successor)
        returned_value = -delta_settlement(current, successor, t.settlement_asset_id)
        expected = returned_units * current.exchange_rate
        if returned_value != expected:
            return self._fail(FailureCode.MISMATCH, f"refund of {expected}", f"refund of {returned_value}")

        increment = successor.refunded - current.refunded
        if increment != returned_units:
            return self._fail(FailureCode.MISMATCH, f"refunded += {returned_units}", f"refunded += {increment}")
        if increment <= 0:
            return self._fail(FailureCode.NOT_INCREASING, "refunded increment > 0", f"refunded += {increment}")

        return self._pass()


class WithdrawFundsGate(Gate):
    """
    Once the minimum is sold, raised funds go to the owner (OUTPUTS(1)) minus
    the developer fee (OUTPUTS(2)) and the miner fee.

    Designated-asset campaigns skip the fee and amount checks entirely.
    """

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        t = Transition(tx, self.constants, self.variant)
        current = t.current

        if not t.minimum_reached:
            return self._fail(
                FailureCode.NOT_ALLOWED,
                f"sold >= {current.minimum_threshold}",
                f"sold {current.sold}"
            )

        owner_box = tx.output(1)
        if not box_guarded_by(self.constants.owner_condition, owner_box):
            return self._fail(FailureCode.UNAUTHORIZED, "OUTPUTS(1) pays the owner", "other destination")

        successor = t.successor
        changed = t.changed_fields("sold", "refunded", "exchanged", "participation", "proof_of_funding")
        if changed:
            return self._fail_changed(changed)

        if t.is_native:
            if successor.script == current.script:
                extracted = current.value - successor.value
            else:
                extracted = current.value
            dev_fee = developer_fee(extracted, self.constants.dev_fee_percent)
            owner_amount = project_amount(extracted, self.constants.dev_fee_percent, MINER_FEE)

            if owner_box.value != owner_amount:
                return self._fail(FailureCode.MISMATCH, f"owner receives {owner_amount}", f"owner receives {owner_box.value}")

            dev_box = tx.output(2)
            if dev_box is None:
                return self._fail(FailureCode.MISSING, "developer fee box at OUTPUTS(2)", "none")
            if dev_box.value != dev_fee:
                return self._fail(FailureCode.MISMATCH, f"developer fee {dev_fee}", f"developer fee {dev_box.value}")
            if blake2b256(dev_box.script) != self.constants.dev_fee_script_hash:
                return self._fail(FailureCode.UNAUTHORIZED, "OUTPUTS(2) pays the developer script", "other destination")

            all_funds_withdrawn = extracted == current.value
        else:
            # No fee or owner amount checks for a designated settlement asset
            all_funds_withdrawn = True

        if not (t.is_replica() or (all_funds_withdrawn and not current.has_proof_of_funding)):
            return self._fail(
                FailureCode.NOT_REPLICATED,
                "partial withdrawal replicates SELF, or full withdrawal without proof-of-funding tokens",
                "neither"
            )

        return self._pass()


class WithdrawUnsoldTokensGate(Gate):
    """The owner may take back proof-of-funding tokens not yet owed to buyers."""

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        t = Transition(tx, self.constants, self.variant)
        current, successor = t.current, t.successor

        if not box_guarded_by(self.constants.owner_condition, tx.output(1)):
            return self._fail(FailureCode.UNAUTHORIZED, "OUTPUTS(1) pays the owner", "other destination")

        if not t.is_replica():
            return self._fail(FailureCode.NOT_REPLICATED, "successor replicates SELF", "replication broken")

        changed = t.changed_fields("sold", "refunded", "exchanged", "value", "participation")
        if changed:
            return self._fail_changed(changed)

        added = delta_proof_of_funding(current, successor)
        if added >= 0:
            return self._fail(FailureCode.MISMATCH, "proof-of-funding tokens leave the box", f"delta {added}")

        available = available_for_exchange(current)
        if -added > available:
            return self._fail(FailureCode.EXCEEDED, f"at most {available} unsold tokens", f"{-added} tokens")

        return self._pass()


class AddTokensGate(Gate):
    """The owner may add proof-of-funding tokens from a box it controls (INPUTS(1))."""

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        funding_box = tx.input(1)
        if funding_box is None:
            return self._fail(FailureCode.MISSING, "funding box at INPUTS(1)", "none")

        if not box_guarded_by(self.constants.owner_condition, funding_box):
            return self._fail(FailureCode.UNAUTHORIZED, "INPUTS(1) guarded by the owner", "other owner")

        t = Transition(tx, self.constants, self.variant)
        current, successor = t.current, t.successor

        if not t.is_replica():
            return self._fail(FailureCode.NOT_REPLICATED, "successor replicates SELF", "replication broken")

        changed = t.changed_fields("sold", "refunded", "exchanged", "value", "participation")
        if changed:
            return self._fail_changed(changed)

        added = delta_proof_of_funding(current, successor)
        if added <= 0:
            return self._fail(FailureCode.NOT_INCREASING, "proof-of-funding delta > 0", f"delta {added}")

        return self._pass()


class ExchangeFundingTokensGate(Gate):
    """
    After the minimum is sold, holders swap participation units for
    proof-of-funding tokens one for one. One direction only.
    """

    def _evaluate(self, tx: TransactionContext) -> GateEvaluation:
        t = Transition(tx, self.constants, self.variant)
        current = t.current

        if not t.minimum_reached:
            return self._fail(
                FailureCode.NOT_ALLOWED,
                f"sold >= {current.minimum_threshold}",
                f"sold {current.sold}"
            )

        successor = t.successor
        changed = t.changed_fields("sold", "refunded", "value")
        if changed:
            return self._fail_changed(changed)

        units_in = -delta_participation(current, successor)
        tokens_out = -delta_proof_of_funding(current, successor)
        if units_in != tokens_out:
            return self._fail(
                FailureCode.MISMATCH,
                f"{units_in} proof-of-funding tokens out",
                f"{tokens_out} tokens out"
            )
        if units_in <= 0:
            return self._fail(FailureCode.NOT_INCREASING, "participation units in > 0", f"{units_in} units in")

        increment = successor.exchanged - current.exchanged
        if increment != units_in:
            return self._fail(FailureCode.MISMATCH, f"exchanged += {units_in}", f"exchanged += {increment}")

        terminated = current.value == successor.value and not current.has_proof_of_funding
        if not (t.is_replica() or terminated):
            return self._fail(FailureCode.NOT_REPLICATED, "successor replicates SELF", "replication broken")

        return self._pass()


ACTION_GATES: Dict[str, Type[Gate]] = {
    "buy_tokens": BuyTokensGate,
    "refund_tokens": RefundTokensGate,
    "withdraw_funds": WithdrawFundsGate,
    "withdraw_unsold_tokens": WithdrawUnsoldTokensGate,
    "add_tokens": AddTokensGate,
    "exchange_funding_tokens": ExchangeFundingTokensGate,
}


def create_action_gate(action_id: str, constants: CampaignConstants, variant: ContractVariant) -> Gate:
    """Factory function to create an action gate instance."""
    if action_id not in ACTION_GATES:
        raise ConfigurationError(f"Unknown action: {action_id}")

    return ACTION_GATES[action_id](action_id, constants, variant)
