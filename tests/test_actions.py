"""
Action gate tests.

Each action is exercised both through its own gate (to pin the failure code)
and through the validator (to pin the final decision).
"""

import unittest

from bene import (
    Box,
    CampaignValidator,
    FailureCode,
    Token,
    create_action_gate,
    resolve_variant,
)
from bene.constants import ConfigurationError

from tests.helpers import (
    BLOCK_LIMIT,
    CAMPAIGN_SCRIPT,
    DEV_FEE_SCRIPT,
    OWNER_CONDITION,
    STRANGER_CONDITION,
    buy_transaction,
    campaign_box,
    dev_fee_box,
    evolve,
    exchange_transaction,
    make_constants,
    payout_box,
    refund_transaction,
    transaction,
    withdraw_transaction,
)


def gate(action_id, version="v1_2", designated=False):
    return create_action_gate(action_id, make_constants(designated), resolve_variant(version))


def validator(version="v1_2", **kwargs):
    return CampaignValidator(make_constants(**kwargs), version)


class TestBuyTokens(unittest.TestCase):

    def test_buy_ten_units_at_rate_1000(self):
        tx = buy_transaction(units=10)
        self.assertEqual(tx.output(0).value - tx.self_box.value, 10_000)
        self.assertTrue(gate("buy_tokens").evaluate(tx).passed())

        result = validator().evaluate(tx)
        self.assertTrue(result.accepted())
        self.assertEqual(result.matched_actions, ["buy_tokens"])

    def test_underpayment_rejected(self):
        tx = buy_transaction(units=10)
        cheap = Box(
            value=tx.output(0).value - 1,
            script=tx.output(0).script,
            tokens=tx.output(0).tokens,
            registers=tx.output(0).registers,
        )
        tx = transaction(tx.self_box, [cheap])
        evaluation = gate("buy_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.MISMATCH)
        self.assertFalse(validator().validate(tx))

    def test_cannot_exceed_available(self):
        tx = buy_transaction(units=11, proof_of_funding=100, sold=90, participation=100)
        evaluation = gate("buy_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.EXCEEDED)

    def test_sold_counter_must_track_units(self):
        current = campaign_box()
        successor = evolve(current, value=current.value + 10_000, participation=90, sold=9)
        evaluation = gate("buy_tokens").evaluate(transaction(current, [successor]))
        self.assertEqual(evaluation.failure_code, FailureCode.MISMATCH)

    def test_zero_units_rejected(self):
        current = campaign_box()
        evaluation = gate("buy_tokens").evaluate(transaction(current, [current]))
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_INCREASING)

    def test_selling_back_is_not_a_buy(self):
        current = campaign_box(sold=10, participation=90)
        successor = evolve(current, value=current.value - 5_000, participation=95, sold=5)
        self.assertFalse(gate("buy_tokens").evaluate(transaction(current, [successor])).passed())

    def test_refund_counter_must_not_move(self):
        current = campaign_box()
        successor = evolve(current, value=current.value + 10_000, participation=90, sold=10, refunded=1)
        evaluation = gate("buy_tokens").evaluate(transaction(current, [successor]))
        self.assertEqual(evaluation.failure_code, FailureCode.CHANGED)

    def test_replication_required(self):
        tx = buy_transaction()
        moved = evolve(tx.output(0), script=bytes([0x19, 0x02]) + b"xx")
        evaluation = gate("buy_tokens").evaluate(transaction(tx.self_box, [moved]))
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_REPLICATED)

    def test_buy_after_block_limit_allowed(self):
        current = campaign_box()
        successor = evolve(current, value=current.value + 1_000, participation=99, sold=1)
        tx = transaction(current, [successor], height=BLOCK_LIMIT + 500)
        self.assertTrue(validator().validate(tx))

    def test_missing_successor_fails_without_raising(self):
        tx = transaction(campaign_box(), [])
        evaluation = gate("buy_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.MISSING)


class TestRefundTokens(unittest.TestCase):

    def test_refund_after_block_limit(self):
        tx = refund_transaction(units=5)
        self.assertTrue(gate("refund_tokens").evaluate(tx).passed())
        self.assertEqual(validator().evaluate(tx).matched_actions, ["refund_tokens"])

    def test_refund_at_block_limit_rejected(self):
        tx = refund_transaction(height=BLOCK_LIMIT)
        evaluation = gate("refund_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_ALLOWED)
        self.assertFalse(validator().validate(tx))

    def test_refund_after_minimum_reached_rejected(self):
        tx = refund_transaction(sold=50, participation=50)
        evaluation = gate("refund_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_ALLOWED)

    def test_refund_amount_must_match_rate(self):
        tx = refund_transaction(units=5)
        greedy = evolve(tx.output(0), value=tx.output(0).value - 1)
        evaluation = gate("refund_tokens").evaluate(transaction(tx.self_box, [greedy], height=tx.height))
        self.assertEqual(evaluation.failure_code, FailureCode.MISMATCH)

    def test_empty_refund_rejected(self):
        evaluation = gate("refund_tokens").evaluate(refund_transaction(units=0))
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_INCREASING)

    def test_negative_refund_rejected(self):
        # Units flow into the box and the refunded counter goes down
        tx = refund_transaction(units=-2, refunded=3)
        evaluation = gate("refund_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_INCREASING)
        self.assertFalse(validator().validate(tx))

    def test_refunded_counter_must_track_units(self):
        tx = refund_transaction(units=5)
        wrong = evolve(tx.output(0), refunded=4)
        evaluation = gate("refund_tokens").evaluate(transaction(tx.self_box, [wrong], height=tx.height))
        self.assertEqual(evaluation.failure_code, FailureCode.MISMATCH)


class TestWithdrawFunds(unittest.TestCase):

    def test_fee_split_example(self):
        tx = withdraw_transaction(extracted=100_000_000, fee_percent=5)
        self.assertEqual(tx.output(1).value, 93_900_000)
        self.assertEqual(tx.output(2).value, 5_000_000)
        self.assertTrue(gate("withdraw_funds").evaluate(tx).passed())
        self.assertEqual(validator().evaluate(tx).matched_actions, ["withdraw_funds"])

    def test_minimum_not_reached(self):
        tx = withdraw_transaction(sold=10, participation=90)
        evaluation = gate("withdraw_funds").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_ALLOWED)

    def test_owner_must_receive(self):
        tx = withdraw_transaction()
        stolen = payout_box(tx.output(1).value, STRANGER_CONDITION)
        tx = transaction(tx.self_box, [tx.output(0), stolen, tx.output(2)])
        evaluation = gate("withdraw_funds").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.UNAUTHORIZED)

    def test_owner_amount_must_be_exact(self):
        tx = withdraw_transaction()
        tx = transaction(tx.self_box, [tx.output(0), payout_box(tx.output(1).value + 1), tx.output(2)])
        self.assertEqual(gate("withdraw_funds").evaluate(tx).failure_code, FailureCode.MISMATCH)

    def test_dev_fee_box_required(self):
        tx = withdraw_transaction()
        tx = transaction(tx.self_box, [tx.output(0), tx.output(1)])
        self.assertEqual(gate("withdraw_funds").evaluate(tx).failure_code, FailureCode.MISSING)

    def test_dev_fee_script_must_hash_to_constant(self):
        tx = withdraw_transaction()
        tx = transaction(tx.self_box, [
            tx.output(0), tx.output(1), dev_fee_box(tx.output(2).value, DEV_FEE_SCRIPT + b"!")
        ])
        self.assertEqual(gate("withdraw_funds").evaluate(tx).failure_code, FailureCode.UNAUTHORIZED)

    def test_full_withdrawal_terminates_campaign(self):
        current = campaign_box(value=100_000_000, sold=60, participation=40, proof_of_funding=None)
        # Leftover box under another script still carries the identity token and registers
        leftover = evolve(current, value=0, script=OWNER_CONDITION)
        tx = transaction(current, [leftover, payout_box(93_900_000), dev_fee_box(5_000_000)])
        self.assertTrue(gate("withdraw_funds").evaluate(tx).passed())

    def test_full_withdrawal_with_proof_of_funding_left_rejected(self):
        current = campaign_box(value=100_000_000, sold=60, participation=40)
        leftover = evolve(current, value=0, script=OWNER_CONDITION)
        tx = transaction(current, [leftover, payout_box(93_900_000), dev_fee_box(5_000_000)])
        self.assertEqual(gate("withdraw_funds").evaluate(tx).failure_code, FailureCode.NOT_REPLICATED)

    def test_designated_asset_skips_fee_checks(self):
        current = campaign_box(sold=60, participation=40, asset_id_length=32)
        tx = transaction(current, [current, payout_box(1)])
        self.assertTrue(gate("withdraw_funds", designated=True).evaluate(tx).passed())

    def test_native_campaign_on_v1_2_keeps_fee_checks(self):
        current = campaign_box(sold=60, participation=40, asset_id_length=0)
        tx = transaction(current, [current, payout_box(1)])
        self.assertFalse(gate("withdraw_funds", designated=True).evaluate(tx).passed())


class TestWithdrawUnsoldTokens(unittest.TestCase):

    def _tx(self, withdrawn, condition=OWNER_CONDITION, **box_kwargs):
        box_kwargs.setdefault("sold", 10)
        box_kwargs.setdefault("participation", 90)
        current = campaign_box(**box_kwargs)
        successor = evolve(current, proof_of_funding=current.tokens[1].amount - withdrawn)
        return transaction(current, [successor, payout_box(0, condition)])

    def test_owner_withdraws_unsold(self):
        tx = self._tx(40)
        self.assertTrue(gate("withdraw_unsold_tokens").evaluate(tx).passed())
        self.assertEqual(validator().evaluate(tx).matched_actions, ["withdraw_unsold_tokens"])

    def test_all_available_may_leave(self):
        self.assertTrue(gate("withdraw_unsold_tokens").evaluate(self._tx(90)).passed())

    def test_sold_tokens_stay(self):
        evaluation = gate("withdraw_unsold_tokens").evaluate(self._tx(91))
        self.assertEqual(evaluation.failure_code, FailureCode.EXCEEDED)

    def test_stranger_cannot_withdraw(self):
        evaluation = gate("withdraw_unsold_tokens").evaluate(self._tx(10, STRANGER_CONDITION))
        self.assertEqual(evaluation.failure_code, FailureCode.UNAUTHORIZED)

    def test_must_remove_tokens(self):
        evaluation = gate("withdraw_unsold_tokens").evaluate(self._tx(0))
        self.assertEqual(evaluation.failure_code, FailureCode.MISMATCH)


class TestAddTokens(unittest.TestCase):

    def _tx(self, added=50, funding_condition=OWNER_CONDITION, with_funding_input=True):
        current = campaign_box()
        successor = evolve(current, proof_of_funding=current.tokens[1].amount + added)
        extra = [payout_box(1_000_000, funding_condition)] if with_funding_input else None
        return transaction(current, [successor], extra_inputs=extra)

    def test_owner_adds_tokens(self):
        tx = self._tx()
        self.assertTrue(gate("add_tokens").evaluate(tx).passed())
        self.assertEqual(validator().evaluate(tx).matched_actions, ["add_tokens"])

    def test_single_input_rejected_first(self):
        evaluation = gate("add_tokens").evaluate(self._tx(with_funding_input=False))
        self.assertEqual(evaluation.failure_code, FailureCode.MISSING)

    def test_stranger_funding_rejected(self):
        evaluation = gate("add_tokens").evaluate(self._tx(funding_condition=STRANGER_CONDITION))
        self.assertEqual(evaluation.failure_code, FailureCode.UNAUTHORIZED)

    def test_must_add_tokens(self):
        evaluation = gate("add_tokens").evaluate(self._tx(added=0))
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_INCREASING)


class TestExchangeFundingTokens(unittest.TestCase):

    def test_exchange_after_minimum(self):
        tx = exchange_transaction(units=10)
        self.assertTrue(gate("exchange_funding_tokens").evaluate(tx).passed())
        self.assertEqual(validator().evaluate(tx).matched_actions, ["exchange_funding_tokens"])

    def test_exchange_before_minimum_rejected(self):
        tx = exchange_transaction(sold=49, participation=51)
        evaluation = gate("exchange_funding_tokens").evaluate(tx)
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_ALLOWED)

    def test_one_for_one(self):
        tx = exchange_transaction(units=10)
        skewed = evolve(tx.output(0), proof_of_funding=tx.output(0).tokens[1].amount - 1)
        evaluation = gate("exchange_funding_tokens").evaluate(transaction(tx.self_box, [skewed]))
        self.assertEqual(evaluation.failure_code, FailureCode.MISMATCH)

    def test_reverse_direction_rejected(self):
        current = campaign_box(sold=60, participation=40)
        successor = evolve(current, participation=30, proof_of_funding=110, exchanged=-10)
        evaluation = gate("exchange_funding_tokens").evaluate(transaction(current, [successor]))
        self.assertEqual(evaluation.failure_code, FailureCode.NOT_INCREASING)

    def test_value_must_not_move(self):
        tx = exchange_transaction(units=10)
        drained = evolve(tx.output(0), value=0)
        evaluation = gate("exchange_funding_tokens").evaluate(transaction(tx.self_box, [drained]))
        self.assertEqual(evaluation.failure_code, FailureCode.CHANGED)


class TestActionFactory(unittest.TestCase):

    def test_unknown_action(self):
        with self.assertRaises(ConfigurationError):
            gate("burn_tokens")

    def test_layout_mismatch_fails_closed(self):
        # single-rate box evaluated by the v1_2 rules
        tx = buy_transaction(asset_id_length=None)
        self.assertEqual(gate("buy_tokens").evaluate(tx).failure_code, FailureCode.MISSING)
        self.assertTrue(gate("buy_tokens", version="v1_1").evaluate(tx).passed())

    def test_self_without_registers_fails_closed(self):
        box = Box(value=1, script=CAMPAIGN_SCRIPT, tokens=[Token(bytes(32), 1)])
        tx = transaction(box, [box])
        for action_id in resolve_variant("v1_2").actions:
            self.assertFalse(gate(action_id).evaluate(tx).passed(), action_id)


if __name__ == "__main__":
    unittest.main(verbosity=2)
