import random
import unittest

from wheel_be.utils.ledger import BettingLedger, BET_LABELS, NUMERIC_BET_LABELS, empty_bets
from wheel_be.exceptions import ValidationException, InsufficientFundsException
from wheel_be.error_codes import ErrorCodes


class TestBettingLedger(unittest.TestCase):

    def setUp(self):
        self.ledger = BettingLedger(2000)

    def test_starts_with_every_label_at_zero(self):
        self.assertEqual(self.ledger.bets, empty_bets())
        self.assertEqual(set(self.ledger.bets), set(BET_LABELS))
        self.assertEqual(self.ledger.total_staked(), 0)
        self.assertEqual(self.ledger.balance, 2000)

    def test_place_bet_debits_balance_and_accumulates(self):
        self.assertEqual(self.ledger.place_bet("5", 10), 10)
        self.assertEqual(self.ledger.place_bet("5", 25), 35)
        self.assertEqual(self.ledger.bets["5"], 35)
        self.assertEqual(self.ledger.balance, 1965)
        self.assertEqual(self.ledger.total_staked(), 35)

    def test_insufficient_balance_leaves_ledger_untouched(self):
        ledger = BettingLedger(100)
        with self.assertRaises(InsufficientFundsException) as ctx:
            ledger.place_bet("2", 150)
        self.assertEqual(ctx.exception.status_message, "Insufficient balance!")
        self.assertEqual(ctx.exception.status_code, 400)
        self.assertEqual(ctx.exception.details['balance'], 100)
        self.assertEqual(ledger.balance, 100)
        self.assertEqual(ledger.bets["2"], 0)

    def test_whole_balance_can_be_staked(self):
        ledger = BettingLedger(25)
        ledger.place_bet("Logo2", 25)
        self.assertEqual(ledger.balance, 0)
        with self.assertRaises(InsufficientFundsException):
            ledger.place_bet("1", 5)

    def test_unknown_label_rejected(self):
        with self.assertRaises(ValidationException) as ctx:
            self.ledger.place_bet("7", 5)
        self.assertEqual(ctx.exception.error_code, ErrorCodes.INVALID_BET)
        self.assertEqual(self.ledger.balance, 2000)

    def test_non_positive_or_non_integer_amount_rejected(self):
        for amount in (0, -5, 2.5, "10", True, None):
            with self.subTest(amount=amount):
                with self.assertRaises(ValidationException) as ctx:
                    self.ledger.place_bet("1", amount)
                self.assertEqual(ctx.exception.error_code, ErrorCodes.INVALID_AMOUNT)
        self.assertEqual(self.ledger.balance, 2000)
        self.assertEqual(self.ledger.total_staked(), 0)

    def test_clear_bets_refunds_everything(self):
        self.ledger.place_bet("1", 10)
        self.ledger.place_bet("BONUS", 25)
        self.assertEqual(self.ledger.clear_bets(), 35)
        self.assertEqual(self.ledger.balance, 2000)
        self.assertEqual(self.ledger.bets, empty_bets())

    def test_clear_bets_with_nothing_staked_is_a_no_op(self):
        self.assertEqual(self.ledger.clear_bets(), 0)
        self.assertEqual(self.ledger.balance, 2000)

    def test_forfeit_bets_drops_wagers_without_refund(self):
        self.ledger.place_bet("10", 50)
        self.assertEqual(self.ledger.forfeit_bets(), 50)
        self.assertEqual(self.ledger.balance, 1950)
        self.assertEqual(self.ledger.total_staked(), 0)

    def test_credit(self):
        self.assertEqual(self.ledger.credit(220), 2220)
        self.assertEqual(self.ledger.credit(0), 2220)
        with self.assertRaises(ValueError):
            self.ledger.credit(-1)

    def test_negative_starting_balance_rejected(self):
        with self.assertRaises(ValueError):
            BettingLedger(-10)

    def test_snapshot_is_a_copy(self):
        self.ledger.place_bet("2", 5)
        snap = self.ledger.snapshot()
        snap['bets']["2"] = 999
        self.assertEqual(self.ledger.bets["2"], 5)
        self.assertEqual(snap['balance'], 1995)


def test_balance_plus_stakes_conserved_across_bets_and_clears():
    rng = random.Random(7)
    ledger = BettingLedger(500)
    for _ in range(300):
        total_before = ledger.balance + ledger.total_staked()
        if rng.random() < 0.2:
            ledger.clear_bets()
        else:
            label = rng.choice(BET_LABELS)
            amount = rng.choice((5, 10, 25, 400))
            try:
                ledger.place_bet(label, amount)
            except InsufficientFundsException:
                pass
        assert ledger.balance + ledger.total_staked() == total_before
        assert ledger.balance >= 0


def test_numeric_labels_are_a_prefix_of_bet_labels():
    assert BET_LABELS[:len(NUMERIC_BET_LABELS)] == NUMERIC_BET_LABELS
    assert BET_LABELS[len(NUMERIC_BET_LABELS):] == ("Logo1", "Logo2", "BONUS")


if __name__ == '__main__':
    unittest.main()
