import unittest

import pytest

from wheel_be.utils.payout import (
    parse_multiplier,
    calculate_payout,
    settle_outer,
    settle_bonus_ring,
    LOGO_MULTIPLIERS,
)
from wheel_be.utils.ledger import empty_bets
from wheel_be.utils.rings import Ring


def bets(**amounts):
    placed = empty_bets()
    for key, value in amounts.items():
        placed[key.replace("n", "")] = value
    return placed


class TestOuterSettlement(unittest.TestCase):

    def test_numeric_wedge_pays_its_own_wager(self):
        settlement = settle_outer("1", bets(n1=10, n5=10))
        self.assertEqual(settlement.winnings, 20)
        self.assertEqual(settlement.bonus_carry, 0)

    def test_ten_pays_eleven_times_stake(self):
        self.assertEqual(settle_outer("10", bets(n10=5)).winnings, 55)

    def test_numeric_wedge_without_matching_wager_pays_nothing(self):
        settlement = settle_outer("2", bets(n1=10, BONUS=25))
        self.assertEqual(settlement.winnings, 0)
        self.assertEqual(settlement.bonus_carry, 0)

    def test_logo_wedges(self):
        placed = empty_bets()
        placed["Logo1"] = 5
        placed["Logo2"] = 10
        self.assertEqual(settle_outer("Logo1", placed).winnings, 5 * 26)
        self.assertEqual(settle_outer("Logo2", placed).winnings, 10 * 51)
        self.assertEqual(LOGO_MULTIPLIERS, {"Logo1": 25, "Logo2": 50})

    def test_bonus_fans_out_over_numeric_wagers_and_carries_bonus_stake(self):
        placed = bets(n1=10, n2=10, n5=10, n10=10, BONUS=5)
        settlement = settle_outer("BONUS", placed)
        # 10*2 + 10*3 + 10*6 + 10*11
        self.assertEqual(settlement.winnings, 220)
        self.assertEqual(settlement.bonus_carry, 5)

    def test_bonus_ignores_logo_wagers(self):
        placed = empty_bets()
        placed["Logo1"] = 100
        placed["BONUS"] = 5
        settlement = settle_outer("BONUS", placed)
        self.assertEqual(settlement.winnings, 0)
        self.assertEqual(settlement.bonus_carry, 5)

    def test_bonus_without_bonus_wager_does_not_carry(self):
        settlement = settle_outer("BONUS", bets(n2=10))
        self.assertEqual(settlement.winnings, 30)
        self.assertEqual(settlement.bonus_carry, 0)

    def test_unknown_outer_label_pays_nothing(self):
        with self.assertLogs('wheel_be.utils.payout', level='WARNING'):
            settlement = settle_outer("Jackpot", bets(n1=10))
        self.assertEqual(settlement.winnings, 0)
        self.assertEqual(settlement.bonus_carry, 0)


class TestBonusRingSettlement(unittest.TestCase):

    def test_middle_number_pays_carried_stake(self):
        settlement = settle_bonus_ring(Ring.MIDDLE, "60", 5)
        self.assertEqual(settlement.winnings, 305)
        self.assertFalse(settlement.continues)

    def test_middle_bonus_continues_without_paying(self):
        settlement = settle_bonus_ring(Ring.MIDDLE, "BONUS", 5)
        self.assertEqual(settlement.winnings, 0)
        self.assertTrue(settlement.continues)

    def test_inner_always_terminates(self):
        settlement = settle_bonus_ring(Ring.INNER, "250", 4)
        self.assertEqual(settlement.winnings, 1004)
        self.assertFalse(settlement.continues)

    def test_ring_names_accepted(self):
        self.assertEqual(settle_bonus_ring("Inner", "75", 2).winnings, 152)

    def test_outer_ring_not_handled(self):
        with self.assertRaises(ValueError):
            settle_bonus_ring(Ring.OUTER, "10", 5)

    def test_unparseable_label_returns_stake(self):
        with self.assertLogs('wheel_be.utils.payout', level='WARNING'):
            settlement = settle_bonus_ring(Ring.INNER, "???", 7)
        self.assertEqual(settlement.winnings, 7)
        self.assertFalse(settlement.continues)


@pytest.mark.parametrize("label,expected", [("1", 1), ("60", 60), ("250", 250), ("Logo1", 0), ("", 0), (None, 0)])
def test_parse_multiplier(label, expected):
    assert parse_multiplier(label) == expected


@pytest.mark.parametrize("stake,multiplier,expected", [(10, 1, 20), (0, 50, 0), (5, 0, 5), (3, 100, 303)])
def test_calculate_payout_includes_stake(stake, multiplier, expected):
    assert calculate_payout(stake, multiplier) == expected


if __name__ == '__main__':
    unittest.main()
