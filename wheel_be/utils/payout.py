# wheel_be/utils/payout.py
import logging
from dataclasses import dataclass

from .ledger import NUMERIC_BET_LABELS
from .rings import Ring, BONUS_LABEL

logger = logging.getLogger(__name__)

# Logo wedges pay their multiplier plus the stake back.
LOGO_MULTIPLIERS = {
    "Logo1": 25,
    "Logo2": 50,
}


@dataclass(frozen=True)
class OuterSettlement:
    winnings: int
    bonus_carry: int  # stake taken into the middle ring, 0 when no cascade


@dataclass(frozen=True)
class BonusRingSettlement:
    winnings: int
    continues: bool  # True when the cascade moves on to the next ring


def parse_multiplier(label: str) -> int:
    """
    Numeric value of a wedge label. Labels are a closed set, so a label that
    does not parse is logged and treated as multiplier 0 rather than failing the round.
    """
    try:
        return int(label, 10)
    except (TypeError, ValueError):
        logger.warning(f"Unparseable wedge label '{label}', treating multiplier as 0.")
        return 0


def calculate_payout(stake: int, multiplier: int) -> int:
    """Total returned for a winning stake, including the stake itself."""
    return stake * (multiplier + 1)


def settle_outer(label: str, bets: dict) -> OuterSettlement:
    """
    Winnings for the outer ring against the wagers captured at spin time.

    BONUS pays every numeric wager at its own odds and carries the BONUS wager
    into the cascade; a numeric or logo wedge pays only its own label. All other
    wagers are lost.
    """
    if label == BONUS_LABEL:
        winnings = sum(calculate_payout(bets.get(n, 0), parse_multiplier(n)) for n in NUMERIC_BET_LABELS)
        return OuterSettlement(winnings=winnings, bonus_carry=bets.get(BONUS_LABEL, 0))

    if label in NUMERIC_BET_LABELS:
        return OuterSettlement(winnings=calculate_payout(bets.get(label, 0), parse_multiplier(label)), bonus_carry=0)

    if label in LOGO_MULTIPLIERS:
        return OuterSettlement(winnings=calculate_payout(bets.get(label, 0), LOGO_MULTIPLIERS[label]), bonus_carry=0)

    logger.warning(f"Outer ring landed on unknown label '{label}'; no wager pays.")
    return OuterSettlement(winnings=0, bonus_carry=0)


def settle_bonus_ring(ring, label: str, active_bonus_bet: int) -> BonusRingSettlement:
    """
    Winnings for the middle or inner ring, played only against the carried bonus stake.

    A middle-ring BONUS pays nothing and continues inward. The inner ring has no
    BONUS wedge, so it always terminates the cascade.
    """
    ring = Ring(ring)
    if ring == Ring.OUTER:
        raise ValueError("settle_bonus_ring only handles the middle and inner rings")

    if ring == Ring.MIDDLE and label == BONUS_LABEL:
        return BonusRingSettlement(winnings=0, continues=True)

    return BonusRingSettlement(winnings=calculate_payout(active_bonus_bet, parse_multiplier(label)), continues=False)
