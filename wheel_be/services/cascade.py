"""
Bonus Cascade State Machine

Pure transition function for one game round:

    Idle -> SpinningOuter -> SettledOuter -> [SpinningMiddle -> SettledMiddle
         -> [SpinningInner -> SettledInner]] -> Idle

transition(state, event) returns the next state and a list of effects. It
never touches the ledger, the clock or the random source; the session
controller applies the effects and feeds scheduled callbacks back in as events.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional

from wheel_be.exceptions import SpinRejectedException, GameLogicException
from wheel_be.utils.rings import Ring, get_ring, next_ring
from wheel_be.utils.payout import settle_outer, settle_bonus_ring


class RoundPhase(str, Enum):
    IDLE = "Idle"
    SPINNING_OUTER = "SpinningOuter"
    SETTLED_OUTER = "SettledOuter"
    SPINNING_MIDDLE = "SpinningMiddle"
    SETTLED_MIDDLE = "SettledMiddle"
    SPINNING_INNER = "SpinningInner"
    SETTLED_INNER = "SettledInner"


SPINNING_PHASES = {
    Ring.OUTER: RoundPhase.SPINNING_OUTER,
    Ring.MIDDLE: RoundPhase.SPINNING_MIDDLE,
    Ring.INNER: RoundPhase.SPINNING_INNER,
}

SETTLED_PHASES = {
    Ring.OUTER: RoundPhase.SETTLED_OUTER,
    Ring.MIDDLE: RoundPhase.SETTLED_MIDDLE,
    Ring.INNER: RoundPhase.SETTLED_INNER,
}


@dataclass(frozen=True)
class RoundResult:
    ring: Ring
    label: str
    winnings: int

    def to_dict(self) -> dict:
        return {'ring': self.ring.value, 'label': self.label, 'winnings': self.winnings}


@dataclass(frozen=True)
class RoundState:
    round_id: int = 0
    phase: RoundPhase = RoundPhase.IDLE
    staked_bets: dict = field(default_factory=dict)
    active_bonus_bet: int = 0
    next_ring: Optional[Ring] = None  # cascade stage waiting on its delay
    winning_indices: dict = field(default_factory=dict)
    results: tuple = ()

    def spinning_ring(self) -> Optional[Ring]:
        for ring, phase in SPINNING_PHASES.items():
            if self.phase == phase:
                return ring
        return None

    def is_spinning(self, ring=None) -> bool:
        if ring is None:
            return self.spinning_ring() is not None
        return self.phase == SPINNING_PHASES[Ring(ring)]

    @property
    def in_flight(self) -> bool:
        """True while a ring spins or the next cascade stage is pending."""
        return self.is_spinning() or self.next_ring is not None


# --- Events ---

@dataclass(frozen=True)
class SpinRequested:
    bets: dict


@dataclass(frozen=True)
class RingResolved:
    round_id: int
    ring: Ring
    index: int


@dataclass(frozen=True)
class CascadeDue:
    round_id: int
    ring: Ring


@dataclass(frozen=True)
class ResetDue:
    round_id: int


# --- Effects ---

@dataclass(frozen=True)
class StartSpin:
    round_id: int
    ring: Ring


@dataclass(frozen=True)
class Credit:
    ring: Ring
    amount: int


@dataclass(frozen=True)
class ForfeitBets:
    pass


@dataclass(frozen=True)
class ScheduleCascade:
    round_id: int
    ring: Ring


@dataclass(frozen=True)
class ScheduleReset:
    round_id: int


def transition(state: RoundState, event):
    """Apply one event. Returns (new_state, effects)."""
    if isinstance(event, SpinRequested):
        return _on_spin_requested(state, event)
    if isinstance(event, RingResolved):
        return _on_ring_resolved(state, event)
    if isinstance(event, CascadeDue):
        return _on_cascade_due(state, event)
    if isinstance(event, ResetDue):
        return _on_reset_due(state, event)
    raise GameLogicException(status_message=f"Unknown round event {type(event).__name__}", status_code=500)


def _on_spin_requested(state, event):
    total_staked = sum(event.bets.values())
    if not total_staked:
        raise SpinRejectedException(status_message="Place a bet first!")
    if state.in_flight:
        raise SpinRejectedException(
            status_message="A round is already in progress.",
            details={'phase': state.phase.value},
        )

    new_state = RoundState(
        round_id=state.round_id + 1,
        phase=RoundPhase.SPINNING_OUTER,
        staked_bets=dict(event.bets),
    )
    return new_state, [StartSpin(round_id=new_state.round_id, ring=Ring.OUTER)]


def _on_ring_resolved(state, event):
    ring = Ring(event.ring)
    if event.round_id != state.round_id or not state.is_spinning(ring):
        raise GameLogicException(
            status_message=f"{ring.value} ring resolved while not spinning.",
            details={'round_id': event.round_id, 'current_round_id': state.round_id, 'phase': state.phase.value},
            status_code=500,
        )

    label = get_ring(ring).label_at(event.index)
    winning_indices = dict(state.winning_indices)
    winning_indices[ring] = event.index
    effects = []

    if ring == Ring.OUTER:
        settlement = settle_outer(label, state.staked_bets)
        winnings = settlement.winnings
        active_bonus_bet = settlement.bonus_carry
        if winnings > 0:
            effects.append(Credit(ring=ring, amount=winnings))
        # Every wager leaves the table now, winners and losers alike.
        effects.append(ForfeitBets())
        cascade_to = Ring.MIDDLE if active_bonus_bet > 0 else None
    else:
        settlement = settle_bonus_ring(ring, label, state.active_bonus_bet)
        winnings = settlement.winnings
        active_bonus_bet = state.active_bonus_bet
        if winnings > 0:
            effects.append(Credit(ring=ring, amount=winnings))
        cascade_to = next_ring(ring) if settlement.continues else None

    if cascade_to is not None:
        effects.append(ScheduleCascade(round_id=state.round_id, ring=cascade_to))
    else:
        effects.append(ScheduleReset(round_id=state.round_id))

    new_state = replace(
        state,
        phase=SETTLED_PHASES[ring],
        active_bonus_bet=active_bonus_bet,
        next_ring=cascade_to,
        winning_indices=winning_indices,
        results=state.results + (RoundResult(ring=ring, label=label, winnings=winnings),),
    )
    return new_state, effects


def _on_cascade_due(state, event):
    if event.round_id != state.round_id or state.next_ring != Ring(event.ring):
        return state, []
    ring = Ring(event.ring)
    new_state = replace(state, phase=SPINNING_PHASES[ring], next_ring=None)
    return new_state, [StartSpin(round_id=state.round_id, ring=ring)]


def _on_reset_due(state, event):
    # A reset scheduled by an earlier round is stale once a new spin has started.
    if event.round_id != state.round_id or state.in_flight:
        return state, []
    return RoundState(round_id=state.round_id), []
