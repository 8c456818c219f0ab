"""
Wheel Session Controller

Owns one player's engine context (ledger, per-ring rotation, round state,
scheduler, random source) and drives the bonus cascade by applying the
effects returned from cascade.transition().
"""

import logging
import random
import threading
from dataclasses import dataclass

from wheel_be.exceptions import BetsLockedException, GameLogicException
from wheel_be.utils.audit_logger import AuditLogger
from wheel_be.utils.geometry import choose_spin, resolve_index
from wheel_be.utils.ledger import BettingLedger, DEFAULT_STARTING_BALANCE
from wheel_be.utils.rings import Ring, RINGS, get_ring
from .cascade import (
    RoundState, transition,
    SpinRequested, RingResolved, CascadeDue, ResetDue,
    StartSpin, Credit, ForfeitBets, ScheduleCascade, ScheduleReset,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpinDelays:
    """Presentation delays in seconds."""
    spin: float = 4.5      # wheel turning, before the landed wedge is resolved
    cascade: float = 1.2   # settled bonus wedge -> next ring starts
    settle: float = 3.0    # terminal settlement -> back to idle


class WheelSession:
    def __init__(self, session_id, scheduler, starting_balance=DEFAULT_STARTING_BALANCE,
                 delays=None, rng=None, listener=None):
        self.session_id = session_id
        self.scheduler = scheduler
        self.delays = delays or SpinDelays()
        self.rng = rng or random.Random()
        self.listener = listener
        self.ledger = BettingLedger(starting_balance)
        self.rotations = {ring: 0 for ring in RINGS}
        self.state = RoundState()
        self.closed = False
        self._lock = threading.RLock()

    # --- Inbound operations ---

    def place_bet(self, label, amount):
        with self._lock:
            self._ensure_bets_unlocked()
            balance_before = self.ledger.balance
            self.ledger.place_bet(label, amount)
            AuditLogger.log_financial_event(
                'bet_placed', self.session_id, amount=amount,
                balance_before=balance_before, balance_after=self.ledger.balance,
                details={'label': label, 'label_total': self.ledger.bets[label]},
            )
            self._notify('bets_updated')
            return self.snapshot()

    def clear_bets(self):
        with self._lock:
            self._ensure_bets_unlocked()
            balance_before = self.ledger.balance
            refunded = self.ledger.clear_bets()
            if refunded:
                AuditLogger.log_financial_event(
                    'bets_cleared', self.session_id, amount=refunded,
                    balance_before=balance_before, balance_after=self.ledger.balance,
                )
            self._notify('bets_updated')
            return self.snapshot()

    def spin(self):
        """Start a round on the outer ring. Raises SpinRejectedException when not allowed."""
        with self._lock:
            self._dispatch(SpinRequested(bets=dict(self.ledger.bets)))
            return self.snapshot()

    def total_staked(self):
        return self.ledger.total_staked()

    def is_spinning(self, ring=None):
        return self.state.is_spinning(ring)

    def close(self):
        """Detach a discarded session. Callbacks still queued on its scheduler become no-ops."""
        with self._lock:
            self.closed = True

    # --- Scheduled callbacks ---

    def _resolve(self, round_id, ring):
        with self._lock:
            if self.closed:
                return
            index = resolve_index(self.rotations[ring], get_ring(ring).length)
            self._dispatch(RingResolved(round_id=round_id, ring=ring, index=index))

    def _start_cascade(self, round_id, ring):
        with self._lock:
            if self.closed:
                return
            self._dispatch(CascadeDue(round_id=round_id, ring=ring))

    def _reset(self, round_id):
        with self._lock:
            if self.closed:
                return
            before = self.state
            self._dispatch(ResetDue(round_id=round_id))
            if self.state is not before:
                AuditLogger.log_game_event('round_reset', self.session_id, round_id=round_id)
                self._notify('round_reset')

    # --- State machine plumbing ---

    def _dispatch(self, event):
        new_state, effects = transition(self.state, event)
        self.state = new_state
        for effect in effects:
            self._apply(effect)
        if isinstance(event, RingResolved):
            result = self.state.results[-1]
            AuditLogger.log_game_event(
                'ring_resolved', self.session_id, round_id=event.round_id,
                ring=result.ring.value, label=result.label, win_amount=result.winnings,
                details={'index': event.index},
            )
            self._notify('ring_resolved', ring=result.ring.value)

    def _apply(self, effect):
        if isinstance(effect, StartSpin):
            ring = Ring(effect.ring)
            target_index, rotation_delta = choose_spin(get_ring(ring), self.rotations[ring], self.rng)
            self.rotations[ring] += rotation_delta
            logger.debug(f"Session {self.session_id} round {effect.round_id}: {ring.value} ring spinning to wedge {target_index}")
            AuditLogger.log_game_event(
                'spin_started', self.session_id, round_id=effect.round_id, ring=ring.value,
                details={'rotation': self.rotations[ring], 'staked': sum(self.state.staked_bets.values())},
            )
            self.scheduler.call_later(self.delays.spin, self._resolve, effect.round_id, ring)
            self._notify('spin_started', ring=ring.value)
        elif isinstance(effect, Credit):
            balance_before = self.ledger.balance
            self.ledger.credit(effect.amount)
            AuditLogger.log_financial_event(
                'payout_credited', self.session_id, amount=effect.amount,
                balance_before=balance_before, balance_after=self.ledger.balance,
                details={'ring': Ring(effect.ring).value, 'round_id': self.state.round_id},
            )
        elif isinstance(effect, ForfeitBets):
            self.ledger.forfeit_bets()
        elif isinstance(effect, ScheduleCascade):
            self.scheduler.call_later(self.delays.cascade, self._start_cascade, effect.round_id, Ring(effect.ring))
        elif isinstance(effect, ScheduleReset):
            self.scheduler.call_later(self.delays.settle, self._reset, effect.round_id)
        else:
            raise GameLogicException(status_message=f"Unknown round effect {type(effect).__name__}", status_code=500)

    def _ensure_bets_unlocked(self):
        # Wagers on the table are consumed when the outer spin resolves.
        if self.state.is_spinning(Ring.OUTER):
            raise BetsLockedException()

    def _notify(self, event_type, **extra):
        if self.listener is None or self.closed:
            return
        try:
            self.listener(self.session_id, event_type, self.snapshot(), **extra)
        except Exception as e:
            logger.error(f"Wheel event listener failed for session {self.session_id} ({event_type}): {e}", exc_info=True)

    # --- Observables ---

    def snapshot(self):
        with self._lock:
            state = self.state
            return {
                'session_id': self.session_id,
                'round_id': state.round_id,
                'phase': state.phase.value,
                'balance': self.ledger.balance,
                'bets': dict(self.ledger.bets),
                'total_staked': self.ledger.total_staked(),
                'active_bonus_bet': state.active_bonus_bet,
                'rotations': {ring.value: self.rotations[ring] for ring in RINGS},
                'spinning': {ring.value: state.is_spinning(ring) for ring in RINGS},
                'winning_indices': {ring.value: state.winning_indices.get(ring) for ring in RINGS},
                'spin_results': [result.to_dict() for result in state.results],
            }
