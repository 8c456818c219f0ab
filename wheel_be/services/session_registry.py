"""In-memory registry of independent wheel sessions."""

import logging
import threading
import uuid

from wheel_be.exceptions import NotFoundException, SessionLimitException
from wheel_be.error_codes import ErrorCodes
from wheel_be.utils.ledger import DEFAULT_STARTING_BALANCE
from .scheduler import ManualScheduler
from .wheel_session import WheelSession, SpinDelays

logger = logging.getLogger(__name__)


class SessionRegistry:
    def __init__(self, scheduler_factory=None, starting_balance=DEFAULT_STARTING_BALANCE,
                 delays=None, max_sessions=1000, listener=None, rng_factory=None):
        self.scheduler_factory = scheduler_factory or ManualScheduler
        self.starting_balance = starting_balance
        self.delays = delays or SpinDelays()
        self.max_sessions = max_sessions
        self.listener = listener
        self.rng_factory = rng_factory
        self._sessions = {}
        self._lock = threading.Lock()

    def create(self):
        with self._lock:
            if len(self._sessions) >= self.max_sessions:
                logger.warning(f"Session limit of {self.max_sessions} reached; refusing new wheel session")
                raise SessionLimitException(details={'max_sessions': self.max_sessions})
            session_id = uuid.uuid4().hex
            session = WheelSession(
                session_id,
                scheduler=self.scheduler_factory(),
                starting_balance=self.starting_balance,
                delays=self.delays,
                rng=self.rng_factory() if self.rng_factory else None,
                listener=self.listener,
            )
            self._sessions[session_id] = session
        logger.info(f"Created wheel session {session_id} with balance {self.starting_balance}")
        return session

    def get(self, session_id):
        session = self._sessions.get(session_id)
        if session is None:
            raise NotFoundException(
                status_message="Wheel session not found.",
                details={'session_id': session_id},
                error_code=ErrorCodes.SESSION_NOT_FOUND,
            )
        return session

    def discard(self, session_id):
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is None:
            raise NotFoundException(
                status_message="Wheel session not found.",
                details={'session_id': session_id},
                error_code=ErrorCodes.SESSION_NOT_FOUND,
            )
        session.close()
        logger.info(f"Discarded wheel session {session_id}")
        return session

    def __len__(self):
        return len(self._sessions)

    def __contains__(self, session_id):
        return session_id in self._sessions
