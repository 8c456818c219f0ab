"""
Game and financial audit logging for wheel sessions.

Events are emitted as single JSON lines so they can be picked out of the
application log. Scheduled resolutions run outside any request, so request
information is optional.
"""

import json
import logging
from datetime import datetime, timezone

from flask import g, has_request_context, request

logger = logging.getLogger('wheel_be.audit')


def _request_info():
    if not has_request_context():
        return 'N/A', None
    return g.get('request_id', 'N/A'), request.remote_addr


class AuditLogger:
    """Centralized audit event logging"""

    @staticmethod
    def log_financial_event(event_type: str, session_id: str, amount: int = None,
                            balance_before: int = None, balance_after: int = None,
                            details: dict = None):
        """Log balance-changing events (bet placed, bets cleared, payout credited)."""
        request_id, ip_address = _request_info()

        event_data = {
            'event_type': 'financial',
            'sub_type': event_type,
            'session_id': session_id,
            'amount': amount,
            'balance_before': balance_before,
            'balance_after': balance_after,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }

        logger.info(f"FINANCIAL_EVENT: {json.dumps(event_data)}")

    @staticmethod
    def log_game_event(event_type: str, session_id: str, round_id: int = None,
                       ring: str = None, label: str = None, win_amount: int = None,
                       details: dict = None):
        """Log round progress (spin started, ring resolved, round reset)."""
        request_id, ip_address = _request_info()

        event_data = {
            'event_type': 'game',
            'sub_type': event_type,
            'game_type': 'wheel',
            'session_id': session_id,
            'round_id': round_id,
            'ring': ring,
            'label': label,
            'win_amount': win_amount,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'request_id': request_id,
            'ip_address': ip_address,
            'details': details or {}
        }

        logger.info(f"GAME_EVENT: {json.dumps(event_data)}")
