"""
WebSocket Manager for real-time wheel updates
Pushes session snapshots to the renderer watching a wheel session
"""

from flask_socketio import emit, join_room, leave_room
from flask import request
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)


def wheel_room(session_id):
    return f'wheel_{session_id}'


def _session_id_from(data):
    """The session id from a join/leave payload, or None when the payload is not a dict with a string id."""
    if not isinstance(data, dict):
        return None
    session_id = data.get('session_id')
    return session_id if isinstance(session_id, str) and session_id else None


class WebSocketManager:
    def __init__(self, app=None, socketio=None, registry=None):
        self.socketio = socketio
        self.registry = registry
        self.connected_clients = {}  # socket_id -> set of rooms

        if app and socketio:
            self.init_app(app)

    def init_app(self, app):
        """Initialize WebSocket handlers"""
        self.socketio.on_event('connect', self.handle_connect)
        self.socketio.on_event('disconnect', self.handle_disconnect)
        self.socketio.on_event('join_wheel', self.handle_join_wheel)
        self.socketio.on_event('leave_wheel', self.handle_leave_wheel)

    def handle_connect(self, auth=None):
        socket_id = request.sid
        self.connected_clients[socket_id] = set()
        logger.info(f"Client connected via WebSocket (socket: {socket_id})")
        emit('connection_status', {'status': 'connected'})
        return True

    def handle_disconnect(self, *args):
        socket_id = request.sid
        rooms = self.connected_clients.pop(socket_id, set())
        logger.info(f"Client {socket_id} disconnected from WebSocket (rooms: {sorted(rooms)})")

    def handle_join_wheel(self, data):
        """Subscribe to one wheel session's updates; replies with the current snapshot."""
        session_id = _session_id_from(data)
        if not session_id:
            emit('error', {'message': 'session_id is required'})
            return

        if self.registry is None or session_id not in self.registry:
            emit('error', {'message': 'Wheel session not found', 'session_id': session_id})
            return

        room_name = wheel_room(session_id)
        join_room(room_name)
        self.connected_clients.setdefault(request.sid, set()).add(room_name)

        logger.info(f"Socket {request.sid} joined room: {room_name}")
        emit('room_joined', {'room': room_name, 'success': True,
                             'state': self.registry.get(session_id).snapshot()})

    def handle_leave_wheel(self, data=None):
        session_id = _session_id_from(data)
        if not session_id:
            emit('error', {'message': 'session_id is required'})
            return

        room_name = wheel_room(session_id)
        leave_room(room_name)
        self.connected_clients.get(request.sid, set()).discard(room_name)
        logger.info(f"Socket {request.sid} left room: {room_name}")
        emit('room_left', {'room': room_name})

    # Event Broadcasting

    def broadcast_wheel_update(self, session_id, event_type, state, **extra):
        """Broadcast a wheel session transition to everyone watching that session"""
        if not self.socketio:
            return

        payload = {
            'type': 'wheel_update',
            'session_id': session_id,
            'event': event_type,
            'state': state,
            'timestamp': datetime.now(timezone.utc).isoformat()
        }
        payload.update(extra)
        self.socketio.emit('wheel_update', payload, room=wheel_room(session_id))
        logger.debug(f"Broadcasted wheel {event_type} for session {session_id}")

    def get_connected_clients_count(self):
        return len(self.connected_clients)


