from dataclasses import asdict
from flask import Blueprint, request, jsonify, current_app
from http import HTTPStatus
from marshmallow import ValidationError

from ..schemas import PlaceBetSchema, WheelStateSchema, TableLayoutSchema # Relative import
from ..utils.ledger import BET_LABELS
from ..utils.rings import RINGS
from wheel_be.exceptions import ValidationException

wheel_bp = Blueprint('wheel', __name__, url_prefix='/api/wheel')


def _registry():
    return current_app.wheel_sessions


def _state_response(session, status_code=HTTPStatus.OK):
    return jsonify({
        'status': True,
        'state': WheelStateSchema().dump(session.snapshot())
    }), status_code


@wheel_bp.route('/layout', methods=['GET'])
def wheel_layout():
    """Ring layouts for the renderer, plus the bet labels and chip sizes for the bet panel."""
    layout = {
        'rings': [{
            'name': definition.ring.value,
            'wedge_angle': definition.wedge_angle,
            'wedges': [asdict(wedge) for wedge in definition.wedges()],
        } for definition in RINGS.values()],
        'bet_labels': list(BET_LABELS),
        'chip_values': list(current_app.config['WHEEL_CHIP_VALUES']),
    }
    return jsonify({'status': True, 'layout': TableLayoutSchema().dump(layout)}), HTTPStatus.OK


@wheel_bp.route('/sessions', methods=['POST'])
def create_session():
    session = _registry().create()
    current_app.logger.info(f"Wheel session {session.session_id} opened")
    return _state_response(session, HTTPStatus.CREATED)


@wheel_bp.route('/sessions/<session_id>', methods=['GET'])
def get_session(session_id):
    return _state_response(_registry().get(session_id))


@wheel_bp.route('/sessions/<session_id>', methods=['DELETE'])
def delete_session(session_id):
    _registry().discard(session_id)
    return '', HTTPStatus.NO_CONTENT


@wheel_bp.route('/sessions/<session_id>/bets', methods=['POST'])
def place_bet(session_id):
    session = _registry().get(session_id)

    json_data = request.get_json(silent=True)
    if not json_data:
        raise ValidationException(status_message="Invalid JSON payload.")

    try:
        loaded_data = PlaceBetSchema().load(json_data)
    except ValidationError as e:
        raise ValidationException(status_message="Input validation failed.", details=e.messages)

    session.place_bet(loaded_data['label'], loaded_data['amount'])
    return _state_response(session)


@wheel_bp.route('/sessions/<session_id>/bets', methods=['DELETE'])
def clear_bets(session_id):
    session = _registry().get(session_id)
    session.clear_bets()
    return _state_response(session)


@wheel_bp.route('/sessions/<session_id>/spin', methods=['POST'])
def spin(session_id):
    session = _registry().get(session_id)
    session.spin()
    current_app.logger.info(f"Wheel session {session_id} started round {session.state.round_id}")
    return _state_response(session, HTTPStatus.ACCEPTED)
