from marshmallow import Schema, fields, validate, pre_load

from .utils.ledger import BET_LABELS
from .utils.rings import Ring

RING_NAMES = [ring.value for ring in Ring]


# --- Request Schemas ---
class PlaceBetSchema(Schema):
    label = fields.String(required=True, validate=validate.OneOf(list(BET_LABELS)))
    amount = fields.Integer(
        required=True,
        strict=True,
        validate=validate.Range(min=1, error="Bet amount must be a positive whole number.")
    )

    @pre_load
    def strip_label(self, data, **kwargs):
        if isinstance(data, dict) and isinstance(data.get('label'), str):
            data = dict(data)
            data['label'] = data['label'].strip()
        return data


# --- Layout Schemas ---
class WedgeSchema(Schema):
    index = fields.Integer(required=True)
    label = fields.String(required=True)
    start_angle = fields.Float(required=True)
    end_angle = fields.Float(required=True)


class RingLayoutSchema(Schema):
    name = fields.String(required=True, validate=validate.OneOf(RING_NAMES))
    wedge_angle = fields.Float(required=True)
    wedges = fields.List(fields.Nested(WedgeSchema), required=True)


class TableLayoutSchema(Schema):
    rings = fields.List(fields.Nested(RingLayoutSchema), required=True)
    bet_labels = fields.List(fields.String(), required=True)
    chip_values = fields.List(fields.Integer(), required=True)


# --- Session State Schemas ---
class RoundResultSchema(Schema):
    ring = fields.String(required=True, validate=validate.OneOf(RING_NAMES))
    label = fields.String(required=True)
    winnings = fields.Integer(required=True)


class WheelStateSchema(Schema):
    session_id = fields.String(required=True)
    round_id = fields.Integer(required=True)
    phase = fields.String(required=True)
    balance = fields.Integer(required=True)
    bets = fields.Dict(keys=fields.String(), values=fields.Integer(), required=True)
    total_staked = fields.Integer(required=True)
    active_bonus_bet = fields.Integer(required=True)
    rotations = fields.Dict(keys=fields.String(), values=fields.Float(), required=True)
    spinning = fields.Dict(keys=fields.String(), values=fields.Boolean(), required=True)
    winning_indices = fields.Dict(keys=fields.String(), values=fields.Integer(allow_none=True), required=True)
    spin_results = fields.List(fields.Nested(RoundResultSchema), required=True)
