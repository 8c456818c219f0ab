# wheel_be/utils/geometry.py
import math
import random

from .rings import RingDefinition

MIN_FULL_SPINS = 4
EXTRA_SPIN_CHOICES = 3  # full spins drawn from [4, 6]


def choose_spin(ring: RingDefinition, previous_rotation: float = 0, rng=None):
    """
    Picks a random target wedge and the rotation needed to land on it.

    Returns (target_index, rotation_delta). The delta takes the ring forward
    full_spins turns, less the sub-turn distance that puts the target under
    the pointer from wherever the ring currently rests. It is therefore always
    more than MIN_FULL_SPINS - 1 whole turns, and
    resolve_index(previous_rotation + rotation_delta, ring.length) == target_index
    for any starting rotation.
    """
    rng = rng or random
    total = ring.length
    target_index = math.floor(rng.random() * total)
    full_spins = math.floor(MIN_FULL_SPINS + rng.random() * EXTRA_SPIN_CHOICES)
    rotation_delta = full_spins * 360 - (target_index * ring.wedge_angle + previous_rotation) % 360
    return target_index, rotation_delta


def resolve_index(final_rotation: float, total_wedges: int) -> int:
    """
    Maps an accumulated rotation back to the wedge index under the pointer.

    The half-wedge offset centres the window on the pointer rather than on a
    wedge boundary. Python's % already normalises negative rotations to [0, 360).
    """
    if total_wedges <= 0:
        raise ValueError("total_wedges must be positive")
    wedge_angle = 360 / total_wedges
    corrected = (360 - (final_rotation % 360) + wedge_angle / 2) % 360
    return math.floor(corrected / wedge_angle) % total_wedges
