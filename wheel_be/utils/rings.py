# wheel_be/utils/rings.py
"""
Fixed wedge layouts for the three concentric rings.

The label order IS the payout table. Index 0 sits under the pointer when a
ring's rotation is a whole number of turns.
"""
from collections import Counter
from dataclasses import dataclass
from enum import Enum


class Ring(str, Enum):
    OUTER = "Outer"
    MIDDLE = "Middle"
    INNER = "Inner"


BONUS_LABEL = "BONUS"
LOGO_LABELS = ("Logo1", "Logo2")

# Outer: 60 wedges at 6 degrees
OUTER_SEQUENCE = (
    "BONUS", "1", "2", "1", "5", "1", "2", "10", "1", "2",
    "1", "5", "2", "1", "Logo1", "1", "2", "1", "5", "1",
    "2", "10", "1", "2", "1", "5", "2", "1", "2", "1",
    "Logo2", "1", "5", "2", "1", "10", "1", "2", "1", "5",
    "1", "2", "1", "Logo1", "1", "2", "1", "2", "5", "1",
    "2", "1", "10", "1", "2", "1", "5", "1", "2", "1",
)

# Middle: 30 wedges at 12 degrees
MIDDLE_SEQUENCE = (
    "BONUS", "30", "50", "60", "50", "40", "50", "60", "50", "30",
    "75", "40", "50", "60", "40", "50", "40", "60", "50", "40",
    "75", "30", "50", "60", "40", "50", "40", "60", "50", "30",
)

# Inner: 30 wedges at 12 degrees, no BONUS so the cascade stops here
INNER_SEQUENCE = (
    "250", "75", "100", "125", "100", "75", "100", "150", "75", "100",
    "125", "100", "75", "125", "100", "200", "75", "100", "125", "100",
    "75", "100", "150", "75", "100", "125", "75", "100", "125", "75",
)


@dataclass(frozen=True)
class Wedge:
    index: int
    label: str
    start_angle: float
    end_angle: float


@dataclass(frozen=True)
class RingDefinition:
    ring: Ring
    sequence: tuple

    @property
    def length(self) -> int:
        return len(self.sequence)

    @property
    def wedge_angle(self) -> float:
        return 360 / len(self.sequence)

    def label_at(self, index: int) -> str:
        if not 0 <= index < self.length:
            raise IndexError(f"Wedge index {index} out of range for {self.ring.value} ring ({self.length} wedges)")
        return self.sequence[index]

    def wedges(self) -> list:
        """Wedges in sequence order with their start/end angles in degrees."""
        angle = self.wedge_angle
        return [
            Wedge(index=i, label=label, start_angle=i * angle, end_angle=(i + 1) * angle)
            for i, label in enumerate(self.sequence)
        ]

    def label_counts(self) -> dict:
        return dict(Counter(self.sequence))


RINGS = {
    Ring.OUTER: RingDefinition(Ring.OUTER, OUTER_SEQUENCE),
    Ring.MIDDLE: RingDefinition(Ring.MIDDLE, MIDDLE_SEQUENCE),
    Ring.INNER: RingDefinition(Ring.INNER, INNER_SEQUENCE),
}

# Order in which a bonus cascade visits the rings.
CASCADE_ORDER = (Ring.OUTER, Ring.MIDDLE, Ring.INNER)


def get_ring(ring) -> RingDefinition:
    """Look up a ring definition by enum member or name ('Outer', 'Middle', 'Inner')."""
    return RINGS[Ring(ring)]


def next_ring(ring):
    """The ring a cascade moves to after `ring`, or None past the inner ring."""
    position = CASCADE_ORDER.index(Ring(ring))
    if position + 1 < len(CASCADE_ORDER):
        return CASCADE_ORDER[position + 1]
    return None


for _definition in RINGS.values():
    if _definition.length * _definition.wedge_angle != 360:
        raise RuntimeError(f"{_definition.ring.value} ring does not cover a full turn")
