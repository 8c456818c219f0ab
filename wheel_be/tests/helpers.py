"""Shared test doubles for wheel tests."""


class ScriptedRng:
    """Stand-in for random.Random that returns rng.random() values from a fixed list."""

    def __init__(self, values=()):
        self.values = list(values)

    def push(self, *values):
        self.values.extend(values)

    def random(self):
        if not self.values:
            raise AssertionError("ScriptedRng ran out of values")
        return self.values.pop(0)


def landing(index, length, full_spins_draw=0.0):
    """The two rng.random() draws that make choose_spin() pick `index` on a ring of `length` wedges."""
    return [(index + 0.5) / length, full_spins_draw]
