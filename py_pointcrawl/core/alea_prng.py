"""
Python implementation of the Alea PRNG used for pointcrawl generation.

Based on Johannes Baagøe's Alea algorithm. A single seeded stream drives
every random decision of a generation run, so identical seeds reproduce
identical maps.
"""

from typing import Dict, Hashable, Sequence, TypeVar

T = TypeVar("T")


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Alea PRNG with the sampling helpers the generation stages need.
    """

    def __init__(self, seed):
        """Initialize with seed string, number or sequence of either."""
        self.call_count = 0

        if hasattr(seed, "__iter__") and not isinstance(seed, str):
            args = list(seed)
        else:
            args = [seed]

        mash_n = 0xEFC8249D  # 4022871197

        def mash(data):
            nonlocal mash_n
            data = str(data)
            for char in data:
                mash_n = mash_n + ord(char)
                h = 0.02519603282416938 * mash_n
                mash_n = _uint32(h)
                h -= mash_n
                h *= mash_n
                mash_n = _uint32(h)
                h -= mash_n
                mash_n += h * 0x100000000  # 2^32
            return _uint32(mash_n) * 2.3283064365386963e-10  # 2^-32

        self.s0 = mash(" ")
        self.s1 = mash(" ")
        self.s2 = mash(" ")
        self.c = 1

        for arg in args:
            self.s0 -= mash(arg)
            if self.s0 < 0:
                self.s0 += 1
            self.s1 -= mash(arg)
            if self.s1 < 0:
                self.s1 += 1
            self.s2 -= mash(arg)
            if self.s2 < 0:
                self.s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self.s0 + self.c * 2.3283064365386963e-10  # 2^-32
        self.s0 = self.s1
        self.s1 = self.s2
        self.c = int(t)
        self.s2 = t - self.c
        return self.s2

    def uniform(self, low: float, high: float) -> float:
        """Random float in [low, high)."""
        return low + self.random() * (high - low)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def weighted_choice(self, weights: Dict[Hashable, float]):
        """
        Choose a key from a discrete distribution given as {key: weight}.

        Keys are walked in insertion order, so the same weights and the same
        stream always pick the same key.
        """
        total = sum(weights.values())
        if total <= 0:
            raise ValueError("Weights must sum to a positive value")

        r = self.random() * total
        cumulative = 0.0
        last = None
        for key, weight in weights.items():
            if weight <= 0:
                continue
            cumulative += weight
            last = key
            if r < cumulative:
                return key
        # Float round-off at the top of the range
        return last

    def chance(self, probability: float) -> bool:
        """Bernoulli trial; certain outcomes consume no draw."""
        if probability >= 1:
            return True
        if probability <= 0:
            return False
        return self.random() < probability
