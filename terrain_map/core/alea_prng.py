"""
Alea pseudo-random number generator.

Based on Johannes Baagøe's Alea algorithm. A single instance is threaded
through one generation pass (subdivision offsets, band jitter and color
noise), so the seed alone decides the output.
"""

import numpy as np


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class AleaPRNG:
    """
    Seedable Alea PRNG.

    Seeds may be strings, numbers or an iterable of either; every argument is
    hashed through the Mash function in order.
    """

    def __init__(self, seed):
        """Initialize with seed string or number."""
        self.seed = seed
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

    def random_array(self, n: int) -> np.ndarray:
        """
        Draw the next ``n`` values of the stream at once.

        Identical to ``n`` calls of random(), in order.
        """
        s0, s1, s2, c = self.s0, self.s1, self.s2, self.c
        values = []
        append = values.append
        for _ in range(n):
            t = 2091639 * s0 + c * 2.3283064365386963e-10  # 2^-32
            s0 = s1
            s1 = s2
            c = int(t)
            s2 = t - c
            append(s2)
        self.s0, self.s1, self.s2, self.c = s0, s1, s2, c
        self.call_count += n
        return np.array(values, dtype=np.float64)

    def uniform_array(self, low: float, high: float, n: int) -> np.ndarray:
        """``n`` draws of uniform(low, high)."""
        return low + self.random_array(n) * (high - low)

    def randint(self, n: int) -> int:
        """Return a random integer in [0, n)."""
        if n <= 0:
            raise ValueError(f"randint() bound must be positive, got {n}")
        return int(self.random() * n)

    def uniform(self, low: float, high: float) -> float:
        """Return a random float in [low, high)."""
        return low + self.random() * (high - low)

    def choice(self, seq):
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(len(seq))]
