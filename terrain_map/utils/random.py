"""
Random number generation utilities.

Every generation pass gets its own AleaPRNG instance, created here. There is
no module-level PRNG: callers pass the instance to each function that needs
randomness so tests can inject a fixed sequence.
"""

import time
from typing import Optional, Union

import structlog

from ..core.alea_prng import AleaPRNG

logger = structlog.get_logger()

Seed = Union[str, int]


def resolve_seed(seed: Optional[Seed] = None) -> str:
    """
    Turn an optional user seed into the seed string actually used.

    Args:
        seed: User supplied seed, or None to seed from the system clock

    Returns:
        Seed string
    """
    if seed is None or seed == "":
        seed = str(time.time_ns())
        logger.debug("Seeded from system clock", seed=seed)
    return str(seed)


def create_prng(seed: Optional[Seed] = None) -> AleaPRNG:
    """
    Create a fresh PRNG for one generation pass.

    Args:
        seed: Seed string or number; None seeds from the system clock

    Returns:
        AleaPRNG instance
    """
    return AleaPRNG(resolve_seed(seed))
