"""
Shared seeded randomness.

Everything random in py_voronoi (site factories, colour choice) draws from the
Alea PRNG so a seed string fully determines the output. Python's ``random``
and NumPy's generators are not used.
"""

from typing import Optional

from ..config import settings
from ..core.alea_prng import AleaPRNG

# Global PRNG instance
_prng: Optional[AleaPRNG] = None


def set_random_seed(seed: str) -> None:
    """
    Reset the shared PRNG with a new seed.

    Args:
        seed: Seed string to use
    """
    global _prng
    _prng = AleaPRNG(seed)


def get_prng() -> AleaPRNG:
    """
    Get the shared PRNG, creating it from the configured default seed.

    Returns:
        AleaPRNG instance
    """
    global _prng
    if _prng is None:
        _prng = AleaPRNG(settings.default_seed)
    return _prng


def make_prng(seed: Optional[str] = None) -> AleaPRNG:
    """A fresh generator for ``seed``, or the shared one when no seed is given."""
    if seed is None:
        return get_prng()
    return AleaPRNG(seed)
