"""
Entropy Sampler
===============

Bounded Pareto-style power-law sampling via inverse-CDF.

RANDOMNESS CONTRACT:
====================
The sampler owns no random state. Callers pass either a uniform value
`u` directly, or a `random.Random` instance from which exactly one
`random()` call is drawn. Identical seeds therefore replay identical
entropy sequences.
"""

from __future__ import annotations
from dataclasses import dataclass
import math
import random

from ..contracts.base import DomainError, ErrorCode


def sample_power_law(xmin: float, xmax: float, alpha: float, u: float) -> float:
    """
    Inverse-CDF draw from a power law truncated to [xmin, xmax].

    u=0 yields exactly xmin; u -> 1 approaches xmax.
    """
    if not xmin > 0:
        raise DomainError(ErrorCode.INVALID_SAMPLER_BOUNDS, f"xmin must be positive, got {xmin}")
    if not xmax > xmin:
        raise DomainError(
            ErrorCode.INVALID_SAMPLER_BOUNDS,
            f"xmax must exceed xmin, got xmin={xmin} xmax={xmax}"
        )
    if alpha == 1:
        raise DomainError(ErrorCode.DEGENERATE_EXPONENT, "alpha == 1 has no inverse CDF in this form")
    if not 0.0 <= u <= 1.0:
        raise DomainError(ErrorCode.UNIFORM_OUT_OF_RANGE, f"u must lie in [0, 1], got {u}")

    exponent = 1.0 - alpha
    base = 1.0 - u + u * math.pow(xmax / xmin, exponent)
    value = xmin * math.pow(base, 1.0 / exponent)

    # Rounding near the upper bound can overshoot by an ulp
    return min(max(value, xmin), xmax)


@dataclass(frozen=True)
class EntropySampler:
    """Power-law sampler bound to fixed parameters."""
    xmin: float = 0.1
    xmax: float = 10.0
    alpha: float = 2.5

    def __post_init__(self):
        # Fail at construction rather than on the first draw
        sample_power_law(self.xmin, self.xmax, self.alpha, 0.0)

    def sample(self, u: float) -> float:
        return sample_power_law(self.xmin, self.xmax, self.alpha, u)

    def draw(self, rng: random.Random) -> float:
        """Consume one uniform value from rng."""
        return self.sample(rng.random())

    def draw_max(self, rng: random.Random, count: int = 3) -> float:
        """
        Max of `count` independent draws.

        Biases the result toward the upper tail of the distribution.
        """
        return max(self.draw(rng) for _ in range(count))
