"""
Reproducible Simulation Draws for Mixed Logit
=============================================

Provides the deterministic pseudo-random number generator and the fixed
panel of standard normal draws used to integrate over taste heterogeneity.

The uniform generator is Mulberry32: a 32-bit state advanced by a fixed
increment and passed through xor-shift/multiply mixing. Standard normals are
obtained with the Box-Muller transform. Because every operation is exact
32-bit integer arithmetic, the same seed yields a bit-identical panel on any
platform.

Example:
    >>> panel = generate_draw_panel(seed=123456789, n_draws=1000)
    >>> panel.draws.shape
    (1000, 8)

Author: Mandate DCM Team
"""

import math
import numpy as np
import pandas as pd
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from ..constants import ATTRIBUTE_NAMES, N_DRAWS_DEFAULT, RANDOM_SEED, validate_n_draws

_UINT32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    """32-bit integer multiply (low 32 bits, unsigned)."""
    return (a * b) & _UINT32


class Mulberry32:
    """
    Mulberry32 uniform generator.

    Each call advances the state by 0x6D2B79F5 and mixes it into a
    uniform value in [0, 1) with 32-bit resolution.

    Example:
        >>> rng = Mulberry32(42)
        >>> u = rng.next_uniform()
        >>> 0.0 <= u < 1.0
        True
    """

    def __init__(self, seed: int = RANDOM_SEED):
        self.seed = seed
        self._state = seed & _UINT32

    @property
    def state(self) -> int:
        return self._state

    def next_uint32(self) -> int:
        """Advance the state and return the next 32-bit output."""
        self._state = (self._state + _INCREMENT) & _UINT32
        t = self._state
        t = _imul(t ^ (t >> 15), t | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & _UINT32
        return (t ^ (t >> 14)) & _UINT32

    def next_uniform(self) -> float:
        """Uniform draw in [0, 1)."""
        return self.next_uint32() / 4294967296.0

    def standard_normal(self) -> float:
        """
        Standard normal draw via Box-Muller.

        Both uniforms are re-drawn while exactly zero so that log(0)
        can never occur.
        """
        u = 0.0
        v = 0.0
        while u == 0.0:
            u = self.next_uniform()
        while v == 0.0:
            v = self.next_uniform()
        return math.sqrt(-2.0 * math.log(u)) * math.cos(2.0 * math.pi * v)


@dataclass(frozen=True)
class DrawPanel:
    """
    Fixed panel of standard normal draws.

    Attributes:
        draws: Read-only array of shape (n_draws, n_attributes)
        attribute_names: Column order of the draws
        seed: Seed the panel was generated from
    """
    draws: np.ndarray
    attribute_names: Tuple[str, ...]
    seed: int

    def __post_init__(self):
        if self.draws.ndim != 2 or self.draws.shape[1] != len(self.attribute_names):
            raise ValueError(
                f"Draw array shape {self.draws.shape} does not match "
                f"{len(self.attribute_names)} attributes"
            )
        self.draws.setflags(write=False)

    @property
    def n_draws(self) -> int:
        return self.draws.shape[0]

    @property
    def n_attributes(self) -> int:
        return self.draws.shape[1]

    def column(self, attribute: str) -> np.ndarray:
        """Draws for a single attribute, shape (n_draws,)."""
        if attribute not in self.attribute_names:
            raise KeyError(f"Attribute '{attribute}' not in draw panel")
        return self.draws[:, self.attribute_names.index(attribute)]

    def draw(self, r: int) -> Dict[str, float]:
        """Draw r as an attribute -> value mapping."""
        return {name: float(self.draws[r, k])
                for k, name in enumerate(self.attribute_names)}

    def to_dataframe(self) -> pd.DataFrame:
        """Convert to DataFrame (one row per draw)."""
        return pd.DataFrame(self.draws, columns=list(self.attribute_names))


def generate_standard_normals(rng: Mulberry32, n: int) -> List[float]:
    """Generate n standard normals from a generator, in call order."""
    return [rng.standard_normal() for _ in range(n)]


def generate_draw_panel(seed: int = RANDOM_SEED,
                        n_draws: int = N_DRAWS_DEFAULT,
                        attribute_names: Sequence[str] = ATTRIBUTE_NAMES) -> DrawPanel:
    """
    Generate the fixed panel of standard normal draws.

    Draws are produced row by row: for each draw, one normal per attribute
    in attribute order. Calling this twice with the same arguments returns
    identical panels.

    Args:
        seed: Seed for the Mulberry32 generator
        n_draws: Number of draws (rows)
        attribute_names: Attribute order (columns)

    Returns:
        DrawPanel with a read-only (n_draws, n_attributes) array

    Raises:
        ValueError: If n_draws is not a positive integer
    """
    if not validate_n_draws(n_draws):
        raise ValueError(f"n_draws must be a positive integer, got {n_draws!r}")

    names = tuple(attribute_names)
    rng = Mulberry32(seed)
    values = generate_standard_normals(rng, n_draws * len(names))
    draws = np.array(values, dtype=float).reshape(n_draws, len(names))

    return DrawPanel(draws=draws, attribute_names=names, seed=seed)
