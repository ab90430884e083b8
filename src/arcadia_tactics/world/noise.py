"""Deterministic 2D value noise.

A sine-based lattice hash gives each integer grid point a value in
[0, 1); samples between lattice points are blended with a smoothstep
curve on both axes. The seed shifts the lattice, so terrain shape is a
pure function of ``(seed, x, y)``. Seed 0 samples the unshifted lattice.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


_LATTICE_SPAN = 10_000


def _smoothstep_mix(a: float, b: float, t: float) -> float:
    return a + (b - a) * t * t * (3 - 2 * t)


class ValueNoise:
    """Smooth value noise over the plane.

    Example:
        >>> noise = ValueNoise(seed=7)
        >>> 0.0 <= noise.sample(1.5, 2.25) < 1.0
        True
    """

    def __init__(self, seed: int = 0) -> None:
        self.seed = seed
        self._shift_x = (seed * 7919) % _LATTICE_SPAN
        self._shift_y = (seed * 104729) % _LATTICE_SPAN

    def lattice(self, ix: int, iy: int) -> float:
        """Hash value of a lattice point."""
        x = ix + self._shift_x
        y = iy + self._shift_y
        n = math.sin(x * 12.9898 + y * 78.233) * 43758.5453123
        return n - math.floor(n)

    def sample(self, x: float, y: float) -> float:
        """Bilinear smoothstep interpolation of the four surrounding lattice points."""
        ix = math.floor(x)
        iy = math.floor(y)
        fx = x - ix
        fy = y - iy

        top = _smoothstep_mix(self.lattice(ix, iy), self.lattice(ix + 1, iy), fx)
        bottom = _smoothstep_mix(self.lattice(ix, iy + 1), self.lattice(ix + 1, iy + 1), fx)
        return _smoothstep_mix(top, bottom, fy)


@dataclass(frozen=True)
class Climate:
    """The three noise fields sampled at one hex."""

    elevation: float
    moisture: float
    temperature: float


class ClimateSampler:
    """Samples elevation, moisture and temperature for hex coordinates.

    The three fields read the same noise at offset positions so that they
    are uncorrelated but share one seed.
    """

    def __init__(
        self,
        noise: ValueNoise,
        *,
        scale: float = 0.12,
        moisture_offset: float = 150.0,
        temperature_offset: float = 300.0,
    ) -> None:
        self.noise = noise
        self.scale = scale
        self.moisture_offset = moisture_offset
        self.temperature_offset = temperature_offset

    def sample(self, q: int, r: int) -> Climate:
        s = self.scale
        return Climate(
            elevation=self.noise.sample(q * s, r * s),
            moisture=self.noise.sample(
                (q + self.moisture_offset) * s, (r + self.moisture_offset) * s
            ),
            temperature=self.noise.sample(
                (q + self.temperature_offset) * s, (r + self.temperature_offset) * s
            ),
        )


__all__ = [
    "ValueNoise",
    "Climate",
    "ClimateSampler",
]
