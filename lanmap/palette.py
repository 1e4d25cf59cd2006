"""Rainbow ordinal palette (cubehelix based, as in d3-scale-chromatic)."""

from __future__ import annotations

import math
from typing import Callable

# Cubehelix -> RGB coefficients
_A = -0.14861
_B = +1.78277
_C = -0.29227
_D = -0.90649
_E = +1.97294


def _clamp_channel(value: float) -> int:
    return max(0, min(255, round(value)))


def cubehelix_to_hex(h: float, s: float, l: float) -> str:
    """Convert a cubehelix colour (hue in degrees) to ``#rrggbb``."""
    h = math.radians(h + 120)
    a = s * l * (1 - l)
    cosh = math.cos(h)
    sinh = math.sin(h)
    r = 255 * (l + a * (_A * cosh + _B * sinh))
    g = 255 * (l + a * (_C * cosh + _D * sinh))
    b = 255 * (l + a * (_E * cosh))
    return "#{:02x}{:02x}{:02x}".format(
        _clamp_channel(r), _clamp_channel(g), _clamp_channel(b),
    )


def rainbow(t: float) -> str:
    """Colour at position ``t`` of the cyclical rainbow."""
    if t < 0 or t > 1:
        t -= math.floor(t)
    ts = abs(t - 0.5)
    return cubehelix_to_hex(360 * t - 100, 1.5 - 1.5 * ts, 0.8 - 0.9 * ts)


def quantize(interpolator: Callable[[float], str], n: int) -> list[str]:
    """``n`` evenly spaced samples of ``interpolator`` over [0, 1]."""
    if n < 1:
        return []
    if n == 1:
        return [interpolator(0.0)]
    return [interpolator(i / (n - 1)) for i in range(n)]
