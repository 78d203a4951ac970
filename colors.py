"""
Colour Module for GenderLens
Score ramp, region palette and the blended region × tier colour table
"""

import math
from typing import NamedTuple

from plotly.colors import qualitative, sequential, unlabel_rgb

from config import BLEND_WEIGHT, TIER_RAMP_STOPS

# ColorBrewer BuPu (9 classes) and the D3 category-10 palette
BUPU_STOPS = [tuple(int(c) for c in unlabel_rgb(s)) for s in sequential.BuPu]
REGION_PALETTE = list(qualitative.D3)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positive channels (Python's round() is banker's)."""
    return int(math.floor(value + 0.5))


def _clamp(value: float) -> int:
    return max(0, min(255, round_half_up(value)))


class RGB(NamedTuple):
    r: int
    g: int
    b: int

    @classmethod
    def from_hex(cls, color: str) -> "RGB":
        """Parse '#RRGGBB' or the '#RGB' shorthand."""
        digits = color.lstrip("#")
        if len(digits) == 3:
            digits = "".join(ch * 2 for ch in digits)
        if len(digits) != 6:
            raise ValueError(f"Not a hex colour: {color!r}")
        value = int(digits, 16)
        return cls((value >> 16) & 255, (value >> 8) & 255, value & 255)

    @property
    def hex(self) -> str:
        return "#{:02X}{:02X}{:02X}".format(*self)


def _basis(t1, v0, v1, v2, v3):
    t2 = t1 * t1
    t3 = t2 * t1
    return ((1 - 3 * t1 + 3 * t2 - t3) * v0
            + (4 - 6 * t2 + 3 * t3) * v1
            + (1 + 3 * t1 + 3 * t2 - 3 * t3) * v2
            + t3 * v3) / 6


def _spline(values, t):
    n = len(values) - 1
    if t <= 0:
        t, i = 0.0, 0
    elif t >= 1:
        t, i = 1.0, n - 1
    else:
        i = int(math.floor(t * n))
    v1, v2 = values[i], values[i + 1]
    v0 = values[i - 1] if i > 0 else 2 * v1 - v2
    v3 = values[i + 2] if i < n - 1 else 2 * v2 - v1
    return _basis((t - i / n) * n, v0, v1, v2, v3)


def score_ramp(t: float) -> RGB:
    """
    Sample the BuPu scheme at t in [0, 1].

    Uses a uniform B-spline through the nine stops, so the result is
    smoother than a piecewise-linear colourscale lookup.
    """
    channels = zip(*BUPU_STOPS)
    return RGB(*(_clamp(_spline(list(ch), t)) for ch in channels))


def tier_color(score_tier: int) -> RGB:
    """Ramp colour of a Low / Medium / High score tier."""
    return score_ramp(TIER_RAMP_STOPS[score_tier])


def region_color(region_index: int) -> RGB:
    """Base colour of a cultural region, cycling past ten regions."""
    return RGB.from_hex(REGION_PALETTE[region_index % len(REGION_PALETTE)])


def blend(c1: RGB, c2: RGB, weight: float = BLEND_WEIGHT) -> RGB:
    """Linear RGB mix: weight 0 gives c1, weight 1 gives c2."""
    return RGB(*(round_half_up(a * (1 - weight) + b * weight)
                 for a, b in zip(c1, c2)))


def build_color_table(n_regions):
    """
    Build the tier × region colour matrix.

    Args:
        n_regions: Number of cultural regions in the current classification

    Returns:
        List of three rows (Low, Medium, High), each a list of hex strings
        indexed by region index
    """
    return [
        [color_for(i, tier) for i in range(n_regions)]
        for tier in range(len(TIER_RAMP_STOPS))
    ]


def color_for(region_index: int, score_tier: int) -> str:
    """Display colour of one (region, tier) cell."""
    return blend(region_color(region_index), tier_color(score_tier)).hex
