"""
utils.py
Color type and small helpers shared by the sampler, transition and client.
"""
from typing import NamedTuple


class Color(NamedTuple):
    r: int
    g: int
    b: int


# Sent when a frame gives no usable signal (empty, or every sample too dark).
FALLBACK_COLOR = Color(255, 255, 255)


def clamp(x, min_val, max_val):
    return max(min(x, max_val), min_val)


def lerp_color(start, end, t):
    """Linear interpolation between two colors, t in [0, 1], rounded per channel."""
    t = clamp(t, 0.0, 1.0)
    return Color(*(int(clamp(round(a + (b - a) * t), 0, 255)) for a, b in zip(start, end)))
