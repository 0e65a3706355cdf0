"""
Palette module.

Maps vote counts to bubble colours along a fixed orange-to-yellow gradient.
"""

from ideabubbles.palette.palette import (
    Color,
    HUE_NO_VOTES,
    HUE_FIRST_VOTE,
    HUE_TOP,
    color_for,
    lerp_color,
    round_half_up,
)

__all__ = [
    "Color",
    "HUE_NO_VOTES",
    "HUE_FIRST_VOTE",
    "HUE_TOP",
    "color_for",
    "lerp_color",
    "round_half_up",
]
