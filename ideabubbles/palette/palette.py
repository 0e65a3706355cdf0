"""
Score-to-colour mapping for bubbles.

Pure, side-effect-free functions: the same (score, max score) pair always
yields the same colour, so results can be asserted exactly.

Gradient:
    score 0   -> HUE_NO_VOTES   (deep orange)
    score 1   -> HUE_FIRST_VOTE (light orange)
    score > 1 -> linear blend from HUE_FIRST_VOTE to HUE_TOP (yellow),
                 reaching HUE_TOP at the highest score in the set
"""

import math
from typing import NamedTuple


class Color(NamedTuple):
    """An 8-bit RGB colour."""
    r: int
    g: int
    b: int
    
    @classmethod
    def from_hex(cls, hex_color: str) -> "Color":
        """Parse a ``#rrggbb`` string."""
        hex_color = hex_color.lstrip("#")
        if len(hex_color) != 6:
            raise ValueError(f"expected #rrggbb colour, got {hex_color!r}")
        return cls(*(int(hex_color[i:i + 2], 16) for i in (0, 2, 4)))
    
    def to_hex(self) -> str:
        return f"#{self.r:02x}{self.g:02x}{self.b:02x}"
    
    def to_css(self) -> str:
        return f"rgb({self.r},{self.g},{self.b})"


# =============================================================================
# Palette Configuration
# =============================================================================

HUE_NO_VOTES: Color = Color.from_hex("#ea580c")
HUE_FIRST_VOTE: Color = Color.from_hex("#f59e42")
HUE_TOP: Color = Color.from_hex("#fbbf24")

# Floor for the set maximum so the interpolation denominator is never zero
MIN_SCALE_MAX: int = 2


# =============================================================================
# Interpolation
# =============================================================================

def round_half_up(value: float) -> int:
    """Round to the nearest integer, ties going up (174.5 -> 175)."""
    return int(math.floor(value + 0.5))


def lerp_color(start: Color, end: Color, t: float) -> Color:
    """
    Blend two colours channel by channel.
    
    Args:
        start: Colour at t = 0.
        end: Colour at t = 1.
        t: Blend fraction, clamped to [0, 1].
        
    Returns:
        Blended colour with channels rounded half-up.
    """
    t = max(0.0, min(1.0, t))
    return Color(
        round_half_up(start.r + (end.r - start.r) * t),
        round_half_up(start.g + (end.g - start.g) * t),
        round_half_up(start.b + (end.b - start.b) * t),
    )


def color_for(score: int, max_score_in_set: int) -> Color:
    """
    Map a vote count to a bubble colour.
    
    Args:
        score: The idea's vote count (>= 0).
        max_score_in_set: Highest vote count among the bubbles on screen.
        
    Returns:
        The bubble colour.
        
    Raises:
        ValueError: If score is negative.
    """
    if score < 0:
        raise ValueError(f"score cannot be negative, got {score}")
    
    if score == 0:
        return HUE_NO_VOTES
    if score == 1:
        return HUE_FIRST_VOTE
    
    scale_max = max(MIN_SCALE_MAX, max_score_in_set)
    t = min(1.0, (score - 1) / (scale_max - 1))
    return lerp_color(HUE_FIRST_VOTE, HUE_TOP, t)
