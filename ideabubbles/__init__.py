"""
Idea Bubbles - crowd-submitted ideas rendered as drifting, colour-coded bubbles.
"""

__version__ = "1.0.0"
