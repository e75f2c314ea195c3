"""
Hints Package - One-step move suggestions.

A session builds ClosestResultHint unless the host passes its own
HintStrategy subclass.
"""

from .base import Hint, HintStrategy
from .closest import ClosestResultHint

__all__ = [
    "Hint",
    "HintStrategy",
    "ClosestResultHint",
]
