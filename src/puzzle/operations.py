"""
Operations Module - The four arithmetic operations and their game rules.

Subtraction is an absolute difference, so it never produces a negative
tile. Division is only allowed when the larger operand is an exact
multiple of the smaller one, and operand order does not matter.
"""

import logging
from enum import Enum
from typing import Optional

logger = logging.getLogger(__name__)

# Board limits
MAX_GRID_SIZE = 9
MAX_NUMBER_VALUE = 50


class Operation(Enum):
    """
    Arithmetic operation, keyed by its ASCII form.

    Members iterate in add, subtract, multiply, divide order, which is
    also the order hints try them in.
    """
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"

    @property
    def symbol(self) -> str:
        """Display symbol (+, −, ×, ÷)."""
        return OPERATION_SYMBOLS[self]

    @classmethod
    def parse(cls, text: str) -> 'Operation':
        """
        Parse an operation from its ASCII key or display symbol.

        Args:
            text: "+", "-", "*", "/", "−", "×", "÷" or a member name

        Returns:
            Matching Operation

        Raises:
            ValueError: If text is not a known operation
        """
        key = text.strip()
        for op in cls:
            if key in (op.value, op.symbol) or key.upper() == op.name:
                return op
        raise ValueError(f"Unknown operation: {text!r}")


OPERATION_SYMBOLS = {
    Operation.ADD: "+",
    Operation.SUBTRACT: "−",
    Operation.MULTIPLY: "×",
    Operation.DIVIDE: "÷",
}


class Evaluator:
    """
    Applies operations with the game's semantics.

    Stateless; one instance is created at startup and handed to every
    session that needs it.
    """

    def can_divide(self, a: int, b: int) -> bool:
        """
        Check whether a and b divide exactly (in either order).

        Args:
            a: First operand
            b: Second operand

        Returns:
            True if min(a, b) is non-zero and divides max(a, b)
        """
        larger = max(a, b)
        smaller = min(a, b)
        if smaller == 0:
            return False
        return larger % smaller == 0

    def apply(self, a: int, op: Operation, b: int) -> Optional[int]:
        """
        Apply an operation to two values.

        Args:
            a: First operand
            op: Operation to apply
            b: Second operand

        Returns:
            Result value, or None if the move is invalid
        """
        if op is Operation.ADD:
            return a + b
        if op is Operation.SUBTRACT:
            return abs(a - b)
        if op is Operation.MULTIPLY:
            return a * b
        if op is Operation.DIVIDE:
            if not self.can_divide(a, b):
                return None
            return max(a, b) // min(a, b)

        logger.error(f"Unsupported operation: {op!r}")
        return None

    def symbol_of(self, op: Operation) -> str:
        """Display symbol for an operation."""
        return op.symbol

    def describe(self, a: int, op: Operation, b: int) -> str:
        """
        Format a calculation for display, e.g. "6 ÷ 2 = 3".

        Invalid combinations are shown without a result.
        """
        result = self.apply(a, op, b)
        if result is None:
            return f"{a} {op.symbol} {b}"
        return f"{a} {op.symbol} {b} = {result}"
