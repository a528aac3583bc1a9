"""A small arithmetic tool on integers."""

from __future__ import annotations

from .errors import InvalidToolParametersError, ToolExecutionError


def _truncating_divide(x: int, y: int) -> int:
    quotient = abs(x) // abs(y)
    return quotient if (x < 0) == (y < 0) else -quotient


def calculator(x: int, y: int, operation: str) -> int:
    """Apply ``operation`` (add, subtract, multiply or divide) to ``x`` and ``y``.

    Division truncates toward zero. Raises ToolExecutionError on division by
    zero and InvalidToolParametersError for an unknown operation.
    """
    if operation == "add":
        return x + y
    if operation == "subtract":
        return x - y
    if operation == "multiply":
        return x * y
    if operation == "divide":
        if y == 0:
            raise ToolExecutionError("Division by zero")
        return _truncating_divide(x, y)
    raise InvalidToolParametersError(f"Unknown operation: {operation}")