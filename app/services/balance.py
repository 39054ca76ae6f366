"""Balance mutation: pure arithmetic over the two per-user balances (CWT, CWS).

CWT is a floating-point balance, CWS an integer balance. Results are clamped at zero,
never rejected. Missing or non-numeric inputs count as 0. This module performs no I/O;
the read-modify-write against the directory lives in ``app.services.admin``.
"""

import math
import sys
from typing import Any, Literal

BalanceOperation = Literal["add", "subtract", "set"]

OPERATION_ADD = "add"
OPERATION_SUBTRACT = "subtract"
OPERATION_SET = "set"

# Largest storable CWT; sums that overflow a float saturate here.
MAX_CWT = sys.float_info.max


def to_cwt(value: Any) -> float:
    """Coerce a CWT amount to a finite float; anything unusable becomes 0.0."""
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return 0.0
    else:
        return 0.0
    return number if math.isfinite(number) else 0.0


def to_cws(value: Any) -> int:
    """Coerce a CWS amount to an int, truncating fractions; anything unusable becomes 0."""
    number = to_cwt(value)
    return int(number)


def normalize_operation(operation: Any) -> BalanceOperation:
    """Map a requested operation to add/subtract; every other value (or none) means set."""
    if operation == OPERATION_ADD:
        return OPERATION_ADD
    if operation == OPERATION_SUBTRACT:
        return OPERATION_SUBTRACT
    return OPERATION_SET


def apply_operation(
    current_cwt: Any,
    current_cws: Any,
    delta_cwt: Any,
    delta_cws: Any,
    operation: Any = OPERATION_SET,
) -> tuple[float, int]:
    """
    Return (new_cwt, new_cws) after applying ``operation``.

    add: current + delta; subtract: current - delta; set (default, or any other
    value): delta. Both results are floored at zero and CWT saturates at MAX_CWT
    so the stored value stays finite.
    """
    cwt = to_cwt(current_cwt)
    cws = to_cws(current_cws)
    d_cwt = to_cwt(delta_cwt)
    d_cws = to_cws(delta_cws)

    op = normalize_operation(operation)
    if op == OPERATION_ADD:
        new_cwt, new_cws = cwt + d_cwt, cws + d_cws
    elif op == OPERATION_SUBTRACT:
        new_cwt, new_cws = cwt - d_cwt, cws - d_cws
    else:
        new_cwt, new_cws = d_cwt, d_cws

    if math.isinf(new_cwt):
        new_cwt = MAX_CWT if new_cwt > 0 else 0.0
    return max(0.0, new_cwt), max(0, new_cws)
