"""
Core math modules для FlexType

Численные примитивы и семантика операций над эффективными значениями.
"""

# Numerical Safeguards
from flextype.core.math.numerical_safeguards import (
    MAX_SAFE_INTEGER,
    clamp,
    is_integral,
    is_safe_magnitude,
    is_valid_float,
    normalize_precision,
    safe_divide,
    safe_modulus,
    safe_power,
    saturate_unit,
    widen_to_float,
)

# Operators
from flextype.core.math.operators import (
    ArithmeticOp,
    ComparisonOp,
    compare,
    compute,
    compute_values,
    loose_equals,
    strict_equals,
)

__all__ = [
    # Numerical Safeguards
    "MAX_SAFE_INTEGER",
    "clamp",
    "is_integral",
    "is_safe_magnitude",
    "is_valid_float",
    "normalize_precision",
    "safe_divide",
    "safe_modulus",
    "safe_power",
    "saturate_unit",
    "widen_to_float",
    # Operators
    "ArithmeticOp",
    "ComparisonOp",
    "compare",
    "compute",
    "compute_values",
    "loose_equals",
    "strict_equals",
]
