"""
Conversion — вычисление эффективного значения и явные конверсии.
"""

from flextype.core.conversion.converter import ConversionResult, convert, record_tag
from flextype.core.conversion.reinterpretation import (
    Reinterpretation,
    ReinterpretationRule,
    parse_date_text,
    reinterpret_string,
)

__all__ = [
    "ConversionResult",
    "convert",
    "record_tag",
    "Reinterpretation",
    "ReinterpretationRule",
    "parse_date_text",
    "reinterpret_string",
]
