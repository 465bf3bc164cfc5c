"""
Тесты для модуля Numerical Safeguards

Проверяет:
1. Нормализацию точности float
2. Safe-integer диапазон
3. Насыщение в [0, 1]
4. Деление/остаток/степень при политиках STRICT и IEEE
5. Граничные случаи (знаковый ноль, большие int, NaN)
"""

import math
from fractions import Fraction

import pytest

from flextype.core.config import DivisionPolicy
from flextype.core.errors import DivisionByZero
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

# =============================================================================
# ТЕСТЫ ПРОВЕРОК
# =============================================================================


class TestChecks:
    """Тесты для is_valid_float / is_integral / is_safe_magnitude"""

    def test_valid_floats(self) -> None:
        """Конечные значения валидны, NaN/Inf — нет"""
        assert is_valid_float(0.0)
        assert is_valid_float(-1e308)
        assert not is_valid_float(math.nan)
        assert not is_valid_float(math.inf)
        assert not is_valid_float(-math.inf)

    def test_is_integral(self) -> None:
        """Целые int/float/Fraction считаются целыми"""
        assert is_integral(5)
        assert is_integral(5.0)
        assert is_integral(Fraction(10, 2))
        assert not is_integral(5.5)
        assert not is_integral(True)
        assert not is_integral("5")

    def test_safe_magnitude_boundary(self) -> None:
        """Граница 2**53 - 1 включительно"""
        assert MAX_SAFE_INTEGER == 9007199254740991
        assert is_safe_magnitude(MAX_SAFE_INTEGER)
        assert is_safe_magnitude(-MAX_SAFE_INTEGER)
        assert not is_safe_magnitude(MAX_SAFE_INTEGER + 1)
        assert not is_safe_magnitude(1e300)


# =============================================================================
# ТЕСТЫ НОРМАЛИЗАЦИИ ТОЧНОСТИ
# =============================================================================


class TestNormalizePrecision:
    """Тесты для normalize_precision"""

    def test_removes_floating_point_noise(self) -> None:
        """0.1 + 0.2 → 0.3"""
        assert normalize_precision(0.1 + 0.2) == 0.3

    def test_integers_unchanged(self) -> None:
        """Целые значения не округляются"""
        assert normalize_precision(10) == 10
        assert normalize_precision(2**60) == 2**60
        assert normalize_precision(1e20) == 1e20

    def test_infinity_passes_through(self) -> None:
        """Infinity и NaN проходят без изменений"""
        assert normalize_precision(math.inf) == math.inf
        assert math.isnan(normalize_precision(math.nan))

    def test_custom_digits(self) -> None:
        """Произвольное число значащих цифр"""
        assert normalize_precision(3.14159, digits=3) == 3.14

    def test_invalid_digits_raise(self) -> None:
        """digits вне [1, 17] → ValueError"""
        with pytest.raises(ValueError, match="digits must be in"):
            normalize_precision(1.5, digits=0)
        with pytest.raises(ValueError, match="digits must be in"):
            normalize_precision(1.5, digits=18)


# =============================================================================
# ТЕСТЫ НАСЫЩЕНИЯ
# =============================================================================


class TestSaturation:
    """Тесты для clamp и saturate_unit"""

    def test_clamp_within_range(self) -> None:
        """Значение внутри диапазона остаётся без изменений"""
        assert clamp(5.0, 0.0, 10.0) == 5.0
        assert clamp(-1.0, 0.0, 10.0) == 0.0
        assert clamp(11.0, 0.0, 10.0) == 10.0

    def test_clamp_one_sided(self) -> None:
        """Односторонние ограничения"""
        assert clamp(-5.0, min_value=0.0) == 0.0
        assert clamp(50.0, max_value=10.0) == 10.0

    def test_saturate_unit_bounds(self) -> None:
        """Результат всегда в [0, 1]"""
        assert saturate_unit(-1) == 0
        assert saturate_unit(2) == 1
        assert saturate_unit(0.5) == 0.5
        assert saturate_unit(math.inf) == 1
        assert saturate_unit(-math.inf) == 0

    def test_saturate_unit_no_negative_zero(self) -> None:
        """-0.0 нормализуется в 0"""
        result = saturate_unit(-0.0)
        assert result == 0
        assert math.copysign(1, result) == 1

    def test_saturate_unit_propagates_nan(self) -> None:
        """NaN не насыщается"""
        assert math.isnan(saturate_unit(math.nan))


# =============================================================================
# ТЕСТЫ ДЕЛЕНИЯ
# =============================================================================


class TestSafeDivide:
    """Тесты для safe_divide"""

    def test_regular_division(self) -> None:
        assert safe_divide(10, 4) == 2.5
        assert safe_divide(-9, 3) == -3.0

    def test_strict_policy_raises(self) -> None:
        """STRICT: деление на ноль → DivisionByZero"""
        with pytest.raises(DivisionByZero, match="Division by zero"):
            safe_divide(1, 0)
        with pytest.raises(ZeroDivisionError):
            safe_divide(0.0, 0.0, DivisionPolicy.STRICT)

    def test_ieee_policy_signed_infinity(self) -> None:
        """IEEE: x / ±0 → ±inf с учётом знаков"""
        assert safe_divide(1, 0, DivisionPolicy.IEEE) == math.inf
        assert safe_divide(-1, 0, DivisionPolicy.IEEE) == -math.inf
        assert safe_divide(1, -0.0, DivisionPolicy.IEEE) == -math.inf

    def test_ieee_zero_over_zero_is_nan(self) -> None:
        """IEEE: 0 / 0 → NaN"""
        assert math.isnan(safe_divide(0, 0, DivisionPolicy.IEEE))
        assert math.isnan(safe_divide(math.nan, 0, DivisionPolicy.IEEE))

    def test_huge_int_division_overflow(self) -> None:
        """int / int вне диапазона double → inf"""
        assert safe_divide(10**400, 1) == math.inf
        assert safe_divide(-(10**400), 1) == -math.inf


class TestSafeModulus:
    """Тесты для safe_modulus"""

    def test_truncated_remainder(self) -> None:
        """Знак результата совпадает со знаком делимого"""
        assert safe_modulus(7, 3) == 1
        assert safe_modulus(-7, 3) == -1
        assert safe_modulus(7, -3) == 1
        assert safe_modulus(5.5, 2) == 1.5

    def test_strict_policy_raises(self) -> None:
        with pytest.raises(DivisionByZero, match="Modulus by zero"):
            safe_modulus(5, 0)

    def test_ieee_policy_nan(self) -> None:
        assert math.isnan(safe_modulus(5, 0, DivisionPolicy.IEEE))

    def test_infinite_operands(self) -> None:
        """inf % x → NaN, x % inf → x"""
        assert math.isnan(safe_modulus(math.inf, 3))
        assert safe_modulus(3, math.inf) == 3
        assert math.isnan(safe_modulus(math.nan, 3))


class TestWidenToFloat:
    """Тесты для widen_to_float"""

    def test_regular_values(self) -> None:
        assert widen_to_float(3) == 3.0
        assert isinstance(widen_to_float(3), float)
        assert widen_to_float(-2.5) == -2.5

    def test_out_of_range_int(self) -> None:
        assert widen_to_float(10**400) == math.inf
        assert widen_to_float(-(10**400)) == -math.inf


class TestSafePower:
    """Тесты для safe_power"""

    def test_exact_integer_power(self) -> None:
        assert safe_power(2, 10) == 1024
        assert safe_power(3, 0) == 1

    def test_fractional_results(self) -> None:
        assert safe_power(2, -1) == 0.5
        assert safe_power(9, 0.5) == pytest.approx(3.0)

    def test_zero_to_negative_power(self) -> None:
        """0 ** отрицательное подчиняется политике"""
        with pytest.raises(DivisionByZero):
            safe_power(0, -1)
        assert safe_power(0, -1, DivisionPolicy.IEEE) == math.inf
        assert safe_power(-0.0, -1, DivisionPolicy.IEEE) == -math.inf

    def test_negative_base_fractional_exponent(self) -> None:
        """Отрицательное ** дробное → NaN"""
        assert math.isnan(safe_power(-8, 0.5))

    def test_overflow_is_infinity(self) -> None:
        """Переполнение → ±inf при любой политике"""
        assert safe_power(10.0, 400) == math.inf
        assert safe_power(-10.0, 401) == -math.inf
        assert safe_power(10, 5000, DivisionPolicy.IEEE) == math.inf
