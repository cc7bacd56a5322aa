"""
Тесты точной арифметики Number

Проверяет:
1. add/sub/mul/checked_div и операторы
2. Целую степень (включая отрицательную и граничные основания)
3. Сравнение перекрёстным умножением
4. floor/ceil/trunc/round/truncate
"""

import pytest

from folio.core.math import (
    MAX_POWER_BITS,
    ONE,
    ZERO,
    DivisionByZero,
    Number,
    Overflow,
)


def n(text: str) -> Number:
    return Number.from_str(text)


# =============================================================================
# ОСНОВНЫЕ ОПЕРАЦИИ
# =============================================================================


class TestBasicOperations:
    """Сложение, вычитание, умножение, деление"""

    def test_add_is_exact(self) -> None:
        """0.1 + 0.2 == 0.3 точно"""
        assert n("0.1").add(n("0.2")) == n("0.3")

    def test_sub_mul(self) -> None:
        assert n("1/3").sub(n("1/6")) == n("1/6")
        assert n("2/3").mul(n("9/4")) == n("3/2")

    def test_checked_div(self) -> None:
        assert n("1").checked_div(n("3")) == n("1/3")
        assert n("-3/4").checked_div(n("-3/8")) == Number.from_i64(2)

    @pytest.mark.parametrize("dividend", ["0", "1", "-5/7", "1e500", "1e-500"])
    def test_division_by_zero_always_raises(self, dividend: str) -> None:
        """Деление на ноль — DivisionByZero для любого делимого"""
        with pytest.raises(DivisionByZero):
            n(dividend).checked_div(ZERO)

    def test_results_stay_reduced(self) -> None:
        """Результаты всегда несократимы"""
        x = n("2/4").add(n("1/4"))
        assert (x.numerator, x.denominator) == (3, 4)

    def test_operators(self) -> None:
        """Операторы Python делегируют точным методам"""
        half = n("1/2")
        assert half + half == ONE
        assert 1 - half == half
        assert half * 4 == Number.from_i64(2)
        assert 1 / half == Number.from_i64(2)
        assert -half == n("-1/2")
        assert abs(n("-1/2")) == half
        assert half**-2 == Number.from_i64(4)

    def test_operator_division_by_zero(self) -> None:
        with pytest.raises(DivisionByZero):
            _ = ONE / 0

    def test_unsupported_operand(self) -> None:
        """float не смешивается с Number неявно"""
        with pytest.raises(TypeError):
            _ = ONE + 0.5  # type: ignore[operator]

    def test_int_operands_compare_as_numbers(self) -> None:
        """Целое и равный ему Number неразличимы в словарях и множествах"""
        assert Number.from_i64(1) == 1
        assert 3 == Number.from_i64(3)
        assert hash(Number.from_i64(3)) == hash(3)
        assert len({Number.from_i64(3), 3}) == 1
        assert {Number.from_i64(2): "two"}[2] == "two"

    def test_unsupported_comparisons(self) -> None:
        assert n("1/2") != 0.5
        assert n("1/2") != "1/2"
        with pytest.raises(TypeError):
            _ = n("1/2") < 0.5  # type: ignore[operator]

    def test_predicates(self) -> None:
        assert ZERO.is_zero()
        assert n("-1/9").is_negative()
        assert n("1/9").is_positive()
        assert not ZERO.is_positive() and not ZERO.is_negative()
        assert n("4/2").is_integer()


# =============================================================================
# СТЕПЕНЬ
# =============================================================================


class TestPow:
    """Точная целая степень"""

    def test_positive_power(self) -> None:
        assert Number.from_i64(2).pow(10).to_i64() == 1024

    def test_negative_power_is_reciprocal(self) -> None:
        assert n("2/3").pow(-3) == n("27/8")
        assert n("-2").pow(-3) == n("-1/8")

    def test_zero_exponent(self) -> None:
        """x^0 = 1, включая 0^0"""
        assert n("7/5").pow(0) == ONE
        assert ZERO.pow(0) == ONE

    def test_zero_base(self) -> None:
        assert ZERO.pow(5) == ZERO
        with pytest.raises(DivisionByZero):
            ZERO.pow(-1)

    def test_unit_bases_never_overflow(self) -> None:
        """±1 в огромной степени не упирается в лимит размера"""
        assert ONE.pow(10**12) == ONE
        assert n("-1").pow(10**12 + 1) == n("-1")
        assert n("-1").pow(-(10**12)) == ONE

    def test_compound_growth_stays_exact(self) -> None:
        """1.003^300 точна и отображается без переполнения"""
        x = n("1.003").pow(300)
        assert x.denominator == 1000**300
        assert x.as_decimal(2).startswith("2.4")

    def test_size_bound_is_overflow(self) -> None:
        """Результат больше MAX_POWER_BITS — Overflow"""
        with pytest.raises(Overflow):
            Number.from_i64(3).pow(MAX_POWER_BITS)


# =============================================================================
# СРАВНЕНИЕ
# =============================================================================


class TestCompare:
    """Трёхзначное сравнение"""

    def test_compare(self) -> None:
        assert n("1/3").compare(n("0.3333")) == 1
        assert n("-1/2").compare(n("-0.5")) == 0
        assert n("-2").compare(n("1/1000")) == -1

    def test_rich_comparisons(self) -> None:
        assert n("1/3") < n("1/2")
        assert n("1/2") <= n("2/4")
        assert n("5") > 4
        assert n("-1") >= -1

    def test_sorting(self) -> None:
        values = [n("1/2"), n("-3"), n("0.1"), n("22/7")]
        assert sorted(values) == [n("-3"), n("0.1"), n("1/2"), n("22/7")]


# =============================================================================
# ОКРУГЛЕНИЕ
# =============================================================================


class TestRounding:
    """floor, ceil, trunc, round, truncate"""

    @pytest.mark.parametrize(
        "text, floor, ceil, trunc",
        [
            ("7/2", 3, 4, 3),
            ("-7/2", -4, -3, -3),
            ("5", 5, 5, 5),
            ("-1/10", -1, 0, 0),
        ],
    )
    def test_integer_rounding(self, text: str, floor: int, ceil: int, trunc: int) -> None:
        x = n(text)
        assert x.floor().to_i64() == floor
        assert x.ceil().to_i64() == ceil
        assert x.trunc().to_i64() == trunc

    def test_round_half_away_from_zero(self) -> None:
        """round: половина округляется от нуля"""
        assert n("2.345").round(2) == n("2.35")
        assert n("-2.345").round(2) == n("-2.35")
        assert n("2.5").round() == n("3")
        assert n("1/3").round(3) == n("0.333")

    def test_truncate_toward_zero(self) -> None:
        assert n("2.349").truncate(2) == n("2.34")
        assert n("-2.349").truncate(2) == n("-2.34")
        assert n("2/3").truncate(0) == ZERO
