"""
Тесты отображения Number

Проверяет:
1. as_decimal: усечение к нулю, расширение для очень малых значений, "-0"
2. as_sigfigs: округление half-up, перенос, обычная/научная нотация
3. FormatConfig: пользовательские пороги
4. str(Number)
"""

import logging

import pytest

from folio.core.math import MAX_PRECISION, FormatConfig, Number, as_decimal, as_sigfigs
from folio.core.math.formatting import decimal_exponent


def n(text: str) -> Number:
    return Number.from_str(text)


def strip_zeros(text: str) -> str:
    if "." not in text:
        return text
    return text.rstrip("0").rstrip(".")


# =============================================================================
# AS_DECIMAL
# =============================================================================


class TestAsDecimal:
    """Фиксированное число знаков после точки"""

    @pytest.mark.parametrize(
        "text, places, expected",
        [
            ("1/3", 4, "0.3333"),
            ("2/3", 4, "0.6666"),
            ("-7", 2, "-7.00"),
            ("0", 3, "0.000"),
            ("2.5", 0, "2"),
            ("-2.9", 0, "-2"),
            ("123.456", 1, "123.4"),
            ("1e20", 1, "100000000000000000000.0"),
        ],
    )
    def test_fixed_places(self, text: str, places: int, expected: str) -> None:
        """Цифры усекаются к нулю"""
        assert as_decimal(n(text), places) == expected

    def test_negative_zero_never_printed(self) -> None:
        assert as_decimal(n("-0.001"), 2) == "0.00"
        assert as_decimal(n("-1/3"), 0) == "0"

    def test_negative_places_treated_as_zero(self) -> None:
        assert as_decimal(n("3.7"), -2) == "3"

    def test_excessive_places_are_clamped(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="folio.core.math.formatting"):
            rendered = as_decimal(n("1/3"), 10**9)
        assert rendered == "0." + "3" * MAX_PRECISION
        assert "clamping" in caplog.text

    @pytest.mark.parametrize("text", ["3.14", "-0.5", "100", "0.000125", "12345.6789", "-42.000001"])
    def test_exact_decimals_reproduced(self, text: str) -> None:
        """Точно представимые десятичные воспроизводятся до хвостовых нулей"""
        assert strip_zeros(as_decimal(n(text), 8)) == text

    @pytest.mark.parametrize(
        "text, suffix",
        [("1e-10", "100"), ("2.5e-8", "250"), ("1.23e-15", "123"), ("-4.56e-9", "456")],
    )
    def test_tiny_values_show_significant_digits(self, text: str, suffix: str) -> None:
        """Значения меньше 10^-6 не превращаются в ноль"""
        rendered = as_decimal(n(text), 10)
        assert rendered.endswith(suffix)
        assert n(text).is_negative() == rendered.startswith("-")

    def test_planck_constant(self) -> None:
        rendered = n("6.62607015e-34").as_decimal(10)
        assert len(rendered) > 30
        assert rendered.endswith("663") or rendered.endswith("662")

    def test_tiny_rule_keeps_larger_places(self) -> None:
        """Запрошенных знаков больше, чем нужно для 3 цифр: берутся запрошенные"""
        assert as_decimal(n("1e-7"), 12) == "0.000000100000"

    def test_str_is_ten_places(self) -> None:
        assert str(n("1/3")) == "0.3333333333"
        assert str(Number.from_i64(-7)) == "-7.0000000000"


# =============================================================================
# AS_SIGFIGS
# =============================================================================


class TestAsSigfigs:
    """Значащие цифры"""

    @pytest.mark.parametrize(
        "text, sigfigs, expected",
        [
            ("123.456", 4, "123.5"),
            ("0.001234", 3, "0.00123"),
            ("12345", 2, "12000"),
            ("2.5", 1, "3"),
            ("-2.5", 1, "-3"),
            ("1/3", 5, "0.33333"),
            ("9.996", 3, "10.0"),
            ("99999.5", 5, "1.0000e5"),
            ("-0.0001234", 3, "-1.23e-4"),
            ("1", 3, "1.00"),
        ],
    )
    def test_values(self, text: str, sigfigs: int, expected: str) -> None:
        assert as_sigfigs(n(text), sigfigs) == expected

    def test_avogadro(self) -> None:
        rendered = n("602214076e15").as_sigfigs(4)
        assert rendered.startswith("6.022")
        assert "e23" in rendered

    def test_planck(self) -> None:
        rendered = n("6.62607e-34").as_sigfigs(4)
        assert rendered == "6.626e-34"
        assert "e-3" in rendered

    def test_zero(self) -> None:
        assert as_sigfigs(Number.from_i64(0), 5) == "0"

    def test_sigfigs_clamped_to_one(self) -> None:
        assert as_sigfigs(n("123.456"), 0) == "100"
        assert as_sigfigs(n("123.456"), -3) == "100"

    def test_excessive_sigfigs_are_clamped(self, caplog) -> None:
        with caplog.at_level(logging.WARNING, logger="folio.core.math.formatting"):
            rendered = as_sigfigs(n("1/3"), 10**9)
        assert len(rendered) == MAX_PRECISION + 2
        assert "clamping" in caplog.text

    def test_single_digit_mantissa_has_no_point(self) -> None:
        assert as_sigfigs(n("7e10"), 1) == "7e10"


# =============================================================================
# CONFIG / УТИЛИТЫ
# =============================================================================


class TestFormatConfig:
    """Пользовательские пороги"""

    def test_default_is_frozen(self) -> None:
        config = FormatConfig()
        with pytest.raises(AttributeError):
            config.tiny_exponent = -3  # type: ignore[misc]

    def test_custom_scientific_range(self) -> None:
        config = FormatConfig(sci_min_exponent=0, sci_max_exponent=0)
        assert as_sigfigs(n("123.456"), 4, config) == "1.235e2"
        assert as_sigfigs(n("1.5"), 2, config) == "1.5"

    def test_custom_tiny_threshold(self) -> None:
        config = FormatConfig(tiny_exponent=-40)
        assert as_decimal(n("6.62607015e-34"), 10, config) == "0.0000000000"


class TestDecimalExponent:
    """Точный floor(log10|x|)"""

    @pytest.mark.parametrize(
        "text, expected",
        [
            ("1", 0),
            ("9.99", 0),
            ("10", 1),
            ("999/1000", -1),
            ("1/1000", -3),
            ("1/999", -3),
            ("-250", 2),
            ("1e5000", 5000),
            ("1e-5000", -5000),
        ],
    )
    def test_exponent(self, text: str, expected: int) -> None:
        assert decimal_exponent(n(text)) == expected
