"""
Formatting — точное отображение Number в текст

Два режима:
- as_decimal: фиксированное число знаков после точки
- as_sigfigs: N значащих цифр, обычная или научная нотация по порядку

Правила округления:
- as_decimal усекает к нулю: каждая показанная цифра — верная цифра
  значения (тот же контракт, что у трансцендентных функций; повышение
  places только дописывает цифры)
- as_sigfigs округляет half-up по модулю (половина от нуля)
- "-0" никогда не печатается

Пороги (FormatConfig, значения по умолчанию):
- 0 < |x| < 10^-6: as_decimal расширяет places, чтобы показать 3 значащие
  цифры ("6.62607015e-34" -> "0.000...0662")
- as_sigfigs: порядок в [-3, 4] -> обычная запись ("123.5", "0.00123"),
  иначе научная ("6.022e23", "6.626e-34")
"""

import logging
from dataclasses import dataclass
from typing import Final

from folio.core.math.number import Number, digit_count, digits_of, div_round_half_up
from folio.core.math.transcendental import MAX_PRECISION

logger = logging.getLogger(__name__)


# =============================================================================
# CONFIG
# =============================================================================


@dataclass(frozen=True)
class FormatConfig:
    """Пороги отображения (политика представления, не корректности)."""

    # |x| < 10^tiny_exponent -> as_decimal показывает значащие цифры
    tiny_exponent: int = -6
    tiny_significant_digits: int = 3

    # Диапазон порядков для обычной записи в as_sigfigs
    sci_min_exponent: int = -3
    sci_max_exponent: int = 4


DEFAULT_FORMAT_CONFIG: Final[FormatConfig] = FormatConfig()


# =============================================================================
# УТИЛИТЫ
# =============================================================================


def decimal_exponent(x: Number) -> int:
    """
    Точный floor(log10|x|) для ненулевого x без float.

    Examples:
        >>> decimal_exponent(Number.from_str("123.456"))
        2
        >>> decimal_exponent(Number.from_str("0.001234"))
        -3
    """
    numerator = abs(x.numerator)
    denominator = x.denominator
    exponent = digit_count(numerator) - digit_count(denominator)

    # n/d лежит в (10^(exponent-1), 10^(exponent+1))
    if exponent >= 0:
        if numerator < denominator * 10**exponent:
            exponent -= 1
    elif numerator * 10 ** (-exponent) < denominator:
        exponent -= 1
    return exponent


def _clamp_digits(requested: int, minimum: int, what: str) -> int:
    """Зажим числа знаков в [minimum, MAX_PRECISION] с предупреждением."""
    requested = int(requested)
    if requested < minimum:
        return minimum
    if requested > MAX_PRECISION:
        logger.warning(
            "Requested %s %d exceeds MAX_PRECISION=%d, clamping",
            what,
            requested,
            MAX_PRECISION,
        )
        return MAX_PRECISION
    return requested


def _render(scaled: int, places: int, negative: bool) -> str:
    """Целое scaled = |x| * 10^places -> текст с точкой."""
    digits = digits_of(scaled)
    if places > 0:
        digits = digits.rjust(places + 1, "0")
        digits = f"{digits[:-places]}.{digits[-places:]}"
    if negative and scaled != 0:
        return "-" + digits
    return digits


# =============================================================================
# ОТОБРАЖЕНИЕ
# =============================================================================


def as_decimal(
    x: Number,
    places: int,
    config: FormatConfig = DEFAULT_FORMAT_CONFIG,
) -> str:
    """
    Десятичная запись с фиксированным числом знаков после точки.

    Args:
        x: Значение
        places: Знаков после точки (зажимается в [0, MAX_PRECISION])
        config: Пороги отображения

    Returns:
        Текст вида "-12.3400"; для очень малых |x| знаков больше, чем places

    Examples:
        >>> as_decimal(Number.from_str("1/3"), 4)
        '0.3333'
        >>> as_decimal(Number.from_i64(-7), 2)
        '-7.00'
        >>> as_decimal(Number.from_str("1e-10"), 10)
        '0.000000000100'
    """
    places = _clamp_digits(places, 0, "places")

    if not x.is_zero():
        exponent = decimal_exponent(x)
        if exponent < config.tiny_exponent:
            places = max(places, config.tiny_significant_digits - 1 - exponent)

    scaled = abs(x.numerator) * 10**places // x.denominator
    return _render(scaled, places, x.is_negative())


def as_sigfigs(
    x: Number,
    sigfigs: int,
    config: FormatConfig = DEFAULT_FORMAT_CONFIG,
) -> str:
    """
    Запись с заданным числом значащих цифр.

    Args:
        x: Значение
        sigfigs: Значащих цифр (зажимается в [1, MAX_PRECISION])
        config: Пороги переключения на научную нотацию

    Returns:
        Обычная запись для порядков в [sci_min_exponent, sci_max_exponent],
        иначе "d.ddde±NN"

    Examples:
        >>> as_sigfigs(Number.from_str("123.456"), 4)
        '123.5'
        >>> as_sigfigs(Number.from_str("602214076e15"), 4)
        '6.022e23'
        >>> as_sigfigs(Number.from_str("6.62607e-34"), 4)
        '6.626e-34'
    """
    sigfigs = _clamp_digits(sigfigs, 1, "sigfigs")
    if x.is_zero():
        return "0"

    numerator = abs(x.numerator)
    denominator = x.denominator
    exponent = decimal_exponent(x)
    shift = sigfigs - 1 - exponent

    if shift >= 0:
        scaled = div_round_half_up(numerator * 10**shift, denominator)
    else:
        scaled = div_round_half_up(numerator, denominator * 10 ** (-shift))

    # Перенос при округлении: 9.996 -> 10.00
    if scaled >= 10**sigfigs:
        scaled //= 10
        exponent += 1
        shift -= 1

    negative = x.is_negative()
    if config.sci_min_exponent <= exponent <= config.sci_max_exponent:
        if shift < 0:
            return _render(scaled * 10 ** (-shift), 0, negative)
        return _render(scaled, shift, negative)

    mantissa = digits_of(scaled)
    if sigfigs > 1:
        mantissa = f"{mantissa[0]}.{mantissa[1:]}"
    sign = "-" if negative else ""
    return f"{sign}{mantissa}e{exponent}"
