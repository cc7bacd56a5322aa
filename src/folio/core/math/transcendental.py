"""
Transcendental Engine — sqrt, ln, exp, pow_real, sin/cos/tan, π, e, φ

Каждая функция принимает явный параметр precision: количество верных
цифр после десятичной точки. Точность никогда не хранится в глобальном
состоянии, поэтому независимые вызывающие (разные секции документа,
разные плагины) не мешают друг другу.

Схема вычислений:
- Внутренние ряды считаются в целых числах с фиксированной точкой
  (значение * 10^wp), wp = precision + GUARD_DIGITS (+ поправка на порядок)
- Результат — истинное значение, усечённое к нулю до precision знаков
- Повышение precision только дописывает цифры, не меняя уже выданные

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Каждый итерационный цикл ограничен (MAX_SERIES_TERMS, NEWTON_MAX_ITERATIONS)
2. При достижении лимита: лучшее приближение (тотальные функции)
   или Overflow (частичные функции), без бесконечных циклов
3. precision зажимается в [0, MAX_PRECISION]
4. Вне области определения — DomainError, никогда не падение процесса

АЛГОРИТМЫ:
    sqrt:  Ньютон x' = (x + a/x) / 2 в точной рациональной арифметике
    ln:    x = m * 2^k, m in [2/3, 4/3); ln m = 2*atanh((m-1)/(m+1))
    exp:   e^x = e^n * e^r, n = floor(x), r in [0, 1) — ряд Тейлора
    sin:   редукция по модулю 2π в (-π, π], ряд Тейлора
    π:     ряд Чудновского с binary splitting
    e:     Σ 1/k!
    φ:     (1 + sqrt(5)) / 2
"""

import logging
import math
from typing import Final

from folio.core.math.errors import DivisionByZero, DomainError, Overflow
from folio.core.math.number import (
    DEFAULT_PRECISION,
    ONE,
    TWO,
    ZERO,
    Number,
    digit_count,
    div_round_half_up,
)

logger = logging.getLogger(__name__)

# =============================================================================
# ПАРАМЕТРЫ ТОЧНОСТИ И ЛИМИТЫ
# =============================================================================

# Защитные цифры сверх запрошенной точности
GUARD_DIGITS: Final[int] = 10

# Максимальная точность; больший запрос зажимается
MAX_PRECISION: Final[int] = 10_000

# Лимит членов любого ряда (достаточен для MAX_PRECISION)
MAX_SERIES_TERMS: Final[int] = 50_000

# Лимит итераций Ньютона для sqrt
NEWTON_MAX_ITERATIONS: Final[int] = 200

# exp(x) при x > лимита даёт больше ~43 тысяч цифр целой части
EXP_ARGUMENT_LIMIT: Final[int] = 100_000

LOG10_E: Final[float] = 0.4342944819032518

# Знаменатель показателя, до которого pow_real ищет точный корень
EXACT_ROOT_MAX_DEGREE: Final[int] = 64
EXACT_ROOT_MAX_BITS: Final[int] = 1_000

# Константы ряда Чудновского
_CHUDNOVSKY_A: Final[int] = 13591409
_CHUDNOVSKY_B: Final[int] = 545140134
_CHUDNOVSKY_C3_OVER_24: Final[int] = 640320**3 // 24
_CHUDNOVSKY_DIGITS_PER_TERM: Final[float] = 14.181647462725477


# =============================================================================
# ФИКСИРОВАННАЯ ТОЧКА
# =============================================================================


def normalize_precision(precision: int) -> int:
    """
    Зажим запрошенной точности в [0, MAX_PRECISION].

    Args:
        precision: Запрошенное число цифр после точки

    Returns:
        Рабочая точность
    """
    precision = int(precision)
    if precision < 0:
        return 0
    if precision > MAX_PRECISION:
        logger.warning(
            "Requested precision %d exceeds MAX_PRECISION=%d, clamping",
            precision,
            MAX_PRECISION,
        )
        return MAX_PRECISION
    return precision


def _to_fixed(value: Number, wp: int) -> int:
    return div_round_half_up(value.numerator * 10**wp, value.denominator)


def _finish(value: int, wp: int, precision: int) -> Number:
    """Фиксированная точка wp -> Number, усечённый до precision знаков."""
    return Number.from_ratio(value, 10**wp).truncate(precision)


def _fixed_pow(base: int, exponent: int, wp: int) -> int:
    """base^exponent в фиксированной точке, возведение в квадрат."""
    one = 10**wp
    result = one
    while exponent:
        if exponent & 1:
            result = result * base // one
        exponent >>= 1
        if exponent:
            base = base * base // one
    return result


# =============================================================================
# РЯДЫ
# =============================================================================


def _e_fixed(wp: int) -> int:
    """e = Σ 1/k! в фиксированной точке."""
    total = 0
    term = 10**wp
    for k in range(1, MAX_SERIES_TERMS):
        total += term
        term //= k
        if term == 0:
            return total

    logger.warning("e series hit MAX_SERIES_TERMS=%d at %d digits", MAX_SERIES_TERMS, wp)
    return total


def _exp_series_fixed(fraction: int, wp: int) -> int:
    """e^r для 0 <= r <= 1 (r в фиксированной точке)."""
    one = 10**wp
    total = 0
    term = one
    for k in range(1, MAX_SERIES_TERMS):
        total += term
        term = term * fraction // (one * k)
        if term == 0:
            return total

    logger.warning("exp series hit MAX_SERIES_TERMS=%d at %d digits", MAX_SERIES_TERMS, wp)
    return total


def _atanh_fixed(numerator: int, denominator: int, wp: int) -> int:
    """
    atanh(z) = z + z^3/3 + z^5/5 + ... для 0 <= z = numerator/denominator < 1.

    Неотрицательный аргумент: целочисленное деление с floor тогда
    гарантированно доводит члены до нуля.
    """
    one = 10**wp
    z = numerator * one // denominator
    z_squared = z * z // one
    total = 0
    power = z
    for k in range(MAX_SERIES_TERMS):
        term = power // (2 * k + 1)
        if term == 0:
            return total
        total += term
        power = power * z_squared // one

    logger.warning("atanh series hit MAX_SERIES_TERMS=%d at %d digits", MAX_SERIES_TERMS, wp)
    return total


def _ln2_fixed(wp: int) -> int:
    # ln 2 = 2 * atanh(1/3)
    return 2 * _atanh_fixed(1, 3, wp)


def _chudnovsky_split(a: int, b: int) -> tuple[int, int, int]:
    """
    Binary splitting ряда Чудновского на [a, b).

    Правило объединения [a, m) и [m, b):
        P = P1 * P2
        Q = Q1 * Q2
        T = T1 * Q2 + T2 * P1
    """
    if b - a == 1:
        k = a
        if k == 0:
            p_value = q_value = 1
        else:
            p_value = (6 * k - 5) * (2 * k - 1) * (6 * k - 1)
            q_value = k * k * k * _CHUDNOVSKY_C3_OVER_24
        t_value = p_value * (_CHUDNOVSKY_A + _CHUDNOVSKY_B * k)
        if k & 1:
            t_value = -t_value
        return p_value, q_value, t_value

    middle = (a + b) // 2
    p1, q1, t1 = _chudnovsky_split(a, middle)
    p2, q2, t2 = _chudnovsky_split(middle, b)
    return p1 * p2, q1 * q2, t1 * q2 + t2 * p1


def _pi_fixed(wp: int) -> int:
    """π = 426880 * sqrt(10005) * Q / T в фиксированной точке."""
    terms = int(wp / _CHUDNOVSKY_DIGITS_PER_TERM) + 2
    _, q_value, t_value = _chudnovsky_split(0, terms)
    sqrt_10005 = math.isqrt(10005 * 10 ** (2 * wp))
    return 426880 * sqrt_10005 * q_value // t_value


def _sin_fixed(angle: int, wp: int) -> int:
    """Ряд Тейлора sin для |angle| <= π."""
    one = 10**wp
    negative = angle < 0
    angle = abs(angle)
    square = angle * angle // one
    total = 0
    term = angle
    for k in range(1, MAX_SERIES_TERMS):
        total += term if k % 2 else -term
        term = term * square // (one * (2 * k) * (2 * k + 1))
        if term == 0:
            return -total if negative else total

    logger.warning("sin series hit MAX_SERIES_TERMS=%d at %d digits", MAX_SERIES_TERMS, wp)
    return -total if negative else total


def _cos_fixed(angle: int, wp: int) -> int:
    """Ряд Тейлора cos для |angle| <= π."""
    one = 10**wp
    angle = abs(angle)
    square = angle * angle // one
    total = 0
    term = one
    for k in range(1, MAX_SERIES_TERMS):
        total += term if k % 2 else -term
        term = term * square // (one * (2 * k - 1) * (2 * k))
        if term == 0:
            return total

    logger.warning("cos series hit MAX_SERIES_TERMS=%d at %d digits", MAX_SERIES_TERMS, wp)
    return total


def _reduce_angle(x: Number, precision: int) -> tuple[int, int]:
    """
    Редукция угла по модулю 2π в (-π, π].

    Погрешность π умножается на число оборотов, поэтому рабочая точность
    расширяется на количество цифр целой части аргумента.

    Returns:
        (angle, wp): угол в фиксированной точке и рабочая точность

    Raises:
        Overflow: Целая часть аргумента длиннее MAX_PRECISION цифр
    """
    whole_digits = digit_count(abs(x.numerator) // x.denominator)
    if whole_digits > MAX_PRECISION:
        raise Overflow(f"angle has {whole_digits} integer digits, cannot reduce modulo 2π")

    wp = precision + GUARD_DIGITS + whole_digits
    pi_value = _pi_fixed(wp)
    two_pi = 2 * pi_value
    angle = _to_fixed(x, wp) % two_pi
    if angle > pi_value:
        angle -= two_pi
    return angle, wp


def _integer_root(value: int, degree: int) -> int | None:
    """
    Точный целый корень степени degree, либо None.

    Целочисленный Ньютон r' = ((d-1)*r + value // r^(d-1)) // d от
    приближения сверху монотонно спускается к floor(value^(1/d)).
    """
    if value < 2:
        return value
    if degree == 2:
        root = math.isqrt(value)
        return root if root * root == value else None

    root = 1 << (value.bit_length() // degree + 1)
    for _ in range(NEWTON_MAX_ITERATIONS):
        candidate = ((degree - 1) * root + value // root ** (degree - 1)) // degree
        if candidate >= root:
            return root if root**degree == value else None
        root = candidate

    logger.warning("integer root did not converge in %d iterations", NEWTON_MAX_ITERATIONS)
    return None


def _exact_rational_power(base: Number, exponent: Number) -> Number | None:
    """base^(p/q) точно, если base — точная q-я степень рационального."""
    degree = exponent.denominator
    if degree > EXACT_ROOT_MAX_DEGREE or base.is_negative():
        return None
    if max(base.numerator.bit_length(), base.denominator.bit_length()) > EXACT_ROOT_MAX_BITS:
        return None

    root_numerator = _integer_root(base.numerator, degree)
    root_denominator = _integer_root(base.denominator, degree)
    if root_numerator is None or root_denominator is None:
        return None
    return Number.from_ratio(root_numerator, root_denominator).pow(exponent.numerator)


# =============================================================================
# ЧАСТИЧНЫЕ ФУНКЦИИ
# =============================================================================


def sqrt(x: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """
    Квадратный корень методом Ньютона–Рафсона.

    Итерации ведутся в точной рациональной арифметике; каждое приближение
    округляется до рабочей точности, чтобы знаменатели не росли.
    Начальное приближение — float sqrt (или целочисленный корень, если
    значение вне диапазона float). Остановка: |x_{n+1} - x_n| < 10^-(p + GUARD/2).

    Args:
        x: Подкоренное значение
        precision: Цифр после точки

    Returns:
        sqrt(x), усечённый до precision знаков (точный для полных квадратов)

    Raises:
        DomainError: x < 0
        Overflow: Итерации не сошлись за NEWTON_MAX_ITERATIONS

    Examples:
        >>> sqrt(Number.from_i64(4), 50)
        Number(numerator=2, denominator=1)
        >>> sqrt(Number.from_i64(5), 4).as_decimal(4)
        '2.2360'
    """
    if x.is_negative():
        raise DomainError("square root of negative number")

    p = normalize_precision(precision)
    if x.is_zero():
        return ZERO

    root_numerator = math.isqrt(x.numerator)
    root_denominator = math.isqrt(x.denominator)
    if root_numerator**2 == x.numerator and root_denominator**2 == x.denominator:
        return Number.from_ratio(root_numerator, root_denominator)

    # sqrt(x) < 10^-(p+1) -> после усечения ноль
    if x < Number(1, 10 ** (2 * (p + 1))):
        return ZERO

    wp = p + GUARD_DIGITS
    tolerance = Number(1, 10 ** (p + GUARD_DIGITS // 2))
    estimate = _sqrt_seed(x)
    for _ in range(NEWTON_MAX_ITERATIONS):
        improved = estimate.add(x.checked_div(estimate)).checked_div(TWO).round(wp)
        if improved.sub(estimate).abs() < tolerance:
            return improved.truncate(p)
        estimate = improved

    raise Overflow(f"sqrt did not converge in {NEWTON_MAX_ITERATIONS} iterations")


def _sqrt_seed(x: Number) -> Number:
    approx = x.to_f64()
    if approx is not None and approx > 0.0:
        root = math.sqrt(approx)
        if root > 0.0:
            return Number.from_f64(root)

    # Вне диапазона float: sqrt(n/d) = sqrt(n*d)/d
    return Number(max(math.isqrt(x.numerator * x.denominator), 1), x.denominator)


def ln(x: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """
    Натуральный логарифм.

    Редукция аргумента степенями двойки: x = m * 2^k, m in [2/3, 4/3).
    Затем ln m = ln((1+z)/(1-z)) = 2 * atanh(z), z = (m-1)/(m+1), |z| <= 1/5,
    и восстановление ln x = ln m + k * ln 2.

    Args:
        x: Аргумент (> 0)
        precision: Цифр после точки

    Returns:
        ln(x), усечённый к нулю до precision знаков

    Raises:
        DomainError: x <= 0

    Examples:
        >>> ln(Number.from_i64(10), 50).as_decimal(5)
        '2.30258'
    """
    if not x.is_positive():
        raise DomainError("logarithm of non-positive number")

    p = normalize_precision(precision)
    if x == ONE:
        return ZERO

    numerator, denominator = x.numerator, x.denominator
    shift = numerator.bit_length() - denominator.bit_length()
    if shift >= 0:
        denominator <<= shift
    else:
        numerator <<= -shift

    # m = x / 2^shift в (1/2, 2); сдвигаем в [2/3, 4/3)
    if 3 * numerator >= 4 * denominator:
        denominator <<= 1
        shift += 1
    elif 3 * numerator < 2 * denominator:
        numerator <<= 1
        shift -= 1

    # Погрешность ln 2 умножается на shift
    wp = p + GUARD_DIGITS + digit_count(shift)
    difference = numerator - denominator
    series = 2 * _atanh_fixed(abs(difference), numerator + denominator, wp)
    value = -series if difference < 0 else series
    if shift:
        value += shift * _ln2_fixed(wp)

    return _finish(value, wp, p)


def pow_real(base: Number, exponent: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """
    Вещественная степень base^exponent = exp(exponent * ln(base)).

    Целый показатель считается точно через Number.pow (в том числе для
    отрицательного base). Дробный показатель p/q даёт точный результат,
    если base — точная q-я степень рационального (4^0.5 = 2).

    Args:
        base: Основание
        exponent: Показатель
        precision: Цифр после точки

    Returns:
        base^exponent

    Raises:
        DomainError: Отрицательное base при нецелом показателе (из ln)
        DivisionByZero: 0 в отрицательной степени
        Overflow: Результат больше границы exp

    Examples:
        >>> pow_real(Number.from_i64(10), Number.from_str("2.5"), 20).as_decimal(1)
        '316.2'
    """
    p = normalize_precision(precision)
    if exponent.is_integer():
        return base.pow(exponent.numerator)

    if base.is_zero():
        if exponent.is_negative():
            raise DivisionByZero()
        return ZERO

    exact = _exact_rational_power(base, exponent)
    if exact is not None:
        return exact

    exponent_digits = digit_count(abs(exponent.numerator) // exponent.denominator)

    # Оценка exponent * ln(base) для выбора рабочей точности; погрешность
    # ln умножается на exponent, поэтому точность растёт с его порядком
    rough = ln(base, GUARD_DIGITS + exponent_digits).mul(exponent)
    if rough > EXP_ARGUMENT_LIMIT:
        raise Overflow(f"pow_real result exceeds e^{EXP_ARGUMENT_LIMIT}")

    magnitude = 0
    if rough.is_positive():
        magnitude = int(rough.to_f64() * LOG10_E) + 1

    log_base = ln(base, p + GUARD_DIGITS + magnitude + exponent_digits)
    return exp(log_base.mul(exponent), p)


def tan(x: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """
    Тангенс sin(x) / cos(x).

    Полюс: cos(x) равен нулю на рабочей точности, т.е.
    |cos(x)| < 10^-(precision + GUARD_DIGITS). Вне полюса погрешность
    частного растёт как 1/cos^2, поэтому точность расширяется на удвоенное
    число потерянных ведущих цифр cos.

    Raises:
        DomainError: cos(x) равен нулю на рабочей точности
        Overflow: Аргумент слишком велик для редукции
    """
    p = normalize_precision(precision)
    if x.is_zero():
        return ZERO

    angle, wp = _reduce_angle(x, p)
    cosine = _cos_fixed(angle, wp)
    if abs(cosine) * 10 ** (p + GUARD_DIGITS) < 10**wp:
        raise DomainError("tan undefined at odd multiples of π/2")

    lost_digits = max(0, wp - digit_count(cosine) + 1)
    if lost_digits:
        angle, wp = _reduce_angle(x, p + 2 * lost_digits)
        cosine = _cos_fixed(angle, wp)

    sine = _sin_fixed(angle, wp)
    return Number.from_ratio(sine, cosine).truncate(p)


# =============================================================================
# ТОТАЛЬНЫЕ ФУНКЦИИ
# =============================================================================


def exp(x: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """
    Экспонента e^x.

    x = n + r, n = floor(x), r in [0, 1). e^n — возведение в квадрат
    заранее вычисленного e, e^r — короткий ряд Тейлора. Длина ряда не
    зависит от величины x.

    Args:
        x: Показатель
        precision: Цифр после точки

    Returns:
        e^x, усечённый до precision знаков (0 для x < -3*(precision+2))

    Raises:
        Overflow: x > EXP_ARGUMENT_LIMIT (граница размера результата)
    """
    p = normalize_precision(precision)
    if x.is_zero():
        return ONE
    if x > EXP_ARGUMENT_LIMIT:
        raise Overflow(f"exp argument exceeds {EXP_ARGUMENT_LIMIT}")
    # e^x < 10^-(p+2): после усечения ноль
    if x < -3 * (p + 2):
        return ZERO

    whole = x.numerator // x.denominator
    fraction = x.sub(Number.from_i64(whole))

    magnitude = int(whole * LOG10_E) + 1 if whole > 0 else 0
    wp = p + GUARD_DIGITS + magnitude + digit_count(whole)
    one = 10**wp

    value = _exp_series_fixed(_to_fixed(fraction, wp), wp)
    if whole > 0:
        value = value * _fixed_pow(_e_fixed(wp), whole, wp) // one
    elif whole < 0:
        value = value * one // _fixed_pow(_e_fixed(wp), -whole, wp)

    return _finish(value, wp, p)


def sin(x: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """
    Синус: редукция по модулю 2π, затем ряд Тейлора.

    Raises:
        Overflow: Целая часть аргумента длиннее MAX_PRECISION цифр
    """
    p = normalize_precision(precision)
    if x.is_zero():
        return ZERO
    angle, wp = _reduce_angle(x, p)
    return _finish(_sin_fixed(angle, wp), wp, p)


def cos(x: Number, precision: int = DEFAULT_PRECISION) -> Number:
    """Косинус: редукция по модулю 2π, затем ряд Тейлора."""
    p = normalize_precision(precision)
    if x.is_zero():
        return ONE
    angle, wp = _reduce_angle(x, p)
    return _finish(_cos_fixed(angle, wp), wp, p)


# =============================================================================
# КОНСТАНТЫ
# =============================================================================


def pi(precision: int = DEFAULT_PRECISION) -> Number:
    """
    π через ряд Чудновского (~14 цифр на член).

    Examples:
        >>> pi(5).as_decimal(5)
        '3.14159'
    """
    p = normalize_precision(precision)
    wp = p + GUARD_DIGITS
    return _finish(_pi_fixed(wp), wp, p)


def e(precision: int = DEFAULT_PRECISION) -> Number:
    """
    Число Эйлера e = Σ 1/k!.

    Examples:
        >>> e(3).as_decimal(3)
        '2.718'
    """
    p = normalize_precision(precision)
    wp = p + GUARD_DIGITS
    return _finish(_e_fixed(wp), wp, p)


def phi(precision: int = DEFAULT_PRECISION) -> Number:
    """
    Золотое сечение φ = (1 + sqrt(5)) / 2.

    Examples:
        >>> phi(3).as_decimal(3)
        '1.618'
    """
    p = normalize_precision(precision)
    root_five = sqrt(Number.from_i64(5), p + GUARD_DIGITS)
    return ONE.add(root_five).checked_div(TWO).truncate(p)
