"""
Number — точное рациональное число произвольной точности

Единственный числовой тип системы: через него считают evaluator и все
плагины (finance, stats, matrix, units, text, sequence).

Представление:
- numerator: знаковое целое произвольной точности (знак числа)
- denominator: строго положительное целое произвольной точности
- gcd(numerator, denominator) == 1, ноль хранится как 0/1

КРИТИЧЕСКИЕ ИНВАРИАНТЫ:
1. Несократимость выполняется после каждой операции
2. Number неизменяем: каждая операция возвращает новый Number
3. Сравнения только через перекрёстное умножение целых (без float)
4. Ни один операнд не приводит к падению: сбой = типизированный NumberError
5. Частичные операции: from_str, from_ratio, checked_div и pow
   (0^-n -> DivisionByZero, результат больше MAX_POWER_BITS -> Overflow);
   add, sub, mul, сравнения и округления тотальны

Грамматики from_str:
    "123", "-42"            целое
    "3.14", ".5", "2."      десятичная дробь
    "1/3", "-7 / 8"         явная дробь
    "1.5e2", "602214076e15" научная нотация (без float-промежуточных)
"""

import math
import re
from dataclasses import dataclass
from typing import Final

from pydantic_core import core_schema

from folio.core.math.errors import DivisionByZero, DomainError, NumberError, Overflow, ParseError

# =============================================================================
# ПАРАМЕТРЫ
# =============================================================================

# Точность по умолчанию для трансцендентных функций (цифр после точки)
DEFAULT_PRECISION: Final[int] = 50

# Граница порядка в научной нотации: 10^100000 уже ~41 КБ целого
MAX_DECIMAL_EXPONENT: Final[int] = 100_000

# Граница размера результата pow (бит в числителе/знаменателе)
MAX_POWER_BITS: Final[int] = 8_000_000

# Диапазон signed 64-bit для to_i64
I64_MIN: Final[int] = -(2**63)
I64_MAX: Final[int] = 2**63 - 1

# int <-> str в CPython ограничен 4300 цифрами, работаем кусками
_STR_CHUNK: Final[int] = 1000
_CHUNK_BASE: Final[int] = 10**_STR_CHUNK

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")
_DECIMAL_RE = re.compile(r"(?P<sign>[+-]?)(?P<whole>[0-9]*)\.(?P<frac>[0-9]*)")
_FRACTION_RE = re.compile(r"(?P<num>[+-]?[0-9]+)\s*/\s*(?P<den>[+-]?[0-9]+)")
_SCIENTIFIC_RE = re.compile(
    r"(?P<mantissa>[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+))[eE](?P<exponent>[+-]?[0-9]+)"
)


# =============================================================================
# ЦЕЛОЧИСЛЕННЫЕ УТИЛИТЫ
# =============================================================================


def int_from_digits(digits: str) -> int:
    """
    Разбор десятичной строки в int без ограничения на длину.

    Args:
        digits: Строка цифр, допускается ведущий знак

    Returns:
        Целое значение
    """
    sign = 1
    if digits[:1] in ("+", "-"):
        sign = -1 if digits[0] == "-" else 1
        digits = digits[1:]

    if len(digits) <= _STR_CHUNK:
        return sign * int(digits)

    value = 0
    for start in range(0, len(digits), _STR_CHUNK):
        chunk = digits[start : start + _STR_CHUNK]
        value = value * 10 ** len(chunk) + int(chunk)
    return sign * value


def digits_of(value: int) -> str:
    """
    Десятичная запись неотрицательного int без ограничения на длину.

    Examples:
        >>> digits_of(1024)
        '1024'
    """
    if value < _CHUNK_BASE:
        return str(value)

    chunks = []
    while value >= _CHUNK_BASE:
        value, low = divmod(value, _CHUNK_BASE)
        chunks.append(str(low).rjust(_STR_CHUNK, "0"))
    chunks.append(str(value))
    return "".join(reversed(chunks))


def digit_count(value: int) -> int:
    """Количество десятичных цифр в abs(value) (для нуля — 1)."""
    return len(digits_of(abs(value)))


def div_round_half_up(numerator: int, denominator: int) -> int:
    """
    Целочисленное деление с округлением half-up по модулю.

    Половина округляется от нуля (как round_half_up в бухгалтерии).

    Args:
        numerator: Делимое (любой знак)
        denominator: Делитель (> 0)

    Examples:
        >>> div_round_half_up(5, 2)
        3
        >>> div_round_half_up(-5, 2)
        -3
        >>> div_round_half_up(7, 3)
        2
    """
    quotient, remainder = divmod(abs(numerator), denominator)
    if 2 * remainder >= denominator:
        quotient += 1
    return -quotient if numerator < 0 else quotient


def div_toward_zero(numerator: int, denominator: int) -> int:
    """Целочисленное деление с усечением к нулю (denominator > 0)."""
    quotient = abs(numerator) // denominator
    return -quotient if numerator < 0 else quotient


def _parse_mantissa(text: str) -> tuple[int, int]:
    """Мантисса "3.14" -> (314, 100), "42" -> (42, 1)."""
    match = _DECIMAL_RE.fullmatch(text)
    if match is None:
        return int_from_digits(text), 1

    whole = match.group("whole")
    frac = match.group("frac")
    if not whole and not frac:
        raise ParseError(text)

    numerator = int_from_digits((whole + frac) or "0")
    if match.group("sign") == "-":
        numerator = -numerator
    return numerator, 10 ** len(frac)


# =============================================================================
# NUMBER
# =============================================================================


@dataclass(frozen=True, eq=False)
class Number:
    """
    Точное рациональное число: numerator / denominator в несократимом виде.

    Immutable value object (frozen=True). Равенство и hash по значению:
    после нормализации два равных рациональных числа имеют одинаковые поля.
    Целые операнды приводятся: Number.from_i64(3) == 3, hash совпадает с int.

    Examples:
        >>> Number(2, 4)
        Number(numerator=1, denominator=2)
        >>> Number(3, -6)
        Number(numerator=-1, denominator=2)
    """

    numerator: int = 0
    denominator: int = 1

    def __post_init__(self) -> None:
        numerator = self.numerator
        denominator = self.denominator

        if not isinstance(numerator, int) or not isinstance(denominator, int):
            raise TypeError(
                f"Number requires int parts, got {type(numerator).__name__}/"
                f"{type(denominator).__name__}"
            )
        if denominator == 0:
            raise DomainError("denominator must be non-zero")

        if denominator < 0:
            numerator, denominator = -numerator, -denominator

        divisor = math.gcd(numerator, denominator)
        if divisor != 1:
            numerator //= divisor
            denominator //= divisor

        object.__setattr__(self, "numerator", numerator)
        object.__setattr__(self, "denominator", denominator)

    @classmethod
    def _from_reduced(cls, numerator: int, denominator: int) -> "Number":
        """Конструктор без gcd: вызывающий гарантирует несократимость и den > 0."""
        number = object.__new__(cls)
        object.__setattr__(number, "numerator", numerator)
        object.__setattr__(number, "denominator", denominator)
        return number

    # =========================================================================
    # КОНСТРУИРОВАНИЕ
    # =========================================================================

    @classmethod
    def from_i64(cls, value: int) -> "Number":
        """Целое -> Number (всегда успешно)."""
        return cls._from_reduced(int(value), 1)

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> "Number":
        """
        Дробь numerator/denominator, сокращённая до несократимой.

        Raises:
            DomainError: Если denominator == 0
        """
        return cls(numerator, denominator)

    @classmethod
    def from_str(cls, text: str) -> "Number":
        """
        Разбор текста в точное рациональное число.

        Целая мантисса научной нотации масштабируется как
        mantissa * 10^exponent в целых числах: "602214076e15" точно равно
        602214076000000000000000, без потерь float64.

        Args:
            text: Текст числа (пробелы по краям игнорируются)

        Returns:
            Number

        Raises:
            ParseError: Текст вне поддерживаемых грамматик
            DivisionByZero: Явная дробь с нулевым знаменателем
            Overflow: Порядок научной нотации больше MAX_DECIMAL_EXPONENT

        Examples:
            >>> Number.from_str("1.5e2")
            Number(numerator=150, denominator=1)
            >>> Number.from_str("1/3")
            Number(numerator=1, denominator=3)
        """
        if not isinstance(text, str):
            raise ParseError(repr(text))

        stripped = text.strip()
        if not stripped:
            raise ParseError(text)

        if _INTEGER_RE.fullmatch(stripped):
            return cls._from_reduced(int_from_digits(stripped), 1)

        if _DECIMAL_RE.fullmatch(stripped):
            numerator, denominator = _parse_mantissa(stripped)
            return cls(numerator, denominator)

        match = _FRACTION_RE.fullmatch(stripped)
        if match is not None:
            denominator = int_from_digits(match.group("den"))
            if denominator == 0:
                raise DivisionByZero()
            return cls(int_from_digits(match.group("num")), denominator)

        match = _SCIENTIFIC_RE.fullmatch(stripped)
        if match is not None:
            exponent_text = match.group("exponent")
            if len(exponent_text.lstrip("+-").lstrip("0")) > 7:
                raise Overflow(f"decimal exponent out of range in {stripped!r}")
            exponent = int(exponent_text)
            if abs(exponent) > MAX_DECIMAL_EXPONENT:
                raise Overflow(
                    f"decimal exponent {exponent} exceeds ±{MAX_DECIMAL_EXPONENT}"
                )

            numerator, denominator = _parse_mantissa(match.group("mantissa"))
            if exponent >= 0:
                numerator *= 10**exponent
            else:
                denominator *= 10 ** (-exponent)
            return cls(numerator, denominator)

        raise ParseError(text)

    @classmethod
    def from_f64(cls, value: float) -> "Number":
        """
        float -> Number через кратчайшую десятичную запись (repr).

        0.1 становится ровно 1/10, а не двоичным приближением.
        NaN/Inf санитизируются в ноль.

        Examples:
            >>> Number.from_f64(0.1)
            Number(numerator=1, denominator=10)
            >>> Number.from_f64(float("nan"))
            Number(numerator=0, denominator=1)
        """
        value = float(value)
        if not math.isfinite(value):
            return ZERO
        return cls.from_str(repr(value))

    # =========================================================================
    # ПРЕДИКАТЫ И ПРЕОБРАЗОВАНИЯ
    # =========================================================================

    def is_zero(self) -> bool:
        return self.numerator == 0

    def is_negative(self) -> bool:
        return self.numerator < 0

    def is_positive(self) -> bool:
        return self.numerator > 0

    def is_integer(self) -> bool:
        return self.denominator == 1

    def to_i64(self) -> int | None:
        """
        Сужение до signed 64-bit.

        Returns:
            int, либо None если число нецелое или вне диапазона i64
        """
        if self.denominator != 1:
            return None
        if not I64_MIN <= self.numerator <= I64_MAX:
            return None
        return self.numerator

    def to_f64(self) -> float | None:
        """
        Сужение до float (с потерей точности).

        Деление int / int в Python корректно округляется.

        Returns:
            float, либо None если значение вне диапазона float
        """
        try:
            return self.numerator / self.denominator
        except OverflowError:
            return None

    def as_fraction(self) -> str:
        """
        Точная каноническая запись: "n" или "n/d".

        Обратима через from_str.
        """
        numerator = ("-" if self.numerator < 0 else "") + digits_of(abs(self.numerator))
        if self.denominator == 1:
            return numerator
        return f"{numerator}/{digits_of(self.denominator)}"

    # =========================================================================
    # АРИФМЕТИКА
    # =========================================================================

    def add(self, other: "Number") -> "Number":
        return Number(
            self.numerator * other.denominator + other.numerator * self.denominator,
            self.denominator * other.denominator,
        )

    def sub(self, other: "Number") -> "Number":
        return Number(
            self.numerator * other.denominator - other.numerator * self.denominator,
            self.denominator * other.denominator,
        )

    def mul(self, other: "Number") -> "Number":
        return Number(
            self.numerator * other.numerator,
            self.denominator * other.denominator,
        )

    def checked_div(self, other: "Number") -> "Number":
        """
        Точное деление.

        Raises:
            DivisionByZero: Если other == 0
        """
        if other.is_zero():
            raise DivisionByZero()
        return Number(
            self.numerator * other.denominator,
            self.denominator * other.numerator,
        )

    def pow(self, exponent: int) -> "Number":
        """
        Точная целая степень.

        Отрицательная степень — обратная к положительной; x^0 = 1,
        включая 0^0 = 1. Числитель и знаменатель возводятся отдельно
        (int.__pow__ — бинарное возведение в квадрат), поэтому
        1.003^300 остаётся точным.

        Args:
            exponent: Целый показатель (любого знака)

        Returns:
            self ** exponent

        Raises:
            DivisionByZero: 0 в отрицательной степени
            Overflow: Размер результата больше MAX_POWER_BITS

        Examples:
            >>> Number.from_i64(2).pow(10)
            Number(numerator=1024, denominator=1)
            >>> Number.from_i64(2).pow(-2)
            Number(numerator=1, denominator=4)
        """
        exponent = int(exponent)
        if exponent == 0:
            return ONE

        if self.is_zero():
            if exponent < 0:
                raise DivisionByZero()
            return ZERO

        if self.denominator == 1 and abs(self.numerator) == 1:
            if self.numerator == 1 or exponent % 2 == 0:
                return ONE
            return self

        size_bits = abs(exponent) * max(
            self.numerator.bit_length(), self.denominator.bit_length()
        )
        if size_bits > MAX_POWER_BITS:
            raise Overflow(f"power result needs ~{size_bits} bits (> {MAX_POWER_BITS})")

        count = abs(exponent)
        numerator = self.numerator**count
        denominator = self.denominator**count
        if exponent < 0:
            numerator, denominator = denominator, numerator
            if denominator < 0:
                numerator, denominator = -numerator, -denominator

        # Степени взаимно простых чисел взаимно просты
        return Number._from_reduced(numerator, denominator)

    def abs(self) -> "Number":
        if self.numerator >= 0:
            return self
        return Number._from_reduced(-self.numerator, self.denominator)

    def neg(self) -> "Number":
        return Number._from_reduced(-self.numerator, self.denominator)

    # =========================================================================
    # ОКРУГЛЕНИЕ
    # =========================================================================

    def floor(self) -> "Number":
        """Наибольшее целое <= x."""
        return Number._from_reduced(self.numerator // self.denominator, 1)

    def ceil(self) -> "Number":
        """Наименьшее целое >= x."""
        return Number._from_reduced(-(-self.numerator // self.denominator), 1)

    def trunc(self) -> "Number":
        """Целая часть с усечением к нулю."""
        return Number._from_reduced(div_toward_zero(self.numerator, self.denominator), 1)

    def round(self, places: int = 0) -> "Number":
        """
        Округление до places знаков после точки (round-half-up по модулю).

        Examples:
            >>> Number.from_str("2.345").round(2)
            Number(numerator=47, denominator=20)
        """
        scale = 10 ** max(0, places)
        return Number(div_round_half_up(self.numerator * scale, self.denominator), scale)

    def truncate(self, places: int = 0) -> "Number":
        """Усечение к нулю до places знаков после точки."""
        scale = 10 ** max(0, places)
        return Number(div_toward_zero(self.numerator * scale, self.denominator), scale)

    # =========================================================================
    # СРАВНЕНИЕ
    # =========================================================================

    def compare(self, other: "Number") -> int:
        """
        Трёхзначное сравнение через перекрёстное умножение.

        Returns:
            -1 если self < other, 0 если равны, +1 если self > other
        """
        left = self.numerator * other.denominator
        right = other.numerator * self.denominator
        if left < right:
            return -1
        if left > right:
            return 1
        return 0

    def __eq__(self, other: object) -> bool:
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return (
            self.numerator == other_number.numerator
            and self.denominator == other_number.denominator
        )

    def __hash__(self) -> int:
        # Целое значение хешируется как int: Number(3) == 3
        if self.denominator == 1:
            return hash(self.numerator)
        return hash((self.numerator, self.denominator))

    def __lt__(self, other: "Number | int") -> bool:
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.compare(other_number) < 0

    def __le__(self, other: "Number | int") -> bool:
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.compare(other_number) <= 0

    def __gt__(self, other: "Number | int") -> bool:
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.compare(other_number) > 0

    def __ge__(self, other: "Number | int") -> bool:
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.compare(other_number) >= 0

    # =========================================================================
    # ОПЕРАТОРЫ
    # =========================================================================

    def __add__(self, other: "Number | int") -> "Number":
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.add(other_number)

    def __radd__(self, other: int) -> "Number":
        return self.__add__(other)

    def __sub__(self, other: "Number | int") -> "Number":
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.sub(other_number)

    def __rsub__(self, other: int) -> "Number":
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return other_number.sub(self)

    def __mul__(self, other: "Number | int") -> "Number":
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.mul(other_number)

    def __rmul__(self, other: int) -> "Number":
        return self.__mul__(other)

    def __truediv__(self, other: "Number | int") -> "Number":
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return self.checked_div(other_number)

    def __rtruediv__(self, other: int) -> "Number":
        other_number = _coerce(other)
        if other_number is None:
            return NotImplemented
        return other_number.checked_div(self)

    def __pow__(self, exponent: int) -> "Number":
        return self.pow(exponent)

    def __neg__(self) -> "Number":
        return self.neg()

    def __abs__(self) -> "Number":
        return self.abs()

    # =========================================================================
    # ТРАНСЦЕНДЕНТНЫЕ ФУНКЦИИ (см. transcendental)
    # =========================================================================

    def sqrt(self, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.sqrt(self, precision)

    def ln(self, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.ln(self, precision)

    def exp(self, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.exp(self, precision)

    def pow_real(self, exponent: "Number", precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.pow_real(self, exponent, precision)

    def sin(self, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.sin(self, precision)

    def cos(self, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.cos(self, precision)

    def tan(self, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.tan(self, precision)

    @classmethod
    def pi(cls, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.pi(precision)

    @classmethod
    def e(cls, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.e(precision)

    @classmethod
    def phi(cls, precision: int = DEFAULT_PRECISION) -> "Number":
        from folio.core.math import transcendental

        return transcendental.phi(precision)

    # =========================================================================
    # ОТОБРАЖЕНИЕ (см. formatting)
    # =========================================================================

    def as_decimal(self, places: int) -> str:
        from folio.core.math import formatting

        return formatting.as_decimal(self, places)

    def as_sigfigs(self, sigfigs: int) -> str:
        from folio.core.math import formatting

        return formatting.as_sigfigs(self, sigfigs)

    def __str__(self) -> str:
        return self.as_decimal(10)

    # =========================================================================
    # PYDANTIC
    # =========================================================================

    @classmethod
    def __get_pydantic_core_schema__(cls, source_type, handler) -> core_schema.CoreSchema:
        """Number как поле pydantic-модели: вход str/int/float, выход as_fraction()."""
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(cls.as_fraction),
        )

    @classmethod
    def _validate(cls, value: object) -> "Number":
        if isinstance(value, Number):
            return value
        if isinstance(value, bool):
            raise ValueError("bool is not a number")
        try:
            if isinstance(value, int):
                return cls.from_i64(value)
            if isinstance(value, float):
                return cls.from_f64(value)
            if isinstance(value, str):
                return cls.from_str(value)
        except NumberError as exc:
            raise ValueError(str(exc)) from exc
        raise ValueError(f"cannot interpret {type(value).__name__} as Number")


def _coerce(value: object) -> Number | None:
    """Number или int -> Number; прочие типы -> None (операторы вернут NotImplemented)."""
    if isinstance(value, Number):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Number.from_i64(value)
    return None


ZERO: Final[Number] = Number(0, 1)
ONE: Final[Number] = Number(1, 1)
TWO: Final[Number] = Number(2, 1)
