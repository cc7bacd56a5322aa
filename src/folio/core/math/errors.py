"""
Number Errors — закрытая таксономия ошибок числового ядра

Все частичные операции Number сообщают о сбое типизированным исключением
из этой иерархии. Ядро никогда не выбрасывает ничего другого для любых
значений операндов: вызывающий код ловит NumberError и либо
восстанавливается локально, либо конвертирует ошибку в FolioError.

Виды ошибок:
- ParseError: текст не соответствует ни одной числовой грамматике
- DivisionByZero: делитель точно равен нулю
- DomainError: операнд вне области определения функции
- Overflow: сужающее преобразование или внутренняя граница невыполнимы
"""

from typing import ClassVar


class NumberError(Exception):
    """Базовый класс ошибок числового ядра."""

    code: ClassVar[str] = "NUMBER_ERROR"


class ParseError(NumberError):
    """Текст не распознан как число."""

    code: ClassVar[str] = "PARSE_ERROR"

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Invalid number format: {text!r}")


class DivisionByZero(NumberError):
    """Деление на точный ноль."""

    code: ClassVar[str] = "DIV_ZERO"

    def __init__(self) -> None:
        super().__init__("Division by zero")


class DomainError(NumberError):
    """
    Операнд вне математической области определения.

    Например: корень из отрицательного, логарифм неположительного,
    тангенс в полюсе.
    """

    code: ClassVar[str] = "DOMAIN_ERROR"

    def __init__(self, details: str) -> None:
        self.details = details
        super().__init__(f"Domain error: {details}")


class Overflow(NumberError):
    """Результат превышает внутреннюю границу размера."""

    code: ClassVar[str] = "OVERFLOW"

    def __init__(self, details: str = "result too large") -> None:
        self.details = details
        super().__init__(f"Overflow: {details}")
