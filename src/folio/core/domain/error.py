"""
FolioError — структурированная ошибка системы

Ошибки не роняют вычисление: это значения, которые распространяются
через ячейки документа и несут машиночитаемый код, сообщение для
человека, подсказку по исправлению и контекст (ячейка, формула, позиция).

Immutable Pydantic модели. Builder-методы возвращают новые экземпляры.

Сериализация (to_payload) опускает пустые поля и соответствует
контракту folio_error.json.
"""

from enum import Enum
from typing import Any, Final

from pydantic import BaseModel, Field

from folio.core.math.errors import (
    DivisionByZero,
    DomainError,
    NumberError,
    Overflow,
    ParseError,
)


# =============================================================================
# CODES
# =============================================================================

PARSE_ERROR: Final[str] = "PARSE_ERROR"
DIV_ZERO: Final[str] = "DIV_ZERO"
UNDEFINED_VAR: Final[str] = "UNDEFINED_VAR"
UNDEFINED_FUNC: Final[str] = "UNDEFINED_FUNC"
UNDEFINED_FIELD: Final[str] = "UNDEFINED_FIELD"
TYPE_ERROR: Final[str] = "TYPE_ERROR"
ARG_COUNT: Final[str] = "ARG_COUNT"
ARG_TYPE: Final[str] = "ARG_TYPE"
DOMAIN_ERROR: Final[str] = "DOMAIN_ERROR"
OVERFLOW: Final[str] = "OVERFLOW"
CIRCULAR_REF: Final[str] = "CIRCULAR_REF"
INTERNAL: Final[str] = "INTERNAL"


# =============================================================================
# ENUMS
# =============================================================================


class Severity(str, Enum):
    """Уровень серьёзности ошибки"""

    WARNING = "warning"  # вычисление продолжено с деградированным результатом
    ERROR = "error"  # ячейка не вычислена
    FATAL = "fatal"  # документ не может быть вычислен


# =============================================================================
# CONTEXT
# =============================================================================


class ErrorContext(BaseModel):
    """Где произошла ошибка."""

    cell: str | None = Field(None, description="Имя ячейки")
    formula: str | None = Field(None, description="Формула, вызвавшая ошибку")
    line: int | None = Field(None, ge=0, description="Строка в документе")
    column: int | None = Field(None, ge=0, description="Колонка в документе")
    notes: tuple[str, ...] = Field((), description="Заметки о распространении")

    model_config = {"frozen": True}


# =============================================================================
# FOLIO ERROR
# =============================================================================


class FolioError(BaseModel):
    """
    Структурированная ошибка.

    Examples:
        >>> str(FolioError.div_zero())
        '[DIV_ZERO] Division by zero (suggestion: Ensure divisor is not zero)'
        >>> FolioError.div_zero().in_cell("total").context.cell
        'total'
    """

    code: str = Field(..., min_length=1, description="Машиночитаемый код")
    message: str = Field(..., description="Сообщение для человека")
    suggestion: str | None = Field(None, description="Как исправить")
    context: ErrorContext | None = Field(None, description="Где произошла ошибка")
    severity: Severity = Field(Severity.ERROR, description="Уровень серьёзности")

    model_config = {"frozen": True}

    # =========================================================================
    # BUILDERS
    # =========================================================================

    def with_suggestion(self, suggestion: str) -> "FolioError":
        return self.model_copy(update={"suggestion": suggestion})

    def with_context(self, context: ErrorContext) -> "FolioError":
        return self.model_copy(update={"context": context})

    def with_severity(self, severity: Severity) -> "FolioError":
        return self.model_copy(update={"severity": Severity(severity)})

    def in_cell(self, cell: str) -> "FolioError":
        return self._update_context(cell=cell)

    def with_formula(self, formula: str) -> "FolioError":
        return self._update_context(formula=formula)

    def with_note(self, note: str) -> "FolioError":
        notes = self.context.notes if self.context is not None else ()
        return self._update_context(notes=(*notes, note))

    def _update_context(self, **fields: Any) -> "FolioError":
        context = self.context if self.context is not None else ErrorContext()
        return self.with_context(context.model_copy(update=fields))

    # =========================================================================
    # CONSTRUCTORS
    # =========================================================================

    @classmethod
    def parse_error(cls, details: str) -> "FolioError":
        return cls(
            code=PARSE_ERROR,
            message=f"Parse error: {details}",
            suggestion="Check formula syntax",
        )

    @classmethod
    def div_zero(cls) -> "FolioError":
        return cls(
            code=DIV_ZERO,
            message="Division by zero",
            suggestion="Ensure divisor is not zero",
        )

    @classmethod
    def undefined_var(cls, name: str) -> "FolioError":
        return cls(
            code=UNDEFINED_VAR,
            message=f"Undefined variable: {name}",
            suggestion=f"Define '{name}' or check spelling",
        )

    @classmethod
    def undefined_func(cls, name: str) -> "FolioError":
        return cls(
            code=UNDEFINED_FUNC,
            message=f"Unknown function: {name}",
            suggestion="Use folio() to list available functions",
        )

    @classmethod
    def undefined_field(cls, name: str) -> "FolioError":
        return cls(
            code=UNDEFINED_FIELD,
            message=f"Undefined field: {name}",
            suggestion="Check object structure with folio()",
        )

    @classmethod
    def arg_type(cls, func: str, arg: str, expected: str, got: str) -> "FolioError":
        return cls(
            code=ARG_TYPE,
            message=f"{func}() argument '{arg}': expected {expected}, got {got}",
        )

    @classmethod
    def circular_ref(cls, cells: list[str]) -> "FolioError":
        """Цикл зависимостей; cells перечисляет ячейки по порядку обхода."""
        return cls(
            code=CIRCULAR_REF,
            message="Circular reference: " + " → ".join(cells),
            suggestion="Remove circular dependency",
            severity=Severity.FATAL,
        )

    @classmethod
    def domain_error(cls, details: str) -> "FolioError":
        return cls(code=DOMAIN_ERROR, message=f"Domain error: {details}")

    @classmethod
    def overflow(cls, details: str | None = None) -> "FolioError":
        message = "Numeric overflow" if details is None else f"Numeric overflow: {details}"
        return cls(code=OVERFLOW, message=message)

    @classmethod
    def type_error(cls, expected: str, got: str) -> "FolioError":
        return cls(
            code=TYPE_ERROR,
            message=f"Expected {expected}, got {got}",
            suggestion=f"Convert value to {expected} or check formula",
        )

    @classmethod
    def arg_count(cls, func: str, expected: int, got: int) -> "FolioError":
        return cls(
            code=ARG_COUNT,
            message=f"{func}() expects {expected} arguments, got {got}",
            suggestion=f"Use help('{func}') for usage",
        )

    @classmethod
    def internal(cls, details: str) -> "FolioError":
        return cls(
            code=INTERNAL,
            message=f"Internal error: {details}",
            suggestion="This is a bug, please report it",
            severity=Severity.FATAL,
        )

    @classmethod
    def from_number_error(cls, error: NumberError) -> "FolioError":
        """
        Конвертация ошибки числового ядра.

        Args:
            error: Экземпляр NumberError

        Returns:
            FolioError с соответствующим кодом
        """
        if isinstance(error, ParseError):
            return cls.parse_error(error.text)
        if isinstance(error, DivisionByZero):
            return cls.div_zero()
        if isinstance(error, DomainError):
            return cls.domain_error(error.details)
        if isinstance(error, Overflow):
            return cls.overflow(error.details)
        return cls.internal(str(error))

    # =========================================================================
    # ПРЕДСТАВЛЕНИЕ
    # =========================================================================

    def to_payload(self) -> dict[str, Any]:
        """JSON-совместимый dict без пустых полей."""
        payload = self.model_dump(mode="json", exclude_none=True)
        context = payload.get("context")
        if context is not None:
            if not context.get("notes"):
                context.pop("notes", None)
            if not context:
                payload.pop("context")
        return payload

    def __str__(self) -> str:
        text = f"[{self.code}] {self.message}"
        if self.suggestion is not None:
            text += f" (suggestion: {self.suggestion})"
        return text
