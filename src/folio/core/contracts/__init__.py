"""
Contract Validation Module

Валидация JSON контрактов сериализованных структур Folio.
"""

from .validators import (
    ContractValidator,
    FolioErrorValidator,
    NumberValidator,
    SchemaLoader,
    validate_folio_error,
    validate_number,
)

__all__ = [
    # Classes
    "SchemaLoader",
    "ContractValidator",
    "FolioErrorValidator",
    "NumberValidator",
    # Functions
    "validate_folio_error",
    "validate_number",
]
