"""
JSON Schema Contract Validators

Валидация сериализованных структур согласно JSON Schema контрактам
(Draft 2020-12). Схемы поставляются внутри пакета (schema/).

Схемы:
- folio_error.json — структурированная ошибка (FolioError.to_payload())
- number.json — точное число в канонической записи ("n" или "n/d")
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterator

import jsonschema
from jsonschema import Draft202012Validator, ValidationError


# =============================================================================
# SCHEMA LOADER
# =============================================================================


class SchemaLoader:
    """
    Загрузчик JSON Schema файлов.

    Схемы ищутся в каталоге schema/ рядом с этим модулем.
    """

    def __init__(self, schema_dir: Path | None = None):
        self._schema_dir = schema_dir or Path(__file__).parent / "schema"
        if not self._schema_dir.exists():
            raise RuntimeError(f"Schema directory not found: {self._schema_dir}")

        # Кэш загруженных схем
        self._schemas: Dict[str, Dict[str, Any]] = {}

    def load_schema(self, schema_name: str) -> Dict[str, Any]:
        """
        Загрузка JSON Schema файла.

        Args:
            schema_name: Имя схемы без расширения (например, 'folio_error')

        Returns:
            Загруженная схема как dict

        Raises:
            FileNotFoundError: Если файл схемы не найден
            ValueError: Если схема не проходит meta-validation
        """
        if schema_name in self._schemas:
            return self._schemas[schema_name]

        schema_path = self._schema_dir / f"{schema_name}.json"
        if not schema_path.exists():
            raise FileNotFoundError(f"Schema not found: {schema_path}")

        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)

        try:
            Draft202012Validator.check_schema(schema)
        except jsonschema.SchemaError as e:
            raise ValueError(f"Invalid JSON Schema in {schema_name}.json: {e}") from e

        self._schemas[schema_name] = schema
        return schema


_SCHEMA_LOADER = SchemaLoader()


# =============================================================================
# CONTRACT VALIDATORS
# =============================================================================


class ContractValidator:
    """Валидация данных против одной JSON Schema."""

    def __init__(self, schema_name: str):
        self.schema_name = schema_name
        self.schema = _SCHEMA_LOADER.load_schema(schema_name)
        self.validator = Draft202012Validator(self.schema)

    def validate(self, data: Dict[str, Any]) -> None:
        """
        Raises:
            ValidationError: Если данные не соответствуют схеме
        """
        self.validator.validate(data)

    def is_valid(self, data: Dict[str, Any]) -> bool:
        return self.validator.is_valid(data)

    def iter_errors(self, data: Dict[str, Any]) -> Iterator[ValidationError]:
        return self.validator.iter_errors(data)


class FolioErrorValidator(ContractValidator):
    """Валидатор для folio_error контракта."""

    def __init__(self):
        super().__init__("folio_error")


class NumberValidator(ContractValidator):
    """Валидатор для number контракта."""

    def __init__(self):
        super().__init__("number")


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================


def validate_folio_error(data: Dict[str, Any]) -> None:
    """
    Валидация сериализованной FolioError.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    FolioErrorValidator().validate(data)


def validate_number(data: Dict[str, Any]) -> None:
    """
    Валидация сериализованного Number.

    Raises:
        ValidationError: Если данные не соответствуют схеме
    """
    NumberValidator().validate(data)
