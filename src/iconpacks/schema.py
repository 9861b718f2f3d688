# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Schema loading utilities for validating pack definitions."""

from __future__ import annotations

import importlib
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Protocol, cast, runtime_checkable

from .errors import CatalogValidationError
from .io import load_schema
from .types import JSONValue

PACKAGED_SCHEMA_PATH: Final[Path] = Path(__file__).resolve().parent / "schemas" / "icon_pack.schema.json"


class SchemaValidationError(Protocol):
    """Represent schema validation errors surfaced by jsonschema."""

    @property
    def message(self) -> str:
        """Return the descriptive validation error message."""

    @property
    def absolute_path(self) -> Sequence[str | int]:
        """Return the location of the failing value inside the instance."""


@runtime_checkable
class SchemaValidator(Protocol):
    """Protocol describing the minimal interface exposed by jsonschema validators."""

    def iter_errors(self, instance: JSONValue) -> Iterable[SchemaValidationError]:
        """Iterate over validation errors for ``instance``.

        Args:
            instance: JSON payload to validate against the schema.

        Returns:
            Iterable[SchemaValidationError]: Iterator yielding validation errors.
        """


SchemaValidatorFactory = Callable[[JSONValue], SchemaValidator]


jsonschema_module = importlib.import_module("jsonschema")
Draft202012Validator = cast(SchemaValidatorFactory, jsonschema_module.Draft202012Validator)


@dataclass(slots=True)
class SchemaRepository:
    """Hold the validator applied to every pack definition."""

    schema_path: Path
    validator: SchemaValidator

    @classmethod
    def load(cls, schema_path: Path | None = None) -> SchemaRepository:
        """Load the pack definition schema from disk.

        Args:
            schema_path: Optional override for the packaged schema document.

        Returns:
            SchemaRepository: Repository configured with a Draft 2020-12 validator.
        """

        resolved = schema_path or PACKAGED_SCHEMA_PATH
        return cls(schema_path=resolved, validator=Draft202012Validator(load_schema(resolved)))


def validate_definition(validator: SchemaValidator, pack_id: str, definition: Mapping[str, JSONValue]) -> None:
    """Validate ``definition`` with ``validator`` and report every error at once.

    Args:
        validator: Validator bound to the pack definition schema.
        pack_id: Identifier of the pack, used in the error message.
        definition: Raw mapping declared for the pack.

    Raises:
        CatalogValidationError: If any schema error is reported.
    """

    errors = sorted(validator.iter_errors(cast(JSONValue, dict(definition))), key=_error_sort_key)
    if not errors:
        return
    lines = "\n".join(f"[{_error_location(error)}] {error.message}" for error in errors)
    raise CatalogValidationError(f"Error in definition `{pack_id}`:\n{lines}")


def _error_location(error: SchemaValidationError) -> str:
    path = ".".join(str(part) for part in error.absolute_path)
    return path or "(root)"


def _error_sort_key(error: SchemaValidationError) -> str:
    return _error_location(error)


__all__ = [
    "Draft202012Validator",
    "PACKAGED_SCHEMA_PATH",
    "SchemaRepository",
    "SchemaValidator",
    "validate_definition",
]
