"""Domain layer exceptions.

Every failure of a block operation is a DomainError subclass carrying a
message and a details dict. Nothing in the core returns a sentinel or a
default in place of raising.
"""
from __future__ import annotations

from typing import Any
from uuid import UUID


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class NotFoundError(DomainError):
    """A building or block id has no match."""

    def __init__(self, entity_type: str, entity_id: UUID | str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"{entity_type} '{entity_id}' not found",
            {"entity_type": entity_type, "entity_id": str(entity_id), **(details or {})},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class DuplicateIdError(DomainError):
    """An id is already taken within its scope."""

    def __init__(self, entity_type: str, identifier: UUID | str, details: dict[str, Any] | None = None) -> None:
        super().__init__(
            f"{entity_type} id '{identifier}' is already in use",
            {"entity_type": entity_type, "identifier": str(identifier), **(details or {})},
        )
        self.entity_type = entity_type
        self.identifier = identifier


class ValidationError(DomainError):
    """A field value was rejected on construction or update."""

    def __init__(self, field: str, message: str, value: Any = None) -> None:
        super().__init__(f"Invalid {field}: {message}", {"field": field, "value": value})
        self.field = field
        self.value = value


class TypeMismatchError(DomainError):
    """A block was accessed or mutated through the wrong variant."""

    def __init__(self, block_id: str, expected: str, actual: str) -> None:
        super().__init__(
            f"Block {block_id} is {actual}, not {expected}",
            {"block_id": block_id, "expected": expected, "actual": actual},
        )
        self.block_id = block_id
        self.expected = expected
        self.actual = actual


class UnsupportedVariantError(DomainError):
    def __init__(self, variant: object) -> None:
        super().__init__(f"Unsupported block variant: {variant!r}")
        self.variant = variant


class EmptyCollectionError(DomainError):
    pass


class DivisionUndefined(DomainError):
    pass


class StorageError(DomainError):
    """The repository could not read or write."""


class ConcurrencyError(StorageError):
    """Another writer saved the building since it was loaded."""

    def __init__(self, entity_type: str, entity_id: UUID) -> None:
        super().__init__(
            f"{entity_type} '{entity_id}' was modified concurrently",
            {"entity_type": entity_type, "entity_id": str(entity_id)},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id
