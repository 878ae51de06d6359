"""Base model for the JSON shapes exchanged with Atlassian REST APIs.

Every request and response body is a :class:`WireModel`. Python attributes
are snake_case; the exact JSON key is declared as the field alias, so
``start_index`` travels as ``start-index`` and ``links`` as ``_links``.

Parsing is lenient: unknown keys are ignored and keys that are absent or
``null`` fall back to the field default. Anything that still cannot be
coerced into the declared type is reported as a MalformedPayloadError.
"""

import json
from typing import Any, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError

from atlassian_cli.core.exceptions import MalformedPayloadError

T = TypeVar("T", bound="WireModel")


class WireModel(BaseModel):
    """Base class for all request and response bodies."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="ignore",
        coerce_numbers_to_str=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _normalize_wire(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return cls._prepare_wire({k: v for k, v in data.items() if v is not None})
        return data

    @classmethod
    def _prepare_wire(cls, data: dict[str, Any]) -> dict[str, Any]:
        """Hook for subclasses that need to rename keys before validation."""
        return data

    @classmethod
    def from_wire(cls: type[T], data: Any) -> T:
        """Build a model from decoded JSON.

        Args:
            data: Decoded JSON document (normally a dict)

        Returns:
            Populated model instance

        Raises:
            MalformedPayloadError: If the document does not fit the model
        """
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise MalformedPayloadError(
                f"Invalid {cls.__name__} payload: {e.error_count()} error(s)",
                model=cls.__name__,
                details={"errors": e.errors(include_url=False)},
            ) from e

    @classmethod
    def list_from_wire(cls: type[T], data: Any) -> list[T]:
        """Build a list of models from a decoded JSON array, keeping its order.

        Raises:
            MalformedPayloadError: If ``data`` is not an array or an item does not fit
        """
        if not isinstance(data, list):
            raise MalformedPayloadError(
                f"Invalid {cls.__name__} list payload: expected a JSON array",
                model=cls.__name__,
            )
        return [cls.from_wire(item) for item in data]

    @classmethod
    def from_json(cls: type[T], text: str | bytes) -> T:
        """Build a model from JSON text.

        Raises:
            MalformedPayloadError: If the text is not JSON or does not fit the model
        """
        try:
            data = json.loads(text)
        except ValueError as e:
            raise MalformedPayloadError(
                f"Invalid {cls.__name__} payload: not a JSON document",
                model=cls.__name__,
            ) from e
        return cls.from_wire(data)

    def to_wire(self) -> dict[str, Any]:
        """Return the JSON-ready dict using wire names, without unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")

    def to_json(self) -> str:
        """Return the compact JSON text of :meth:`to_wire`."""
        return json.dumps(self.to_wire(), separators=(",", ":"), ensure_ascii=False)
