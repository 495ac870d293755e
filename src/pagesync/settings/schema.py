"""Schema helpers for find options."""

from __future__ import annotations

from copy import deepcopy
from typing import Any, Mapping

from jsonschema import Draft202012Validator
from jsonschema.exceptions import ValidationError

from ..config import DEFAULT_DEBOUNCE_MS
from ..errors import OptionsValidationError

OPTIONS_SCHEMA: dict[str, Any] = {
    "$id": "pagesync/find-options.schema.json",
    "type": "object",
    "properties": {
        "debounce_ms": {"type": "integer", "minimum": 0},
        "immediate": {"type": "boolean"},
        "watch_params": {"type": "boolean"},
        "paginate_on_server": {"type": "boolean"},
    },
    "additionalProperties": False,
}

DEFAULT_OPTIONS: dict[str, Any] = {
    "debounce_ms": DEFAULT_DEBOUNCE_MS,
    "immediate": True,
    "watch_params": True,
    "paginate_on_server": False,
}

_validator = Draft202012Validator(OPTIONS_SCHEMA)


def merge_with_defaults(data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_OPTIONS` and validate the result."""

    merged = deepcopy(DEFAULT_OPTIONS)
    if data:
        for key, value in data.items():
            if value is None:
                continue
            merged[key] = value
    validate_options(merged)
    return merged


def validate_options(data: Mapping[str, Any]) -> None:
    """Validate *data* against the options schema."""

    try:
        _validator.validate(dict(data))
    except ValidationError as exc:
        raise OptionsValidationError(exc.message) from exc


__all__ = ["DEFAULT_OPTIONS", "OPTIONS_SCHEMA", "merge_with_defaults", "validate_options"]
