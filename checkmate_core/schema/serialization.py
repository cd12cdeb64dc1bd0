# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
from __future__ import annotations

import inspect
from typing import Any, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound="SchemaModel")


class SchemaModel(BaseModel):
    """
    Canonical base for schema models (Pydantic v2).

    - Ignores extra fields for backward compatibility of stored results.
    - Immutable: models are created once and never mutated.
    - Provides `to_dict()` / `from_dict()` for consistent serialization.
    """

    model_config = {"extra": "ignore", "frozen": True}

    def to_dict(self) -> dict[str, Any]:
        return dump_schema(self)

    @classmethod
    def from_dict(cls: type[T], data: dict[str, Any]) -> T:
        return load_schema(cls, data)


def dump_schema(model: Any) -> dict[str, Any]:
    """
    Dump a schema model to a JSON-safe dict.
    """
    if isinstance(model, BaseModel):
        return model.model_dump(mode="json")
    raise TypeError(f"Unsupported schema type for dump: {type(model)!r}")


def load_schema(model_cls: type[T], data: dict[str, Any]) -> T:
    """
    Load a schema model from a dict.
    """
    if not isinstance(data, dict):
        raise TypeError(f"Schema input must be a dict, got: {type(data)!r}")
    if inspect.isclass(model_cls) and issubclass(model_cls, BaseModel):
        return model_cls.model_validate(data)
    raise TypeError(f"Unsupported schema type for load: {model_cls!r}")
