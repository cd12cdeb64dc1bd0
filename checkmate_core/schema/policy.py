# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Request Policy

Per-invocation configuration supplied by the settings collaborator.
The pipeline reads it and never mutates it.
"""

from typing import Any

from pydantic import Field, field_validator

from checkmate_core.schema.serialization import SchemaModel
from checkmate_core.utils.text_processing import clamp_unit

DEFAULT_THRESHOLD = 0.7
MIN_POLICY_THRESHOLD = 0.5
MAX_POLICY_THRESHOLD = 0.9

CREDENTIAL_PREFIX = "sk-"


def is_valid_credential(credential: Any) -> bool:
    """Shape check only: a string with the expected prefix and a non-empty body."""
    return (
        isinstance(credential, str)
        and credential.startswith(CREDENTIAL_PREFIX)
        and len(credential) > len(CREDENTIAL_PREFIX)
    )


class Policy(SchemaModel):
    """Credential plus user-tunable confidence threshold."""

    credential: str = Field(default="", repr=False)
    threshold: float = DEFAULT_THRESHOLD

    @field_validator("credential", mode="before")
    @classmethod
    def _strip_credential(cls, value: Any) -> str:
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("threshold", mode="before")
    @classmethod
    def _clamp_threshold(cls, value: Any) -> float:
        return clamp_unit(
            value,
            default=DEFAULT_THRESHOLD,
            low=MIN_POLICY_THRESHOLD,
            high=MAX_POLICY_THRESHOLD,
        )

    @property
    def has_valid_credential(self) -> bool:
        return is_valid_credential(self.credential)
