# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Claim, Citation and Judgment models.

A Judgment is the raw oracle output for one claim. Its label is a closed
tri-state; wire strings are normalized on the way in so that nothing
downstream ever branches on an open string.
"""

from enum import Enum
from typing import Any

from pydantic import Field, field_validator, model_validator

from checkmate_core.schema.serialization import SchemaModel

UNVERIFIABLE_RATIONALE = "This claim could not be verified."


class TruthLabel(str, Enum):
    """Tri-state truth label reported by the oracle."""
    TRUE = "true"
    FALSE = "false"
    UNCLEAR = "unclear"


def normalize_label(raw: Any) -> TruthLabel:
    """
    Map a wire label onto TruthLabel.

    Trims and lowercases strings; anything unrecognized becomes UNCLEAR.
    """
    if isinstance(raw, TruthLabel):
        return raw
    if not isinstance(raw, str):
        return TruthLabel.UNCLEAR
    try:
        return TruthLabel(raw.strip().lower())
    except ValueError:
        return TruthLabel.UNCLEAR


class Citation(SchemaModel):
    """A resolved reference supporting or refuting a claim."""

    url: str
    """Location of the supporting / refuting document."""

    title: str = ""
    """Human-readable headline; may be empty for some domains."""


class Judgment(SchemaModel):
    """Raw oracle output for one claim."""

    label: TruthLabel = TruthLabel.UNCLEAR
    raw_label: str = ""
    """Label exactly as received, kept for diagnostics only."""

    rationale: str = ""
    citations: list[Citation] = Field(default_factory=list)
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)

    synthetic: bool = False
    """True when the judgment stands in for a failed verification."""

    @model_validator(mode="before")
    @classmethod
    def _keep_raw_label(cls, data: Any) -> Any:
        if isinstance(data, dict) and "raw_label" not in data:
            raw = data.get("label")
            if isinstance(raw, Enum):
                raw = raw.value
            data = {**data, "raw_label": raw if isinstance(raw, str) else ""}
        return data

    @field_validator("label", mode="before")
    @classmethod
    def _normalize_label(cls, value: Any) -> TruthLabel:
        return normalize_label(value)

    @classmethod
    def unverifiable(cls, reason: str | None = None) -> "Judgment":
        """Synthetic judgment for a claim whose verification failed."""
        rationale = UNVERIFIABLE_RATIONALE
        if reason:
            rationale = f"{UNVERIFIABLE_RATIONALE} ({reason})"
        return cls(
            label=TruthLabel.UNCLEAR,
            rationale=rationale,
            citations=[],
            confidence=0.0,
            synthetic=True,
        )
