# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Sonar Answer Contract

Strict validation of the JSON object the oracle returns inside
`choices[0].message.content`. Any violation raises pydantic's
ValidationError, which the client treats as a malformed response.
"""

from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator

from checkmate_core.schema.claims import Citation, Judgment, normalize_label


def _citation_ref(raw: Any) -> str | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, str):
        return raw.strip() or None
    if isinstance(raw, (int, float)):
        return str(raw)
    return None


class SonarAnswer(BaseModel):
    model_config = {"extra": "ignore"}

    label: str = Field(validation_alias=AliasChoices("verdict", "label"), min_length=1)
    rationale: str = Field(validation_alias=AliasChoices("explanation", "rationale"), min_length=1)
    citations: list[Citation]
    confidence: float = Field(ge=0.0, le=1.0)

    @field_validator("label", "rationale", mode="before")
    @classmethod
    def _require_text(cls, value: Any) -> str:
        if not isinstance(value, str) or not value.strip():
            raise ValueError("expected non-empty string")
        return value.strip()

    @field_validator("citations", mode="before")
    @classmethod
    def _coerce_citations(cls, value: Any) -> Any:
        """
        Only a non-array is malformed. Items are normalized leniently:
        bare URLs and numeric references ([1], [2] ...) become citations,
        a null title becomes "", items without any reference are dropped.
        """
        if not isinstance(value, list):
            raise ValueError("expected array of citations")
        out: list[dict[str, str]] = []
        for item in value:
            ref = _citation_ref(item.get("url") if isinstance(item, dict) else item)
            if ref is None:
                continue
            title = item.get("title") if isinstance(item, dict) else None
            out.append({"url": ref, "title": title.strip() if isinstance(title, str) else ""})
        return out

    @field_validator("confidence", mode="before")
    @classmethod
    def _require_number(cls, value: Any) -> float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("confidence must be numeric")
        return float(value)

    def to_judgment(self) -> Judgment:
        return Judgment(
            label=normalize_label(self.label),
            raw_label=self.label,
            rationale=self.rationale,
            citations=self.citations,
            confidence=self.confidence,
        )
