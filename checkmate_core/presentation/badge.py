# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Toolbar badge for an aggregate status.

- positive: green check
- negative: red cross
- neutral: grey question mark
- none: badge cleared
"""

from __future__ import annotations

from dataclasses import dataclass

from checkmate_core.schema.verdict import AggregateStatus


@dataclass(frozen=True)
class Badge:
    text: str
    color: str | None


_BADGES: dict[AggregateStatus, Badge] = {
    AggregateStatus.POSITIVE: Badge("✓", "#3CB371"),
    AggregateStatus.NEGATIVE: Badge("✕", "#F44336"),
    AggregateStatus.NEUTRAL: Badge("?", "#9E9E9E"),
    AggregateStatus.NONE: Badge("", None),
}


def badge_for(status: AggregateStatus) -> Badge:
    return _BADGES[AggregateStatus(status)]
