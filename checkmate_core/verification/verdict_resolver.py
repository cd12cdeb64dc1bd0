# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Verdict Resolution

Turns a raw oracle Judgment into a canonical Verdict under the confidence
policy, and reduces a set of verdicts into one AggregateStatus.

Rule order matters: a well-sourced refutation bypasses the confidence gate,
a positive or unclear judgment never does.
"""

from __future__ import annotations

from collections.abc import Iterable

from checkmate_core.schema.claims import Judgment, TruthLabel, normalize_label
from checkmate_core.schema.policy import DEFAULT_THRESHOLD
from checkmate_core.schema.verdict import AggregateStatus, Verdict
from checkmate_core.utils.text_processing import clamp_unit

HARD_FALSE_MIN_CITATIONS = 3

_LABEL_TO_VERDICT = {
    TruthLabel.TRUE: Verdict.TRUE,
    TruthLabel.FALSE: Verdict.FALSE,
    TruthLabel.UNCLEAR: Verdict.UNCLEAR,
}


def resolve(
    judgment: Judgment,
    threshold: float = DEFAULT_THRESHOLD,
    *,
    hard_false_min_citations: int = HARD_FALSE_MIN_CITATIONS,
) -> Verdict:
    """
    Derive the final verdict. Never raises.

    1. threshold is clamped to [0, 1] (non-numeric falls back to the default)
    2. label is normalized; unknown labels are unclear
    3. false + >= hard_false_min_citations citations -> false
    4. confidence < threshold -> unclear
    5. true -> true, false -> false, else unclear
    """
    threshold = clamp_unit(threshold, default=DEFAULT_THRESHOLD)
    label = normalize_label(judgment.label)

    if label is TruthLabel.FALSE and len(judgment.citations) >= hard_false_min_citations:
        return Verdict.FALSE

    if judgment.confidence < threshold:
        return Verdict.UNCLEAR

    return _LABEL_TO_VERDICT.get(label, Verdict.UNCLEAR)


def aggregate_status(verdicts: Iterable[Verdict]) -> AggregateStatus:
    """
    none: no verdicts; negative: any false; positive: all true; neutral otherwise.
    """
    items = [Verdict(v) for v in verdicts]
    if not items:
        return AggregateStatus.NONE
    if any(v is Verdict.FALSE for v in items):
        return AggregateStatus.NEGATIVE
    if all(v is Verdict.TRUE for v in items):
        return AggregateStatus.POSITIVE
    return AggregateStatus.NEUTRAL
