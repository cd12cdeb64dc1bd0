# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""Text analysis: claim segmentation."""

from checkmate_core.analysis.claim_segmenter import (
    ABBREVIATIONS,
    MAX_CLAIMS,
    MIN_CLAIM_CHARS,
    segment,
    select_claims,
    split_sentences,
)

__all__ = [
    "ABBREVIATIONS",
    "MAX_CLAIMS",
    "MIN_CLAIM_CHARS",
    "segment",
    "select_claims",
    "split_sentences",
]
