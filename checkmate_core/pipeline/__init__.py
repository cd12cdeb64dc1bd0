# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Check Mate Pipeline

Segmentation, concurrent verification and verdict resolution for one request.
"""

from checkmate_core.pipeline.errors import (
    InvalidCredentialError,
    NoVerifiableClaimsError,
    PipelineRequestError,
)
from checkmate_core.pipeline.orchestrator import (
    ClaimPipeline,
    ClaimVerifier,
    PipelineOutcome,
)

__all__ = [
    "InvalidCredentialError",
    "NoVerifiableClaimsError",
    "PipelineRequestError",
    "ClaimPipeline",
    "ClaimVerifier",
    "PipelineOutcome",
]
