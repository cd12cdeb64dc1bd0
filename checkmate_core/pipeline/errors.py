# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Pipeline Errors

Request-level failures. Claim-level oracle failures never surface here:
they are absorbed by the verification client as synthetic judgments.
"""

from __future__ import annotations

from typing import Any


class PipelineRequestError(Exception):
    """
    Raised when a whole request cannot be processed.

    Attributes:
        request_id: Identifier of the failed request
        reason: Short machine-readable reason code
    """

    reason = "request_failed"

    def __init__(self, request_id: str, message: str):
        self.request_id = request_id
        super().__init__(message)

    def to_trace_dict(self) -> dict[str, Any]:
        """Convert to dictionary for trace logging."""
        return {
            "error": self.reason,
            "request_id": self.request_id,
            "message": str(self),
        }


class InvalidCredentialError(PipelineRequestError):
    """The policy credential is missing or has the wrong shape."""

    reason = "invalid_credential"

    def __init__(self, request_id: str):
        super().__init__(request_id, "Please set a valid Perplexity API key (expected prefix 'sk-').")


class NoVerifiableClaimsError(PipelineRequestError):
    """Segmentation produced zero claims; the oracle is never called."""

    reason = "no_verifiable_claims"

    def __init__(self, request_id: str):
        super().__init__(request_id, "No factual claims found in text.")
