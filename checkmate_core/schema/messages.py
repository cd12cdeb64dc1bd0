# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Host messaging shapes: the inbound analysis request and the outbound
completion signal.
"""

from checkmate_core.schema.serialization import SchemaModel


class AnalysisRequest(SchemaModel):
    request_id: str
    text: str


class CompletionSignal(SchemaModel):
    request_id: str
    success: bool
    error: str | None = None
