# SPDX-License-Identifier: AGPL-3.0-or-later
# Copyright (c) 2025 Check Mate Contributors
"""
Collaborator ports consumed by the engine: settings, result storage,
host messaging and status presentation.
"""

from __future__ import annotations

from typing import Protocol

from checkmate_core.schema.messages import CompletionSignal
from checkmate_core.schema.policy import Policy
from checkmate_core.schema.verdict import AggregateStatus, AnalysisResult


class SettingsError(Exception):
    """Settings could not be read."""


class SettingsStore(Protocol):
    def load_policy(self) -> Policy:
        ...


class ResultStore(Protocol):
    def save(self, result: AnalysisResult) -> None:
        ...

    def get(self, request_id: str) -> AnalysisResult | None:
        ...

    def latest(self) -> AnalysisResult | None:
        ...


class MessageBus(Protocol):
    def send(self, signal: CompletionSignal) -> None:
        ...


class StatusPresenter(Protocol):
    def show(self, status: AggregateStatus) -> None:
        ...
