from checkmate_core.adapters.memory import (
    EnvSettingsStore,
    InMemoryMessageBus,
    InMemoryResultStore,
    InMemorySettingsStore,
    RecordingStatusPresenter,
)

__all__ = [
    "EnvSettingsStore",
    "InMemoryMessageBus",
    "InMemoryResultStore",
    "InMemorySettingsStore",
    "RecordingStatusPresenter",
]
