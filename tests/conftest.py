"""
Shared test fixtures and helpers for the Blueprint test suite.
"""

import pytest

from blueprint.diagnostics import BlueprintEvent

# Import fixtures so pytest can discover them without the installed plugin
from blueprint.testing import (  # noqa: F401
    blueprint_settings,
    blueprint_config,
    random_blueprint_config,
    blueprint_factory,
)


SETTING_VARIABLES = (
    "BLUEPRINT_MODE",
    "BLUEPRINT_SEED",
    "BLUEPRINT_MAX_ARRAY_SIZE",
    "BLUEPRINT_WITH_PUBLIC_ATTRIBUTES",
)


@pytest.fixture(autouse=True)
def clean_blueprint_env(monkeypatch):
    """Keep the developer's BLUEPRINT_* variables out of the tests."""
    for name in SETTING_VARIABLES:
        monkeypatch.delenv(name, raising=False)


class RecordingListener:
    """Diagnostic listener that keeps every event."""

    def __init__(self):
        self.events = []

    def on_event(self, event: BlueprintEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type):
        return [event for event in self.events if event.type == event_type]


@pytest.fixture
def recording_listener():
    return RecordingListener()
