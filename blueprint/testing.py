"""
Blueprint Testing - Pytest Fixtures.

Registered automatically through the ``pytest11`` entry point once the
package is installed. Without the plugin, import the fixtures in your
``conftest.py``::

    from blueprint.testing import *  # noqa: F401,F403

Settings for the ``blueprint_config`` fixture come from ``BLUEPRINT_*``
environment variables, so a CI job can switch the whole suite to random
data with ``BLUEPRINT_MODE=random``.
"""

from typing import Any, Callable

import pytest

from .configuration import Configuration
from .engine import materialize
from .presets import random_configuration
from .settings import BlueprintSettings

__all__ = [
    "blueprint_settings",
    "blueprint_config",
    "random_blueprint_config",
    "blueprint_factory",
]


@pytest.fixture
def blueprint_settings() -> BlueprintSettings:
    """Settings from the environment (``BLUEPRINT_*``)."""
    return BlueprintSettings.load()


@pytest.fixture
def blueprint_config(blueprint_settings: BlueprintSettings) -> Configuration:
    """The preset selected by :func:`blueprint_settings`."""
    return blueprint_settings.build_configuration()


@pytest.fixture
def random_blueprint_config(blueprint_settings: BlueprintSettings) -> Configuration:
    """Randomized preset, seeded from ``BLUEPRINT_SEED`` when set."""
    return random_configuration(blueprint_settings.seed)


@pytest.fixture
def blueprint_factory(blueprint_config: Configuration) -> Callable[..., Any]:
    """
    Call with a type (and optionally a configuration) to get an instance.

    Usage::

        def test_user(blueprint_factory):
            user = blueprint_factory(User)
    """
    def factory(tp: Any, config: Configuration = None) -> Any:
        return materialize(tp, config or blueprint_config)
    return factory
