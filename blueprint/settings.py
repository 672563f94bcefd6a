"""
Blueprint settings loaded from defaults, a ``.env`` file, the process
environment and explicit overrides.

Precedence (later overrides earlier):
1. Dataclass defaults
2. ``.env`` file (``BLUEPRINT_*`` keys only)
3. Environment variables (``BLUEPRINT_*``)
4. Manual overrides
"""

import dataclasses
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from dotenv import dotenv_values

from .configuration import MAX_ARRAY_SIZE, Configuration
from .errors import InvalidArgumentError

logger = logging.getLogger("blueprint.settings")

MODES = ("default", "random")

_TRUE = ("true", "yes", "on", "1")
_FALSE = ("false", "no", "off", "0")


@dataclasses.dataclass(frozen=True)
class BlueprintSettings:
    """
    Preset selection and global knobs for blueprinting in a test suite.

    Example .env:
        BLUEPRINT_MODE=random
        BLUEPRINT_SEED=1234
        BLUEPRINT_MAX_ARRAY_SIZE=3
    """
    mode: str = "default"
    seed: Optional[int] = None
    max_array_size: int = MAX_ARRAY_SIZE
    with_public_attributes: bool = False

    def __post_init__(self):
        if self.mode not in MODES:
            raise InvalidArgumentError(
                f"Unknown blueprint mode {self.mode!r} (expected one of {', '.join(MODES)})",
                "mode",
            )
        if self.max_array_size < 1:
            raise InvalidArgumentError(
                f"max_array_size must be at least 1 (got {self.max_array_size})",
                "max_array_size",
            )

    @classmethod
    def load(
        cls,
        env_prefix: str = "BLUEPRINT_",
        env_file: Optional[Union[str, Path]] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> "BlueprintSettings":
        """
        Load settings with proper merge strategy.

        Args:
            env_prefix: Prefix for environment variables
            env_file: Path to .env file (skipped if missing)
            overrides: Manual overrides (highest precedence)

        Returns:
            Validated settings

        Raises:
            InvalidArgumentError: If a value cannot be parsed or is out of range
        """
        data: Dict[str, Any] = {}

        if env_file is not None:
            path = Path(env_file)
            if path.exists():
                data.update(_prefixed(dotenv_values(path), env_prefix))
            else:
                logger.debug(f"Env file {path} not found, skipping")

        data.update(_prefixed(os.environ, env_prefix))

        if overrides:
            data.update(overrides)

        known = {field.name: field for field in dataclasses.fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            logger.warning(f"Ignoring unknown blueprint settings: {', '.join(unknown)}")

        values = {
            name: _parse_value(name, data[name], known[name].type)
            for name in known
            if name in data
        }
        return cls(**values)

    def build_configuration(self) -> Configuration:
        """Build the preset these settings select."""
        from .presets import default_configuration, random_configuration

        if self.mode == "random":
            config = random_configuration(self.seed)
        else:
            config = default_configuration()
            if self.seed is not None:
                config = config.with_random_source(self.seed)

        return (
            config
            .with_max_array_size(self.max_array_size)
            .with_public_attributes(self.with_public_attributes)
        )


def _prefixed(source: Any, prefix: str) -> Dict[str, Any]:
    """``BLUEPRINT_MAX_ARRAY_SIZE=3`` -> ``{"max_array_size": "3"}``."""
    return {
        key[len(prefix):].lower(): value
        for key, value in source.items()
        if key.startswith(prefix) and value is not None
    }


def _parse_value(name: str, value: Any, annotation: Any) -> Any:
    if not isinstance(value, str):
        return value

    text = value.strip()
    if annotation is bool:
        lowered = text.lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise InvalidArgumentError(f"Setting '{name}' expects a boolean (got {value!r})", name)

    if annotation in (int, Optional[int]):
        if not text and annotation is not int:
            return None
        try:
            return int(text)
        except ValueError as exc:
            raise InvalidArgumentError(
                f"Setting '{name}' expects an integer (got {value!r})", name
            ) from exc

    return text.lower()
