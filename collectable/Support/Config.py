from __future__ import annotations

from typing import Any, Dict
import importlib
import pkgutil
from types import ModuleType
import __future__

CONFIG_PACKAGE = "collectable.config"


class ConfigRepository:
    """
    Settings read from the modules of a config package.

    Each public module becomes a section named after it, holding the
    module's public plain values; ``collection.implode_glue`` reads the
    ``implode_glue`` attribute of ``collectable/config/collection.py``.
    """

    def __init__(self, package: str = CONFIG_PACKAGE) -> None:
        self._package = package
        self._config: Dict[str, Dict[str, Any]] = {}
        self.reload()

    def reload(self) -> None:
        """Re-import the config modules, re-reading the environment and dropping overrides."""
        package = importlib.import_module(self._package)
        self._config = {
            info.name: _settings_of(importlib.reload(importlib.import_module(f"{self._package}.{info.name}")))
            for info in pkgutil.iter_modules(package.__path__)
            if not info.name.startswith('_')
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a setting by dotted key."""
        value: Any = self._config
        for segment in key.split('.'):
            if not isinstance(value, dict) or segment not in value:
                return default
            value = value[segment]
        return value

    def set(self, key: str, value: Any) -> None:
        """Override a setting until the next reload."""
        *sections, name = key.split('.')
        target: Dict[str, Any] = self._config
        for segment in sections:
            if not isinstance(target.get(segment), dict):
                target[segment] = {}
            target = target[segment]
        target[name] = value


def _settings_of(module: ModuleType) -> Dict[str, Any]:
    # Imported modules and __future__ flags are not settings
    return {
        key: value for key, value in module.__dict__.items()
        if not key.startswith('_')
        and not callable(value)
        and not isinstance(value, (ModuleType, __future__._Feature))
    }


config = ConfigRepository()
