import shlex
import logging
from pathlib import Path
from typing import Any, Dict, Iterable

import src.procwatch.settings as default_settings

log = logging.getLogger(__name__)


class MergedSettings:
    """
    A singleton class that merges default settings with runtime overrides.

    This class provides a unified, attribute-based access point for all
    supervisor configuration. It follows a clear precedence:
    1. Base values from `settings.py` (which already honour the environment and `.env`).
    2. Runtime overrides (e.g. the CLI's positional path) for keys in `MODIFIABLE_SETTINGS`.
    """

    def __init__(self) -> None:
        """Initializes the settings object by loading defaults."""
        self._load_defaults()

    def _load_defaults(self) -> None:
        """Copies every uppercase name of settings.py onto this object."""
        defaults = {name: value for name, value in vars(default_settings).items() if name.isupper()}
        self.__dict__.update(defaults)

    def reset(self) -> None:
        """Discards all runtime overrides."""
        self._load_defaults()

    def apply_overrides(self, overrides: Dict[str, Any]) -> Dict[str, Any]:
        """
        Applies runtime overrides, coercing each value to the type of its default.

        Keys that are unknown or not listed in `MODIFIABLE_SETTINGS` are ignored
        with a warning.

        :param overrides: A dictionary of setting names to new values.
        :return: The overrides that were actually applied, after coercion.
        """
        applied: Dict[str, Any] = {}
        for key, value in overrides.items():
            if not hasattr(self, key):
                log.warning(f"Override setting '{key}' not found in default settings. Ignoring.")
                continue
            if key not in self.MODIFIABLE_SETTINGS:
                log.warning(f"Attempted to override non-modifiable setting '{key}'. Ignoring.")
                continue

            try:
                new_value = _coerce(getattr(self, key), value)
            except (ValueError, TypeError) as e:
                log.error(f"Could not convert value '{value}' for key '{key}'. Error: {e}")
                continue

            setattr(self, key, new_value)
            applied[key] = new_value
            log.debug(f"Overridden setting: {key} = {new_value}")
        return applied


def _coerce(default_value: Any, value: Any) -> Any:
    """Converts `value` to the type of `default_value`."""
    if isinstance(default_value, Path):
        return Path(value)
    if isinstance(default_value, bool):
        return str(value).lower() in ('true', '1', 't', 'yes', 'y')
    if isinstance(default_value, tuple):
        if isinstance(value, str):
            return tuple(shlex.split(value))
        return tuple(value)
    if isinstance(default_value, frozenset):
        return frozenset(_as_items(default_value, value))
    if default_value is not None:
        return type(default_value)(value)
    return value


def _as_items(default_value: frozenset, value: Any) -> Iterable[Any]:
    items = value.split(",") if isinstance(value, str) else value
    # An empty default gives no element type to coerce to; stop codes are ints.
    item_type = type(next(iter(default_value))) if default_value else int
    return [item_type(item) for item in items if str(item).strip()]


# Create a singleton instance to be imported by other modules
effective_settings = MergedSettings()
