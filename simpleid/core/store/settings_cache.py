from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Optional

from simpleid.core.config.paths import StoreFsPaths
from simpleid.core.store.io import atomic_write_json, read_json_file, remove_if_exists
from simpleid.core.store.names import is_valid_name, require_valid_name


class SettingsCache:
    """
    Application-wide settings, one JSON file per setting in the store directory.

    Values are cached after the first successful read for the lifetime of this
    object. Absent settings are not cached, so a later `set` from another
    process is seen on the next `get`. Callers get copies; mutating a returned
    value changes neither the cache nor the file.
    """

    def __init__(self, paths: StoreFsPaths, *, logger: Optional[logging.Logger] = None):
        self.paths = paths
        self.logger = logger or logging.getLogger("simpleid.store")
        self._values: Dict[str, Any] = {}

    def get(self, name: str, default: Any = None) -> Any:
        if not is_valid_name(name):
            return default
        if name in self._values:
            return copy.deepcopy(self._values[name])
        rr = read_json_file(self.paths.setting_file(name))
        if not rr.ok:
            if rr.error != "missing":
                self.logger.warning("Setting %s could not be read: %s", name, rr.error)
            return default
        self._values[name] = copy.deepcopy(rr.data)
        return rr.data

    def set(self, name: str, value: Any) -> None:
        require_valid_name(name, "setting name")
        atomic_write_json(self.paths.setting_file(name), value)
        self._values[name] = copy.deepcopy(value)

    def delete(self, name: str) -> None:
        require_valid_name(name, "setting name")
        self._values.pop(name, None)
        remove_if_exists(self.paths.setting_file(name))

    def clear(self) -> None:
        self._values.clear()

    def __contains__(self, name: str) -> bool:
        return name in self._values
