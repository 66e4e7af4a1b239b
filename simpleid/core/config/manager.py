from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from simpleid.core.config.models import CONFIG_VERSION, AppConfig
from simpleid.core.config.paths import ConfigFsPaths
from simpleid.core.errors import ConfigError
from simpleid.core.store.io import atomic_write_json, ensure_dirs, move_corrupt, read_json_file


class ConfigManager:
    def __init__(self, *, fs: Optional[ConfigFsPaths] = None, logger: Optional[logging.Logger] = None, read_only: bool = False):
        self.fs = fs or ConfigFsPaths(".")
        self.logger = logger or logging.getLogger("simpleid.config")
        self.read_only = read_only
        self._cfg: Optional[AppConfig] = None

    # ---------- public API ----------
    def load(self) -> AppConfig:
        """
        Read config/simpleid.json, falling back to defaults.

        A missing file is created with defaults (unless read-only); a corrupt one
        is moved to config/backups and replaced.
        """
        raw = self._read_raw()
        cfg = self._validate(raw)
        if not raw and not self.read_only:
            ensure_dirs(self.fs.config_dir)
            atomic_write_json(self.fs.app, cfg.model_dump())
        self._cfg = cfg
        return cfg

    def get(self) -> AppConfig:
        if self._cfg is None:
            raise ConfigError("Config not loaded.")
        return self._cfg

    def save(self, data: Dict[str, Any]) -> AppConfig:
        """
        Validate then atomically replace the config file.
        """
        if self.read_only:
            raise ConfigError("Config manager is read-only.")
        cfg = self._validate(data)
        atomic_write_json(self.fs.app, cfg.model_dump())
        self._cfg = cfg
        return cfg

    # ---------- internals ----------
    def _validate(self, data: Dict[str, Any]) -> AppConfig:
        try:
            cfg = AppConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigError("Invalid configuration.", path=self.fs.app, errors=e.errors(include_url=False)) from e
        if cfg.config_version > CONFIG_VERSION:
            raise ConfigError("Config was written by a newer release.", path=self.fs.app, config_version=cfg.config_version, supported=CONFIG_VERSION)
        return cfg

    def _read_raw(self) -> Dict[str, Any]:
        rr = read_json_file(self.fs.app)
        if rr.ok and isinstance(rr.data, dict):
            return rr.data
        if rr.ok or (rr.error or "").startswith("corrupt_json"):
            self.logger.warning("Config file %s is corrupt; using defaults.", self.fs.app)
            if not self.read_only:
                move_corrupt(self.fs.app, self.fs.backups_dir)
            return {}
        if rr.error != "missing":
            raise ConfigError("Config file unreadable.", path=self.fs.app, error=rr.error)
        return {}
