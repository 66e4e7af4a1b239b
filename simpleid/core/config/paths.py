from __future__ import annotations

import os
from dataclasses import dataclass

from simpleid.core.config.models import StoreConfig


@dataclass(frozen=True)
class ConfigFsPaths:
    root: str = "."

    @property
    def config_dir(self) -> str:
        return os.path.join(self.root, "config")

    @property
    def backups_dir(self) -> str:
        return os.path.join(self.config_dir, "backups")

    @property
    def app(self) -> str:
        return os.path.join(self.config_dir, "simpleid.json")

    def resolve(self, path: str) -> str:
        """Relative paths in the config file are relative to the root."""
        if os.path.isabs(path):
            return path
        return os.path.join(self.root, path)


@dataclass(frozen=True)
class StoreFsPaths:
    """
    File layout of the identity and settings stores.

    Callers must validate names before asking for a path.
    """

    identities_dir: str
    store_dir: str
    identity_suffix: str = ".identity"
    settings_suffix: str = ".usrstore"
    setting_suffix: str = ".setting"

    @classmethod
    def from_config(cls, cfg: StoreConfig, fs: ConfigFsPaths) -> "StoreFsPaths":
        return cls(
            identities_dir=fs.resolve(cfg.identities_dir),
            store_dir=fs.resolve(cfg.store_dir),
            identity_suffix=cfg.identity_suffix,
            settings_suffix=cfg.settings_suffix,
            setting_suffix=cfg.setting_suffix,
        )

    def identity_file(self, uid: str) -> str:
        return os.path.join(self.identities_dir, uid + self.identity_suffix)

    def settings_file(self, uid: str) -> str:
        return os.path.join(self.store_dir, uid + self.settings_suffix)

    def setting_file(self, name: str) -> str:
        return os.path.join(self.store_dir, name + self.setting_suffix)

    def uid_from_identity_filename(self, filename: str) -> str:
        return filename[: -len(self.identity_suffix)]
