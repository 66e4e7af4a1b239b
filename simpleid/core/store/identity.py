from __future__ import annotations

import configparser
import logging
import os
from typing import Any, Dict, Iterable, List, Optional

from simpleid.core.config.paths import StoreFsPaths
from simpleid.core.errors import IdentityLoadError
from simpleid.core.store.identity_file import read_identity_file
from simpleid.core.store.io import atomic_write_json, read_json_file, remove_if_exists
from simpleid.core.store.names import is_valid_name, require_valid_name


class IdentityStore:
    """
    Layered per-user store.

    - identities/<uid>.identity: operator-authored, never written here.
    - store/<uid>.usrstore: JSON settings record owned by this store.

    `load` merges both with identity fields taking precedence.
    """

    def __init__(self, paths: StoreFsPaths, *, logger: Optional[logging.Logger] = None):
        self.paths = paths
        self.logger = logger or logging.getLogger("simpleid.store")

    def exists(self, uid: str) -> bool:
        if not is_valid_name(uid):
            return False
        return os.path.isfile(self.paths.identity_file(uid))

    def load(self, uid: str) -> Dict[str, Any]:
        if not is_valid_name(uid):
            return {}

        user: Dict[str, Any] = {}
        rr = read_json_file(self.paths.settings_file(uid))
        if rr.ok and isinstance(rr.data, dict):
            user.update(rr.data)
        elif rr.error != "missing":
            self.logger.warning("Settings record for %s is unreadable (%s); ignoring it.", uid, rr.error or "not_object")

        path = self.paths.identity_file(uid)
        try:
            identity = read_identity_file(path)
        except FileNotFoundError as e:
            raise IdentityLoadError("Identity file not found.", uid=uid, path=path) from e
        except (OSError, UnicodeDecodeError, configparser.Error) as e:
            raise IdentityLoadError("Identity file could not be parsed.", uid=uid, path=path, error=str(e)) from e

        user.update(identity)
        user["uid"] = uid
        return user

    def save(self, uid: str, data: Dict[str, Any], exclude: Iterable[str] = ()) -> None:
        record = dict(data)
        for key in exclude:
            record.pop(key, None)
        require_valid_name(uid, "user name")
        atomic_write_json(self.paths.settings_file(uid), record)

    def delete_settings(self, uid: str) -> bool:
        require_valid_name(uid, "user name")
        return remove_if_exists(self.paths.settings_file(uid))

    def list_users(self) -> List[str]:
        try:
            names = sorted(os.listdir(self.paths.identities_dir))
        except FileNotFoundError:
            return []
        out: List[str] = []
        for name in names:
            if not name.endswith(self.paths.identity_suffix) or name == self.paths.identity_suffix:
                continue
            if os.path.isfile(os.path.join(self.paths.identities_dir, name)):
                out.append(self.paths.uid_from_identity_filename(name))
        return out

    def identity_mtime(self, uid: str) -> Optional[int]:
        if not is_valid_name(uid):
            return None
        try:
            return os.stat(self.paths.identity_file(uid)).st_mtime_ns
        except OSError:
            return None
