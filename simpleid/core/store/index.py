from __future__ import annotations

import logging
from typing import Optional

from simpleid.core.errors import IdentityLoadError
from simpleid.core.store.identity import IdentityStore
from simpleid.core.store.lookup_cache import LookupCache


class IdentityIndex:
    """
    Reverse lookup from a public identifier (the `identity` field) to a user name.

    A miss scans every identity file and caches all of them. A cached entry is
    trusted only while it is within the cache TTL and the identity file it came
    from is unchanged; otherwise it is dropped and the directory rescanned.
    """

    def __init__(self, store: IdentityStore, cache: LookupCache[str, str], *, logger: Optional[logging.Logger] = None):
        self.store = store
        self.cache = cache
        self.logger = logger or logging.getLogger("simpleid.store")

    def find_user_by_identifier(self, identifier: str) -> Optional[str]:
        if not identifier:
            return None
        entry = self.cache.get(identifier)
        if entry is not None:
            if entry.source_mtime is not None and self.store.identity_mtime(entry.value) == entry.source_mtime:
                return entry.value
            self.cache.delete(identifier)
        return self._scan(identifier)

    def invalidate(self, identifier: Optional[str] = None) -> None:
        if identifier is None:
            self.cache.clear()
        else:
            self.cache.delete(identifier)

    def rebuild(self) -> int:
        self.cache.clear()
        self._scan(None)
        return len(self.cache)

    def _scan(self, identifier: Optional[str]) -> Optional[str]:
        # no early exit: every identity file is indexed on each scan
        found: Optional[str] = None
        for uid in self.store.list_users():
            mtime = self.store.identity_mtime(uid)
            try:
                user = self.store.load(uid)
            except IdentityLoadError as e:
                self.logger.warning("Skipping unreadable identity file for %s: %s", uid, e.context.get("error", e.code))
                continue
            ident = user.get("identity")
            if not isinstance(ident, str) or not ident:
                continue
            self.cache.set(ident, uid, source_mtime=mtime)
            if identifier is not None and ident == identifier:
                found = uid
        return found
