"""
File-backed identity and settings stores.
"""

from simpleid.core.store.identity import IdentityStore
from simpleid.core.store.index import IdentityIndex
from simpleid.core.store.lookup_cache import LookupCache
from simpleid.core.store.names import is_valid_name, require_valid_name
from simpleid.core.store.settings_cache import SettingsCache

__all__ = [
    "IdentityStore",
    "IdentityIndex",
    "LookupCache",
    "SettingsCache",
    "is_valid_name",
    "require_valid_name",
]
