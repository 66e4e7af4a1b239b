from __future__ import annotations

import os
from typing import Optional

from simpleid.core.store.index import IdentityIndex
from simpleid.core.store.lookup_cache import LookupCache

from .helpers.fakes import FakeClock
from .helpers.identity_builders import build_otp_identity, build_static_identity


def _index(identity_store, *, ttl: float = 300.0, clock: Optional[FakeClock] = None) -> IdentityIndex:
    clock = clock or FakeClock()
    return IdentityIndex(identity_store, LookupCache(ttl_seconds=ttl, clock=clock.time))


def _bump_mtime(path: str) -> None:
    st = os.stat(path)
    os.utime(path, ns=(st.st_atime_ns, st.st_mtime_ns + 5_000_000_000))


def test_finds_user_and_indexes_every_file(identity_store, write_identity):
    write_identity("alice", build_static_identity())
    write_identity("bob", build_otp_identity())
    idx = _index(identity_store)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"
    # the full scan cached bob as a side effect
    assert sorted(idx.cache.keys()) == ["http://example.com/alice", "http://example.com/bob"]


def test_unknown_identifier_returns_none(identity_store, write_identity):
    write_identity("alice", build_static_identity())
    idx = _index(identity_store)
    assert idx.find_user_by_identifier("http://nobody/") is None
    assert idx.find_user_by_identifier("") is None


def test_cache_hit_skips_scan(identity_store, write_identity, monkeypatch):
    write_identity("alice", build_static_identity())
    idx = _index(identity_store)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"

    calls = {"n": 0}
    real = identity_store.list_users

    def counting():
        calls["n"] += 1
        return real()

    monkeypatch.setattr(identity_store, "list_users", counting)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"
    assert calls["n"] == 0


def test_changed_identity_file_invalidates_entry(identity_store, write_identity):
    write_identity("alice", build_static_identity())
    idx = _index(identity_store)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"

    path = write_identity("alice", build_static_identity(identity="http://example.com/alice2"))
    _bump_mtime(path)
    assert idx.find_user_by_identifier("http://example.com/alice") is None
    assert idx.find_user_by_identifier("http://example.com/alice2") == "alice"


def test_removed_identity_file_invalidates_entry(identity_store, write_identity):
    path = write_identity("alice", build_static_identity())
    idx = _index(identity_store)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"
    os.remove(path)
    assert idx.find_user_by_identifier("http://example.com/alice") is None


def test_entries_expire_after_ttl(identity_store, write_identity):
    write_identity("alice", build_static_identity())
    clock = FakeClock()
    idx = _index(identity_store, ttl=60, clock=clock)
    idx.find_user_by_identifier("http://example.com/alice")
    assert idx.cache.get("http://example.com/alice") is not None
    clock.advance(61)
    assert idx.cache.get("http://example.com/alice") is None
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"


def test_zero_ttl_disables_caching(identity_store, write_identity):
    write_identity("alice", build_static_identity())
    idx = _index(identity_store, ttl=0)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"
    assert len(idx.cache) == 0


def test_unreadable_files_are_skipped(identity_store, write_identity, store_paths):
    write_identity("alice", build_static_identity())
    with open(store_paths.identity_file("broken"), "w", encoding="utf-8") as f:
        f.write("garbage\n")
    idx = _index(identity_store)
    assert idx.find_user_by_identifier("http://example.com/alice") == "alice"


def test_invalidate_and_rebuild(identity_store, write_identity):
    write_identity("alice", build_static_identity())
    write_identity("bob", build_otp_identity())
    idx = _index(identity_store)
    assert idx.rebuild() == 2
    idx.invalidate("http://example.com/bob")
    assert idx.cache.keys() == ["http://example.com/alice"]
    idx.invalidate()
    assert len(idx.cache) == 0
