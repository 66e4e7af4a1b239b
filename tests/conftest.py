from __future__ import annotations

import os
from typing import Any, Callable, Dict

import pytest

from simpleid.core.config.paths import StoreFsPaths
from simpleid.core.store.identity import IdentityStore

from .helpers.identity_builders import render_identity


@pytest.fixture
def store_paths(tmp_path) -> StoreFsPaths:
    """
    Isolated identities/ and store/ directories under tmp_path.
    """
    paths = StoreFsPaths(identities_dir=str(tmp_path / "identities"), store_dir=str(tmp_path / "store"))
    os.makedirs(paths.identities_dir, exist_ok=True)
    os.makedirs(paths.store_dir, exist_ok=True)
    return paths


@pytest.fixture
def identity_store(store_paths) -> IdentityStore:
    return IdentityStore(store_paths)


@pytest.fixture
def write_identity(store_paths) -> Callable[[str, Dict[str, Any]], str]:
    def _write(uid: str, record: Dict[str, Any]) -> str:
        path = store_paths.identity_file(uid)
        with open(path, "w", encoding="utf-8") as f:
            f.write(render_identity(record))
        return path

    return _write
