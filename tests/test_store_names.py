from __future__ import annotations

import os

import pytest

from simpleid.core.errors import InvalidNameError, Severity
from simpleid.core.store.names import is_valid_name, require_valid_name
from simpleid.core.store.settings_cache import SettingsCache

BAD_NAMES = ["../etc/passwd", "a/b", "a\\b", "\\", "/", "trailing/"]


@pytest.mark.parametrize("name", ["alice", "bob.smith", "user-1", "..", "a b"])
def test_plain_names_are_valid(name):
    assert is_valid_name(name) is True
    assert require_valid_name(name) == name


@pytest.mark.parametrize("name", BAD_NAMES + ["", None, 42])
def test_separators_and_non_strings_are_invalid(name):
    assert is_valid_name(name) is False


def test_require_valid_name_is_fatal():
    with pytest.raises(InvalidNameError) as ei:
        require_valid_name("a/b", "user name")
    assert ei.value.recoverable is False
    assert ei.value.severity == Severity.CRITICAL
    assert ei.value.context["name"] == "a/b"


@pytest.mark.parametrize("name", BAD_NAMES)
def test_bad_names_never_touch_the_filesystem(name, store_paths, identity_store):
    before = sorted(os.listdir(store_paths.store_dir)), sorted(os.listdir(store_paths.identities_dir))
    settings = SettingsCache(store_paths)

    assert identity_store.exists(name) is False
    assert identity_store.load(name) == {}
    assert settings.get(name, "dflt") == "dflt"
    with pytest.raises(InvalidNameError):
        identity_store.save(name, {"x": 1})
    with pytest.raises(InvalidNameError):
        identity_store.delete_settings(name)
    with pytest.raises(InvalidNameError):
        settings.set(name, 1)
    with pytest.raises(InvalidNameError):
        settings.delete(name)

    after = sorted(os.listdir(store_paths.store_dir)), sorted(os.listdir(store_paths.identities_dir))
    assert before == after
