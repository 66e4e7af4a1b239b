from __future__ import annotations

import configparser

import pytest

from simpleid.core.store.identity_file import parse_identity_text


def test_top_level_keys_and_sections():
    text = """
; operator comment
identity = "http://example.com/alice"
pass = 5f4dcc3b5aa765d61d8327deb882cf99
auth_method = OTP-DEVICE

[otp_device]
client_id = 1234
client_key = "c2VjcmV0a2V5"
use_https = true
key_id = ccccccbtgnlc
"""
    rec = parse_identity_text(text)
    assert rec["identity"] == "http://example.com/alice"
    assert rec["pass"] == "5f4dcc3b5aa765d61d8327deb882cf99"
    assert rec["auth_method"] == "OTP-DEVICE"
    assert rec["otp_device"] == {
        "client_id": "1234",
        "client_key": "c2VjcmV0a2V5",
        "use_https": "true",
        "key_id": "ccccccbtgnlc",
    }


def test_list_keys_collect_in_order_and_keep_case():
    text = """
identity = http://example.com/bob

[yubikey]
URLs[] = "a.example.com/verify"
URLs[] = "b.example.com/verify"
key_id = cccc
"""
    rec = parse_identity_text(text)
    assert rec["yubikey"]["URLs"] == ["a.example.com/verify", "b.example.com/verify"]
    assert "urls" not in rec["yubikey"]


def test_list_keys_are_counted_per_section():
    text = "a[] = 1\na[] = 2\n[s]\na[] = 3\n"
    rec = parse_identity_text(text)
    assert rec["a"] == ["1", "2"]
    assert rec["s"]["a"] == ["3"]


def test_single_quotes_stripped_and_inline_comments_ignored():
    rec = parse_identity_text("identity = 'http://x/' ; the public id\n")
    assert rec["identity"] == "http://x/"


def test_duplicate_keys_are_rejected():
    with pytest.raises(configparser.Error):
        parse_identity_text("identity = a\nidentity = b\n")


def test_garbage_is_rejected():
    with pytest.raises(configparser.Error):
        parse_identity_text("this is not an identity file\n")


def test_semicolon_inside_double_quotes_is_kept():
    text = 'identity = "http://example.com/a ; b" ; trailing note\n[otp_device] ; legacy layout\nkey_id = "cc;cc"\n'
    rec = parse_identity_text(text)
    assert rec["identity"] == "http://example.com/a ; b"
    assert rec["otp_device"] == {"key_id": "cc;cc"}
