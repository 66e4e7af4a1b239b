"""
Identity file parsing.

Identity files are INI-style and written by operators, e.g.::

    identity = "http://example.com/alice"
    pass = "5f4dcc3b5aa765d61d8327deb882cf99"
    auth_method = OTP-DEVICE

    [otp_device]
    client_id = 1234
    client_key = "c2VjcmV0"
    use_https = true
    key_id = ccccccbtgnlc
    URLs[] = "api.example.com/wsapi/2.0/verify"

Keys before the first section are top-level record fields; each section
becomes a nested mapping. `name[] = value` lines collect into a list.
A `;` after whitespace starts a comment unless it is inside double quotes.
"""

from __future__ import annotations

import configparser
import re
from typing import Any, Dict, List, Tuple

_ROOT = "__root__"
_NO_DEFAULTS = "__no_defaults__"
_SECTION_RE = re.compile(r"^\s*\[([^\]]+)\]\s*$")
_LIST_KEY_RE = re.compile(r"^([^=\s\[\];#]+)\[\]\s*=")
_INDEXED_KEY_RE = re.compile(r"^(.+)\[(\d+)\]$")


def _strip_inline_comment(line: str) -> str:
    quoted = False
    for i, ch in enumerate(line):
        if ch == '"':
            quoted = not quoted
        elif ch == ";" and not quoted and i > 0 and line[i - 1].isspace():
            return line[:i].rstrip()
    return line


def _normalize_lines(text: str) -> str:
    counters: Dict[Tuple[str, str], int] = {}
    section = _ROOT
    out: List[str] = []
    for line in text.splitlines():
        # no continuation lines: indentation is insignificant
        line = _strip_inline_comment(line.strip())
        m = _SECTION_RE.match(line)
        if m:
            section = m.group(1).strip()
            out.append(line)
            continue
        m = _LIST_KEY_RE.match(line)
        if m:
            key = (section, m.group(1))
            n = counters.get(key, 0)
            counters[key] = n + 1
            line = f"{m.group(1)}[{n}] =" + line[m.end():]
        out.append(line)
    return "\n".join(out)


def _unquote(value: str) -> str:
    v = value.strip()
    if len(v) >= 2 and v[0] == v[-1] and v[0] in ('"', "'"):
        return v[1:-1]
    return v


def _collect(items: List[Tuple[str, str]]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    lists: Dict[str, List[Tuple[int, str]]] = {}
    for k, v in items:
        m = _INDEXED_KEY_RE.match(k)
        if m:
            lists.setdefault(m.group(1), []).append((int(m.group(2)), _unquote(v)))
        else:
            out[k] = _unquote(v)
    for name, entries in lists.items():
        out[name] = [v for _, v in sorted(entries)]
    return out


def parse_identity_text(text: str) -> Dict[str, Any]:
    """
    Parse identity file contents; raises configparser.Error on malformed input.
    """
    parser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=",),
        default_section=_NO_DEFAULTS,
        comment_prefixes=(";", "#"),
        strict=True,
    )
    parser.optionxform = str  # type: ignore[assignment]
    parser.read_string(f"[{_ROOT}]\n" + _normalize_lines(text))

    record: Dict[str, Any] = _collect(parser.items(_ROOT))
    for section in parser.sections():
        if section == _ROOT:
            continue
        record[section] = _collect(parser.items(section))
    return record


def read_identity_file(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return parse_identity_text(f.read())
