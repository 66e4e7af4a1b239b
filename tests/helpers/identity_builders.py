from __future__ import annotations

import hashlib
from typing import Any, Dict, Optional


def _with_overrides(
    base: Dict[str, Any],
    overrides: Optional[Dict[str, Any]] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    out = dict(base)
    if overrides:
        out.update(overrides)
    if kwargs:
        out.update(kwargs)
    return out


def md5_hex(s: str) -> str:
    return hashlib.md5(s.encode("utf-8")).hexdigest()


def build_static_identity(*, password: str = "secret", overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    base = {"identity": "http://example.com/alice", "auth_method": "STATIC", "pass": md5_hex(password)}
    return _with_overrides(base, overrides, **kwargs)


def build_device_section(*, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    base = {"client_id": "1234", "client_key": "c2VjcmV0a2V5", "use_https": "true", "key_id": "ccccccbtgnlc"}
    return _with_overrides(base, overrides, **kwargs)


def build_otp_identity(*, device: Optional[Dict[str, Any]] = None, overrides: Optional[Dict[str, Any]] = None, **kwargs: Any) -> Dict[str, Any]:
    base = {
        "identity": "http://example.com/bob",
        "auth_method": "OTP-DEVICE",
        "otp_device": build_device_section() if device is None else device,
    }
    return _with_overrides(base, overrides, **kwargs)


def render_identity(record: Dict[str, Any]) -> str:
    """
    Render a record as identity file text: scalars first, then one section per dict.
    """
    lines = []
    for k, v in record.items():
        if not isinstance(v, dict):
            lines.append(f'{k} = "{v}"')
    for name, section in record.items():
        if not isinstance(section, dict):
            continue
        lines.append("")
        lines.append(f"[{name}]")
        for k, v in section.items():
            if isinstance(v, list):
                for item in v:
                    lines.append(f'{k}[] = "{item}"')
            else:
                lines.append(f'{k} = "{v}"')
    return "\n".join(lines) + "\n"
