from __future__ import annotations

from typing import Any, Dict

from simpleid.core.auth.models import AuthMethod, device_section

_HIDDEN = {"client_key"}


def describe_device(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Summary of the user's OTP device settings for the profile page.

    The client key is never included.
    """
    section = device_section(user) or {}
    settings: Dict[str, str] = {}
    for name, value in section.items():
        if name in _HIDDEN:
            continue
        if isinstance(value, (list, tuple)):
            settings[name] = ", ".join(str(v) for v in value)
        else:
            settings[name] = str(value)
    return {
        "configured": bool(section),
        "config_warning": AuthMethod.from_record(user) is not AuthMethod.OTP_DEVICE,
        "settings": settings,
    }
