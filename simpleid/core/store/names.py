from __future__ import annotations

import re
from typing import Any

from simpleid.core.errors import InvalidNameError

# user names and setting names become file names
_SEPARATOR_RE = re.compile(r"[/\\]")


def is_valid_name(name: Any) -> bool:
    if not isinstance(name, str) or not name:
        return False
    return _SEPARATOR_RE.search(name) is None


def require_valid_name(name: Any, what: str = "name") -> str:
    if not is_valid_name(name):
        raise InvalidNameError(f"Invalid {what}.", name=str(name), kind=what)
    return name
