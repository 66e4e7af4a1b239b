from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from simpleid.core.logger import redact


class Severity(str, Enum):
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class SimpleIDError(Exception):
    code: str
    user_message: str
    severity: Severity = Severity.ERROR
    recoverable: bool = True
    context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.code)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "user_message": self.user_message,
            "severity": self.severity.value,
            "recoverable": bool(self.recoverable),
            "context": redact(self.context or {}),
        }


class InvalidNameError(SimpleIDError):
    """
    A user or setting name that would escape its directory.

    Raised only on write paths; read paths report "not found" instead.
    """

    def __init__(self, user_message: str = "Invalid name.", **ctx: Any):
        super().__init__("invalid_name", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class ConfigError(SimpleIDError):
    def __init__(self, user_message: str = "Configuration error.", **ctx: Any):
        super().__init__("config_error", user_message, severity=Severity.CRITICAL, recoverable=False, context=ctx)


class IdentityLoadError(SimpleIDError):
    def __init__(self, user_message: str = "Identity file could not be loaded.", **ctx: Any):
        super().__init__("identity_load_error", user_message, severity=Severity.ERROR, recoverable=False, context=ctx)


class OtpValidationError(SimpleIDError):
    def __init__(self, user_message: str = "OTP validation failed.", *, status: Optional[str] = None, **ctx: Any):
        if status is not None:
            ctx["status"] = status
        super().__init__("otp_validation_error", user_message, severity=Severity.WARN, recoverable=True, context=ctx)

    @property
    def status(self) -> Optional[str]:
        return self.context.get("status")
