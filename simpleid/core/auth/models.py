from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# identity file section holding the OTP token settings; "yubikey" is the older name
DEVICE_SECTIONS = ("otp_device", "yubikey")
REQUIRED_DEVICE_FIELDS = ("client_id", "client_key", "use_https", "key_id")


class AuthMethod(str, Enum):
    STATIC = "STATIC"
    OTP_DEVICE = "OTP-DEVICE"

    @classmethod
    def from_record(cls, user: Dict[str, Any]) -> Optional["AuthMethod"]:
        """
        Absent means STATIC. Unknown values return None so callers can reject.
        """
        raw = user.get("auth_method")
        if raw is None or raw == "":
            return cls.STATIC
        value = str(raw).strip().upper()
        if value == "YUBIKEY":
            return cls.OTP_DEVICE
        try:
            return cls(value)
        except ValueError:
            return None


class OtpDeviceConfig(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    client_id: str
    client_key: str
    use_https: bool
    key_id: str
    urls: List[str] = Field(default_factory=list, alias="URLs")

    @field_validator("client_id", "client_key", "key_id", mode="before")
    @classmethod
    def _scalar_as_str(cls, v: Any) -> Any:
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("urls", mode="before")
    @classmethod
    def _urls_as_list(cls, v: Any) -> Any:
        if v is None or v == "":
            return []
        if isinstance(v, str):
            return [p.strip() for p in v.split(",") if p.strip()]
        return v


def device_section(user: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for name in DEVICE_SECTIONS:
        section = user.get(name)
        if isinstance(section, dict):
            return section
    return None


def missing_device_fields(section: Dict[str, Any]) -> List[str]:
    return [f for f in REQUIRED_DEVICE_FIELDS if section.get(f) is None]
