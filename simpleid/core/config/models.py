from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator


CONFIG_VERSION = 1

DEFAULT_OTP_URLS: List[str] = [
    "api.yubico.com/wsapi/2.0/verify",
    "api2.yubico.com/wsapi/2.0/verify",
    "api3.yubico.com/wsapi/2.0/verify",
    "api4.yubico.com/wsapi/2.0/verify",
    "api5.yubico.com/wsapi/2.0/verify",
]


class StoreConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    identities_dir: str = "identities"
    store_dir: str = "store"
    identity_suffix: str = ".identity"
    settings_suffix: str = ".usrstore"
    setting_suffix: str = ".setting"

    @field_validator("identity_suffix", "settings_suffix", "setting_suffix")
    @classmethod
    def _suffix_is_extension(cls, v: str) -> str:
        if not v.startswith(".") or "/" in v or "\\" in v:
            raise ValueError("suffix must start with '.' and contain no path separators")
        return v


class AuthConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    # plaintext password posted without a challenge digest
    allow_legacy_login: bool = False


class OtpConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    timeout_seconds: float = Field(default=10.0, gt=0)
    default_urls: List[str] = Field(default_factory=lambda: list(DEFAULT_OTP_URLS))


class IndexConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    ttl_seconds: float = Field(default=300.0, ge=0)


class AppConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    config_version: int = Field(default=CONFIG_VERSION, ge=1)
    log_dir: str = "logs"
    store: StoreConfig = Field(default_factory=StoreConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    otp: OtpConfig = Field(default_factory=OtpConfig)
    index: IndexConfig = Field(default_factory=IndexConfig)
