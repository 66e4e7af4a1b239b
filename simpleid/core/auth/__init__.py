from simpleid.core.auth.models import AuthMethod, OtpDeviceConfig
from simpleid.core.auth.otp import OtpDeviceVerifier
from simpleid.core.auth.otp_client import HttpOtpValidationClient, OtpParts, OtpValidationClient, http_client_factory, parse_otp
from simpleid.core.auth.profile import describe_device
from simpleid.core.auth.static import StaticPasswordVerifier, StoredPassword
from simpleid.core.auth.verifier import CredentialVerifier

__all__ = [
    "AuthMethod",
    "OtpDeviceConfig",
    "OtpDeviceVerifier",
    "HttpOtpValidationClient",
    "OtpParts",
    "OtpValidationClient",
    "http_client_factory",
    "parse_otp",
    "describe_device",
    "StaticPasswordVerifier",
    "StoredPassword",
    "CredentialVerifier",
]
