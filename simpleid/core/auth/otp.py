from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests
from pydantic import ValidationError

from simpleid.core.auth.models import OtpDeviceConfig, device_section, missing_device_fields
from simpleid.core.auth.otp_client import OtpClientFactory, http_client_factory
from simpleid.core.errors import OtpValidationError


class OtpDeviceVerifier:
    """
    Verifies a user who authenticates with a hardware OTP token.

    The OTP is always submitted to the validation service before checking that
    its device prefix matches the user's enrolled key_id, so an OTP rejected for
    belonging to the wrong device has still been consumed and cannot be replayed.
    """

    def __init__(self, *, client_factory: Optional[OtpClientFactory] = None, logger: Optional[logging.Logger] = None):
        self.client_factory = client_factory or http_client_factory()
        self.logger = logger or logging.getLogger("simpleid.auth")

    def verify(self, user: Dict[str, Any], credentials: Dict[str, Any]) -> bool:
        uid = user.get("uid", "?")

        section = device_section(user)
        if section is None:
            self.logger.warning("auth_method for %s is OTP-DEVICE, but the device section is missing from the identity file.", uid)
            return False
        missing = missing_device_fields(section)
        if missing:
            self.logger.warning(
                "auth_method for %s is OTP-DEVICE, but %s missing from the device section of the identity file.",
                uid,
                ", ".join(missing) + (" is" if len(missing) == 1 else " are"),
            )
            return False
        try:
            device = OtpDeviceConfig.model_validate(section)
        except ValidationError as e:
            self.logger.warning("Device section for %s is invalid: %s", uid, e.errors(include_url=False, include_input=False))
            return False

        otp = credentials.get("pass")
        if not otp or not isinstance(otp, str):
            self.logger.debug("auth_method for %s is OTP-DEVICE, but no OTP was sent.", uid)
            return False

        try:
            client = self.client_factory(device.client_id, device.client_key, device.use_https)
            for url in device.urls:
                client.add_url_part(url)
        except OtpValidationError as e:
            self.logger.warning("Device section for %s is unusable: %s", uid, e.status or e.code)
            return False

        # 1) spend the OTP at the validation service
        try:
            client.verify(otp)
        except OtpValidationError as e:
            self.logger.debug("OTP validation for %s failed: %s", uid, e.status or e.code)
            return False
        except requests.RequestException as e:
            self.logger.debug("OTP validation service unreachable for %s: %s", uid, e)
            return False

        # 2) only then check the device is the one enrolled for this user
        parts = client.parse(otp)
        if parts is None:
            self.logger.debug("OTP login for %s failed: the OTP does not look like one.", uid)
            return False
        if parts.prefix != device.key_id:
            self.logger.debug("OTP login for %s expects key prefix %s, but got %s.", uid, device.key_id, parts.prefix)
            return False
        return True
