from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

from simpleid.core.auth.models import AuthMethod
from simpleid.core.auth.otp import OtpDeviceVerifier
from simpleid.core.auth.static import StaticPasswordVerifier
from simpleid.core.errors import IdentityLoadError
from simpleid.core.store.identity import IdentityStore
from simpleid.core.store.names import is_valid_name

Strategy = Callable[[Dict[str, Any], Dict[str, Any]], bool]


class CredentialVerifier:
    """
    Entry point for the login layer: verify_credentials(uid, credentials) -> bool.

    Reasons for rejection are logged, never returned.
    """

    def __init__(
        self,
        *,
        store: IdentityStore,
        static: Optional[StaticPasswordVerifier] = None,
        otp: Optional[OtpDeviceVerifier] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.store = store
        self.logger = logger or logging.getLogger("simpleid.auth")
        self.static = static or StaticPasswordVerifier(logger=self.logger)
        self.otp = otp or OtpDeviceVerifier(logger=self.logger)
        self._strategies: Dict[AuthMethod, Strategy] = {
            AuthMethod.STATIC: self.static.verify,
            AuthMethod.OTP_DEVICE: self.otp.verify,
        }

    def verify_credentials(self, uid: str, credentials: Dict[str, Any]) -> bool:
        if not is_valid_name(uid) or not self.store.exists(uid):
            self.logger.debug("Login failed: no such user %r.", uid)
            return False
        try:
            user = self.store.load(uid)
        except IdentityLoadError as e:
            self.logger.warning("Login for %s failed: %s", uid, e.context.get("error", e.user_message))
            return False
        return self.verify_user(user, credentials or {})

    def verify_user(self, user: Dict[str, Any], credentials: Dict[str, Any]) -> bool:
        method = AuthMethod.from_record(user)
        if method is None:
            self.logger.warning("auth_method %r for %s is not recognised.", user.get("auth_method"), user.get("uid", "?"))
            return False
        return self._strategies[method](user, credentials)
