from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional


def _same(a: str, b: str) -> bool:
    return hmac.compare_digest(a.encode("utf-8"), b.encode("utf-8"))


@dataclass(frozen=True)
class StoredPassword:
    """
    The identity file's `pass` field: `<hexdigest>[:<algorithm>[:<salt>]]`.
    """

    hexdigest: str
    algorithm: str = "md5"
    salt: str = ""

    @classmethod
    def parse(cls, value: str) -> "StoredPassword":
        parts = str(value).split(":", 2)
        hexdigest = parts[0].strip().lower()
        algorithm = parts[1].strip().lower() if len(parts) > 1 and parts[1].strip() else "md5"
        salt = parts[2] if len(parts) > 2 else ""
        return cls(hexdigest=hexdigest, algorithm=algorithm, salt=salt)

    def supported(self) -> bool:
        if self.algorithm.startswith("shake_"):
            return False
        return self.algorithm in hashlib.algorithms_available and bool(self.hexdigest)

    def _hash(self, data: str) -> str:
        return hashlib.new(self.algorithm, data.encode("utf-8")).hexdigest()

    def hash_password(self, password: str) -> str:
        return self._hash(password + self.salt)

    def challenge_digest(self, nonce: str) -> str:
        return self._hash(f"{nonce}:{self.hexdigest}")


class StaticPasswordVerifier:
    def __init__(self, *, allow_legacy_login: bool = False, logger: Optional[logging.Logger] = None):
        self.allow_legacy_login = bool(allow_legacy_login)
        self.logger = logger or logging.getLogger("simpleid.auth")

    def verify(self, user: Dict[str, Any], credentials: Dict[str, Any]) -> bool:
        uid = user.get("uid", "?")
        raw = user.get("pass")
        if not isinstance(raw, str) or not raw:
            self.logger.warning("auth_method for %s is STATIC, but no pass is set in the identity file.", uid)
            return False
        stored = StoredPassword.parse(raw)
        if not stored.supported():
            self.logger.warning("pass for %s uses unsupported hash algorithm %r.", uid, stored.algorithm)
            return False

        digest = credentials.get("digest")
        if digest:
            nonce = credentials.get("nonce")
            if not nonce:
                self.logger.debug("Digest login for %s failed: no nonce was sent.", uid)
                return False
            ok = _same(stored.challenge_digest(str(nonce)), str(digest).strip().lower())
            if not ok:
                self.logger.debug("Digest login for %s failed: digest mismatch.", uid)
            return ok

        if not self.allow_legacy_login:
            self.logger.debug("Login for %s failed: no digest was sent and legacy login is disabled.", uid)
            return False

        password = credentials.get("pass")
        if not password:
            self.logger.debug("Legacy login for %s failed: no password was sent.", uid)
            return False
        ok = _same(stored.hash_password(str(password)), stored.hexdigest)
        if not ok:
            self.logger.debug("Legacy login for %s failed: password mismatch.", uid)
        return ok
