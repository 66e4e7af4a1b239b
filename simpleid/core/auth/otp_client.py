from __future__ import annotations

import base64
import binascii
import hashlib
import hmac
import logging
import re
import secrets
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Sequence

import requests

from simpleid.core.config.models import DEFAULT_OTP_URLS
from simpleid.core.errors import OtpValidationError

# optional "password:" prefix, up to 16 chars of device prefix, 32 chars of token
_OTP_RE = re.compile(r"^(?:(?P<password>.*)[:])?(?P<otp>(?P<prefix>[cbdefghijklnrtuv]{0,16})(?P<ciphertext>[cbdefghijklnrtuv]{32}))$", re.IGNORECASE)

# the server gave a final answer about this OTP; asking another one cannot help
_DEFINITIVE_STATUSES = {
    "BAD_OTP",
    "REPLAYED_OTP",
    "BAD_SIGNATURE",
    "MISSING_PARAMETER",
    "NO_SUCH_CLIENT",
    "OPERATION_NOT_ALLOWED",
    "BAD_RESPONSE_SIGNATURE",
    "MISMATCHED_OTP",
    "MISMATCHED_NONCE",
}


@dataclass(frozen=True)
class OtpParts:
    otp: str
    prefix: str
    ciphertext: str
    password: Optional[str] = None


class OtpValidationClient(Protocol):
    def add_url_part(self, url_part: str) -> None: ...

    def verify(self, otp: str) -> bool: ...

    def parse(self, otp: str) -> Optional[OtpParts]: ...


class OtpClientFactory(Protocol):
    def __call__(self, client_id: str, client_key: str, use_https: bool) -> OtpValidationClient: ...


def parse_otp(value: str) -> Optional[OtpParts]:
    m = _OTP_RE.match(value or "")
    if not m:
        return None
    return OtpParts(otp=m.group("otp"), prefix=m.group("prefix"), ciphertext=m.group("ciphertext"), password=m.group("password"))


def _sign(params: Dict[str, str], key: bytes) -> str:
    msg = "&".join(f"{k}={params[k]}" for k in sorted(params))
    digest = hmac.new(key, msg.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


def _parse_response(body: str) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for line in body.splitlines():
        line = line.strip()
        if not line or "=" not in line:
            continue
        k, v = line.split("=", 1)
        out[k.strip()] = v.strip()
    return out


class HttpOtpValidationClient:
    """
    Validation protocol 2.0 client (YubiCloud compatible).

    Endpoints are tried in order. The first OK answer wins; a definitive error
    (bad or replayed OTP, bad signature, ...) stops immediately; transport
    errors and transient statuses move on to the next endpoint.
    """

    def __init__(
        self,
        client_id: str,
        client_key: str = "",
        use_https: bool = True,
        *,
        default_urls: Sequence[str] = DEFAULT_OTP_URLS,
        timeout_seconds: float = 10.0,
        logger: Optional[logging.Logger] = None,
    ):
        self.client_id = str(client_id)
        self.use_https = bool(use_https)
        self.timeout_seconds = float(timeout_seconds)
        self.logger = logger or logging.getLogger("simpleid.auth.otp")
        self._default_urls = list(default_urls)
        self._url_parts: List[str] = []
        self._key: Optional[bytes] = None
        if client_key:
            try:
                self._key = base64.b64decode(client_key, validate=True)
            except (binascii.Error, ValueError) as e:
                raise OtpValidationError("Client key is not valid base64.", status="BAD_CLIENT_KEY") from e

    def add_url_part(self, url_part: str) -> None:
        self._url_parts.append(str(url_part))

    def urls(self) -> List[str]:
        scheme = "https://" if self.use_https else "http://"
        parts = self._url_parts or self._default_urls
        return [scheme + p.split("://", 1)[-1] for p in parts]

    def parse(self, otp: str) -> Optional[OtpParts]:
        return parse_otp(otp)

    def verify(self, otp: str) -> bool:
        parts = self.parse(otp)
        if parts is None:
            raise OtpValidationError("OTP is malformed.", status="MALFORMED_OTP")

        nonce = secrets.token_hex(16)
        params = {"id": self.client_id, "otp": parts.otp, "nonce": nonce}
        if self._key is not None:
            params["h"] = _sign(params, self._key)

        last_status = "NO_ENDPOINT"
        for url in self.urls():
            try:
                r = requests.get(url, params=params, timeout=self.timeout_seconds)
                r.raise_for_status()
            except requests.RequestException as e:
                self.logger.debug("OTP validation endpoint %s failed: %s", url, e)
                last_status = "TRANSPORT_ERROR"
                continue
            status = self._check_response(_parse_response(r.text), parts.otp, nonce)
            if status == "OK":
                return True
            last_status = status
            if status in _DEFINITIVE_STATUSES:
                break
            self.logger.debug("OTP validation endpoint %s answered %s", url, status)
        raise OtpValidationError("OTP was not accepted.", status=last_status)

    def _check_response(self, resp: Dict[str, str], otp: str, nonce: str) -> str:
        status = resp.get("status", "MISSING_STATUS")
        if status != "OK":
            return status
        if resp.get("otp") != otp:
            return "MISMATCHED_OTP"
        if resp.get("nonce") != nonce:
            return "MISMATCHED_NONCE"
        if self._key is not None:
            expected = _sign({k: v for k, v in resp.items() if k != "h"}, self._key)
            if not hmac.compare_digest(expected, resp.get("h", "")):
                return "BAD_RESPONSE_SIGNATURE"
        return "OK"


def http_client_factory(*, default_urls: Sequence[str] = DEFAULT_OTP_URLS, timeout_seconds: float = 10.0) -> OtpClientFactory:
    def _make(client_id: str, client_key: str, use_https: bool) -> OtpValidationClient:
        return HttpOtpValidationClient(client_id, client_key, use_https, default_urls=default_urls, timeout_seconds=timeout_seconds)

    return _make
