from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
import hashlib
import hmac
import json
from typing import Any


def _urlsafe_b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _urlsafe_b64decode(raw: str) -> bytes:
    padding = "=" * ((4 - len(raw) % 4) % 4)
    return base64.urlsafe_b64decode((raw + padding).encode("ascii"))


@dataclass(frozen=True)
class AccessTokenClaims:
    sub: str
    role: str
    exp: int
    iat: int
    email: str = ""
    full_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "sub": self.sub,
            "role": self.role,
            "exp": self.exp,
            "iat": self.iat,
            "email": self.email,
            "full_name": self.full_name,
        }


class AccessTokenVerifier:
    """HS256 access tokens as issued by the auth backend.

    Issuing is only used by local tooling and tests; the service itself
    verifies tokens.
    """

    def __init__(self, secret: str, access_minutes: int = 60) -> None:
        if not secret:
            raise ValueError("JWT secret cannot be empty")
        self._secret = secret.encode("utf-8")
        self._access_minutes = access_minutes

    def issue(self, subject: str, role: str, *, email: str = "", full_name: str = "") -> str:
        now = datetime.now(timezone.utc)
        claims = AccessTokenClaims(
            sub=subject,
            role=role,
            iat=int(now.timestamp()),
            exp=int((now + timedelta(minutes=self._access_minutes)).timestamp()),
            email=email,
            full_name=full_name,
        )
        header = {"alg": "HS256", "typ": "JWT"}
        header_raw = _urlsafe_b64encode(json.dumps(header, separators=(",", ":")).encode("utf-8"))
        payload_raw = _urlsafe_b64encode(json.dumps(claims.to_dict(), separators=(",", ":")).encode("utf-8"))
        return f"{header_raw}.{payload_raw}.{self._sign(header_raw, payload_raw)}"

    def verify(self, token: str) -> AccessTokenClaims:
        try:
            header_raw, payload_raw, sig_raw = token.split(".")
        except ValueError as exc:
            raise ValueError("malformed token") from exc
        if not hmac.compare_digest(self._sign(header_raw, payload_raw), sig_raw):
            raise ValueError("invalid token signature")
        payload = json.loads(_urlsafe_b64decode(payload_raw))
        exp = int(payload.get("exp", 0))
        if exp <= int(datetime.now(timezone.utc).timestamp()):
            raise ValueError("token expired")
        return AccessTokenClaims(
            sub=str(payload.get("sub", "")),
            role=str(payload.get("role", "")),
            exp=exp,
            iat=int(payload.get("iat", 0)),
            email=str(payload.get("email", "")),
            full_name=str(payload.get("full_name", "")),
        )

    def _sign(self, header_raw: str, payload_raw: str) -> str:
        signed = f"{header_raw}.{payload_raw}".encode("ascii")
        return _urlsafe_b64encode(hmac.new(self._secret, signed, hashlib.sha256).digest())
