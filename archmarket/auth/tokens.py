"""
Bearer tokens for marketplace callers.

Tokens are compact ``header.claims.signature`` strings (URL-safe base64,
no padding) signed with Ed25519. The header names the signing key by
``kid`` so a ``KeyRing`` can rotate keys without invalidating tokens that
are still in flight:

- ``active``  signs new tokens and verifies
- ``retired`` verifies only
- ``revoked`` does neither

Claims carry ``sub`` (user id) and ``roles`` (``customer`` or ``admin``)
alongside the usual ``iss``/``aud``/``iat``/``nbf``/``exp``/``jti``.
"""

from __future__ import annotations

import base64
import json
import secrets
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

ALGORITHM = "EdDSA"


def _encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _decode(segment: str) -> bytes:
    try:
        return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
    except (ValueError, TypeError):
        raise ValueError("Malformed token encoding")


def _decode_json(segment: str) -> dict[str, Any]:
    try:
        value = json.loads(_decode(segment))
    except (UnicodeDecodeError, json.JSONDecodeError):
        raise ValueError("Malformed token segment")
    if not isinstance(value, dict):
        raise ValueError("Malformed token segment")
    return value


# ============================================================================
# Keys
# ============================================================================

class KeyStatus(str, Enum):
    ACTIVE = "active"
    RETIRED = "retired"
    REVOKED = "revoked"


@dataclass
class KeyDescriptor:
    """One Ed25519 key pair plus the metadata stored in the keys file."""

    kid: str
    public_key_pem: str
    private_key_pem: str | None = None
    status: KeyStatus = KeyStatus.ACTIVE
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    algorithm: str = ALGORITHM

    @classmethod
    def generate(cls, kid: str) -> KeyDescriptor:
        private_key = ed25519.Ed25519PrivateKey.generate()
        return cls(
            kid=kid,
            private_key_pem=private_key.private_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PrivateFormat.PKCS8,
                encryption_algorithm=serialization.NoEncryption(),
            ).decode(),
            public_key_pem=private_key.public_key().public_bytes(
                encoding=serialization.Encoding.PEM,
                format=serialization.PublicFormat.SubjectPublicKeyInfo,
            ).decode(),
        )

    @property
    def can_sign(self) -> bool:
        return self.status is KeyStatus.ACTIVE and self.private_key_pem is not None

    @property
    def can_verify(self) -> bool:
        return self.status is not KeyStatus.REVOKED

    def sign(self, message: bytes) -> bytes:
        private_key = serialization.load_pem_private_key(self.private_key_pem.encode(), password=None)
        return private_key.sign(message)

    def verify(self, signature: bytes, message: bytes) -> bool:
        public_key = serialization.load_pem_public_key(self.public_key_pem.encode())
        try:
            public_key.verify(signature, message)
        except InvalidSignature:
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        data = {
            "kid": self.kid,
            "algorithm": self.algorithm,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "public_key": self.public_key_pem,
        }
        if self.private_key_pem:
            data["private_key"] = self.private_key_pem
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeyDescriptor:
        return cls(
            kid=data["kid"],
            algorithm=data.get("algorithm", ALGORITHM),
            public_key_pem=data["public_key"],
            private_key_pem=data.get("private_key"),
            status=KeyStatus(data.get("status", KeyStatus.ACTIVE.value)),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class KeyRing:
    """
    The keys a deployment trusts, with exactly one current signing key.

    Rotation is ``add_key`` then ``promote_key``; the previous signer is
    retired and keeps verifying until it is revoked.
    """

    def __init__(self, keys: list[KeyDescriptor], current_kid: str | None = None):
        self.keys = {key.kid: key for key in keys}
        if current_kid is None:
            signers = [key.kid for key in keys if key.can_sign]
            if not signers:
                raise ValueError("Key ring has no active signing key")
            current_kid = signers[0]
        self.current_kid = current_kid

    @classmethod
    def generate(cls, kid: str = "key_001") -> KeyRing:
        return cls([KeyDescriptor.generate(kid)])

    def signing_key(self) -> KeyDescriptor:
        key = self.keys.get(self.current_kid)
        if key is None or not key.can_sign:
            raise ValueError(f"No active signing key: {self.current_kid}")
        return key

    def verification_key(self, kid: str) -> KeyDescriptor | None:
        key = self.keys.get(kid)
        return key if key is not None and key.can_verify else None

    def add_key(self, key: KeyDescriptor) -> None:
        self.keys[key.kid] = key

    def promote_key(self, kid: str) -> None:
        if kid not in self.keys:
            raise ValueError(f"Key not found: {kid}")
        previous = self.keys.get(self.current_kid)
        if previous is not None and previous.kid != kid:
            previous.status = KeyStatus.RETIRED
        self.keys[kid].status = KeyStatus.ACTIVE
        self.current_kid = kid

    def revoke_key(self, kid: str) -> None:
        if kid in self.keys:
            self.keys[kid].status = KeyStatus.REVOKED

    @classmethod
    def from_file(cls, path: Path | str) -> KeyRing:
        data = json.loads(Path(path).read_text())
        return cls([KeyDescriptor.from_dict(k) for k in data["keys"]], data.get("current_kid"))

    def to_file(self, path: Path | str) -> None:
        data = {"current_kid": self.current_kid, "keys": [k.to_dict() for k in self.keys.values()]}
        Path(path).write_text(json.dumps(data, indent=2))


# ============================================================================
# Tokens
# ============================================================================

@dataclass
class TokenConfig:
    issuer: str = "archmarket"
    audience: str = "archmarket-api"
    access_token_ttl: int = 3600


class TokenManager:
    """Issues and checks access tokens against a ``KeyRing``."""

    def __init__(self, key_ring: KeyRing, config: TokenConfig | None = None):
        self.key_ring = key_ring
        self.config = config or TokenConfig()

    def issue_access_token(
        self,
        identity_id: str,
        roles: list[str] | None = None,
        ttl: int | None = None,
    ) -> str:
        now = int(time.time())
        claims = {
            "iss": self.config.issuer,
            "aud": self.config.audience,
            "sub": identity_id,
            "roles": list(roles or ["customer"]),
            "iat": now,
            "nbf": now,
            "exp": now + (ttl or self.config.access_token_ttl),
            "jti": f"at_{secrets.token_urlsafe(16)}",
        }
        key = self.key_ring.signing_key()
        header = {"alg": key.algorithm, "kid": key.kid, "typ": "JWT"}
        segments = [_encode(json.dumps(part, separators=(",", ":")).encode()) for part in (header, claims)]
        signing_input = ".".join(segments)
        return f"{signing_input}.{_encode(key.sign(signing_input.encode()))}"

    def validate_access_token(self, token: str) -> dict[str, Any]:
        """
        Return the claims of a valid token.

        Raises ``ValueError`` naming the first failed check: shape, key,
        signature, issuer, audience, expiry, not-before, subject.
        """
        parts = token.split(".")
        if len(parts) != 3:
            raise ValueError("Malformed token: expected 3 parts")
        header_segment, claims_segment, signature_segment = parts

        kid = _decode_json(header_segment).get("kid")
        if not kid:
            raise ValueError("Missing kid in header")
        key = self.key_ring.verification_key(kid)
        if key is None:
            raise ValueError(f"Unknown kid: {kid}")

        signing_input = f"{header_segment}.{claims_segment}".encode()
        if not key.verify(_decode(signature_segment), signing_input):
            raise ValueError("Invalid signature")

        claims = _decode_json(claims_segment)
        if claims.get("iss") != self.config.issuer:
            raise ValueError("Invalid issuer")
        if claims.get("aud") != self.config.audience:
            raise ValueError("Invalid audience")

        now = int(time.time())
        if not claims.get("exp") or claims["exp"] < now:
            raise ValueError("Token expired")
        if claims.get("nbf", 0) > now:
            raise ValueError("Token not yet valid")
        if not claims.get("sub"):
            raise ValueError("Missing subject")
        return claims
