"""Caller identity: signed tokens and pluggable identity providers.

Request code only ever sees a ``Caller`` (id + role). How the caller was
resolved (bearer token, trusted SSO proxy header, dev header) is decided by the
providers configured in ``AUTH_PROVIDERS``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Protocol

from flask import Flask, Request, current_app, g
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired

from .errors import AuthenticationError, AuthorizationError
from .extensions import db
from .models.user import User


@dataclass(frozen=True)
class Caller:
    id: int
    role: str

    @property
    def is_staff(self) -> bool:
        return self.role == "staff"

    @property
    def is_student(self) -> bool:
        return self.role == "student"

    @classmethod
    def from_user(cls, user: User) -> "Caller":
        return cls(id=int(user.id), role=str(user.role or "student"))


def _serializer() -> URLSafeTimedSerializer:
    secret = current_app.config["SECRET_KEY"]
    # Salt provides namespace isolation for tokens
    return URLSafeTimedSerializer(secret_key=secret, salt="auth-token")


def issue_token(user_id: int) -> str:
    """Issue a signed token for a user. Payload is minimal: {"id": int}."""
    return _serializer().dumps({"id": int(user_id)})


def verify_token(token: str) -> Optional[int]:
    """Return the user id carried by a valid token, else None."""
    max_age = int(current_app.config.get("AUTH_TOKEN_MAX_AGE") or 0) or None
    try:
        data = _serializer().loads(token, max_age=max_age)
    except (BadSignature, SignatureExpired):
        return None
    if not isinstance(data, dict) or data.get("id") is None:
        return None
    try:
        return int(data["id"])
    except (TypeError, ValueError):
        return None


class IdentityProvider(Protocol):
    name: str

    def resolve(self, request: Request) -> Optional[Caller]:
        ...


class TokenIdentityProvider:
    """``Authorization: Bearer <token>`` issued by ``/auth/login``."""

    name = "token"

    def resolve(self, request: Request) -> Optional[Caller]:
        auth = request.headers.get("Authorization") or ""
        if not auth.lower().startswith("bearer "):
            return None
        uid = verify_token(auth[7:].strip())
        if uid is None:
            return None
        user = db.session.get(User, uid)
        # Role always comes from the database, never from the token
        return Caller.from_user(user) if user else None


class TrustedHeaderIdentityProvider:
    """Identity asserted by an upstream SSO proxy.

    The proxy authenticates the user and forwards ``X-Forwarded-Email``; the
    matching user row is upserted on every request. Only enable this provider
    behind a proxy that strips these headers from client requests.
    """

    name = "trusted-header"
    email_header = "X-Forwarded-Email"
    first_name_header = "X-Forwarded-First-Name"
    last_name_header = "X-Forwarded-Last-Name"

    def resolve(self, request: Request) -> Optional[Caller]:
        email = (request.headers.get(self.email_header) or "").strip().lower()
        if not email or "@" not in email:
            return None
        from .modules.users.service import upsert_user

        user = upsert_user(
            email=email,
            first_name=(request.headers.get(self.first_name_header) or "").strip() or None,
            last_name=(request.headers.get(self.last_name_header) or "").strip() or None,
        )
        return Caller.from_user(user)


class DevHeaderIdentityProvider:
    """``X-User-Id: <id>`` shortcut for local development and tests only."""

    name = "dev-header"

    def resolve(self, request: Request) -> Optional[Caller]:
        if not (current_app.config.get("DEBUG") or current_app.config.get("TESTING")):
            return None
        raw = (request.headers.get("X-User-Id") or "").strip()
        if not raw:
            return None
        try:
            uid = int(raw)
        except ValueError:
            return None
        user = db.session.get(User, uid) if uid > 0 else None
        return Caller.from_user(user) if user else None


PROVIDERS = {
    TokenIdentityProvider.name: TokenIdentityProvider,
    TrustedHeaderIdentityProvider.name: TrustedHeaderIdentityProvider,
    DevHeaderIdentityProvider.name: DevHeaderIdentityProvider,
}


def build_providers(names: str | Iterable[str]) -> list[IdentityProvider]:
    if isinstance(names, str):
        names = [n.strip() for n in names.split(",")]
    providers: list[IdentityProvider] = []
    for name in names:
        if not name:
            continue
        if name not in PROVIDERS:
            raise ValueError(f"Unknown identity provider: {name}")
        providers.append(PROVIDERS[name]())
    return providers


def init_identity(app: Flask) -> None:
    app.extensions["identity_providers"] = build_providers(app.config.get("AUTH_PROVIDERS", "token"))


def resolve_caller(request: Request) -> Optional[Caller]:
    for provider in current_app.extensions.get("identity_providers", []):
        caller = provider.resolve(request)
        if caller is not None:
            return caller
    return None


def current_caller() -> Optional[Caller]:
    return getattr(g, "caller", None)


def require_caller() -> Caller:
    caller = current_caller()
    if caller is None:
        raise AuthenticationError()
    return caller


def require_staff() -> Caller:
    caller = require_caller()
    if not caller.is_staff:
        raise AuthorizationError()
    return caller
