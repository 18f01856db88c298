"""
Bearer credential verification and the caller identity model.

Tokens are issued elsewhere; this module only verifies them and turns their
claims into one of the four principal types. Every handler receives a
principal and never looks at raw claims.
"""
import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, FrozenSet, Optional, Union

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from app.core.config import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    JWT_ALGORITHM,
    JWT_SECRET,
    PAYMENT_SERVICE_KEY,
)
from app.core.errors import AuthenticationFailed

log = logging.getLogger("security")


@dataclass(frozen=True)
class Owner:
    user_id: str
    email: str = ""
    owned_restaurants: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Manager:
    user_id: str
    email: str = ""
    # Snapshot taken when the token was issued; may be stale.
    managed_outlets: FrozenSet[str] = frozenset()


@dataclass(frozen=True)
class Customer:
    user_id: str
    email: str = ""


@dataclass(frozen=True)
class Guest:
    pass


Principal = Union[Owner, Manager, Customer, Guest]
Authenticated = Union[Owner, Manager, Customer]


def _id_set(values) -> FrozenSet[str]:
    return frozenset(str(v) for v in (values or []))


def principal_from_claims(claims: Dict[str, Any]) -> Authenticated:
    """Builds a principal from verified token claims. Unknown roles are rejected."""
    user_id = claims.get("userId") or claims.get("sub")
    # Older tokens carry the role under "type"
    role = (claims.get("role") or claims.get("type") or "").lower()
    email = claims.get("email") or ""

    if not user_id:
        raise AuthenticationFailed("Invalid token")

    if role == "owner":
        return Owner(str(user_id), email, _id_set(claims.get("ownedRestaurants")))
    if role == "manager":
        return Manager(str(user_id), email, _id_set(claims.get("managedOutlets")))
    if role == "user":
        return Customer(str(user_id), email)
    raise AuthenticationFailed("Invalid token")


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        log.info(f"Rejected bearer token: {e}")
        raise AuthenticationFailed("Invalid or expired token")


def create_access_token(claims: Dict[str, Any], expires_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES) -> str:
    """Signs a token the way the auth service does. Used by seeding and tests."""
    now = datetime.now(timezone.utc)
    payload = {"iat": now, "exp": now + timedelta(minutes=expires_minutes), **claims}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def authenticate(token: Optional[str]) -> Principal:
    if not token:
        return Guest()
    return principal_from_claims(decode_token(token))


# ----------- FastAPI dependencies -----------

bearer_scheme = HTTPBearer(auto_error=False)


def get_principal(creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> Principal:
    """Optional authentication: no header means Guest, a bad token is still a 401."""
    return authenticate(creds.credentials if creds else None)


def require_principal(principal: Principal = Depends(get_principal)) -> Authenticated:
    if isinstance(principal, Guest):
        raise AuthenticationFailed("Token required")
    return principal


def require_service_key(x_service_key: Optional[str] = Header(default=None)) -> None:
    """Gate for service-to-service callers such as the payment webhook."""
    if not x_service_key or not hmac.compare_digest(x_service_key, PAYMENT_SERVICE_KEY):
        raise AuthenticationFailed("Service credential required")
