# storefront/utils/security.py
import re
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from storefront.utils.settings import (
    ACCESS_TOKEN_TTL_SECONDS,
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_SECRET,
    REFRESH_TOKEN_SECRET,
    REFRESH_TOKEN_TTL_SECONDS,
)

ACCESS = "access"
REFRESH = "refresh"

#at least 6 chars: lower, upper, digit and one of @$!%*?&
PASSWORD_POLICY = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[@$!%*?&])[A-Za-z\d@$!%*?&]{6,}$")

_SECRETS = {ACCESS: JWT_SECRET, REFRESH: REFRESH_TOKEN_SECRET}
_TTLS = {ACCESS: ACCESS_TOKEN_TTL_SECONDS, REFRESH: REFRESH_TOKEN_TTL_SECONDS}

# bcrypt only hashes the first 72 bytes and refuses anything longer
MAX_PASSWORD_BYTES = 72


def _fits_bcrypt(password: str) -> bool:
    return len(password.encode("utf-8")) <= MAX_PASSWORD_BYTES


def password_is_strong(password: str) -> bool:
    return _fits_bcrypt(password) and PASSWORD_POLICY.match(password) is not None


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not _fits_bcrypt(password):
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def issue_token(user_id: str, kind: str = ACCESS) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "userId": user_id,
        "type": kind,
        "iat": now,
        "exp": now + timedelta(seconds=_TTLS[kind]),
    }
    return jwt.encode(claims, _SECRETS[kind], algorithm=JWT_ALGORITHM)


def decode_token(token: str, kind: str = ACCESS) -> dict:
    """Verifies signature, expiry and token kind.

    Raises jwt.InvalidTokenError (ExpiredSignatureError included) on any failure.
    """
    claims = jwt.decode(
        token,
        _SECRETS[kind],
        algorithms=[JWT_ALGORITHM],
        options={"require": ["exp", "userId"]},
    )
    if claims.get("type") != kind:
        raise jwt.InvalidTokenError(f"Expected a {kind} token")
    return claims


def token_expiry(token: str) -> datetime:
    """Expiry claim read without verification, used to size blacklist entries.

    Unreadable tokens get the longest lifetime any token of ours can have.
    """
    fallback = datetime.now(timezone.utc) + timedelta(seconds=max(_TTLS.values()))
    try:
        claims = jwt.decode(token, options={"verify_signature": False, "verify_exp": False})
    except jwt.InvalidTokenError:
        return fallback
    exp = claims.get("exp")
    if not isinstance(exp, (int, float)):
        return fallback
    return datetime.fromtimestamp(exp, tz=timezone.utc)
