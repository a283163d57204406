"""JWT issuance and verification for wallet sessions.

The subject of every token is the wallet's base58 address; that address is
the signer identity handed to marketplace operations. HS256 with the shared
JWT_SECRET.
"""

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from config.settings import settings
from src.em_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def _issue(address: str, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(UTC)
    payload = {"sub": address, "type": token_type, "iat": now, "exp": now + lifetime}
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(address: str) -> str:
    return _issue(address, "access", _ACCESS_EXPIRE)


def create_refresh_token(address: str) -> str:
    return _issue(address, "refresh", _REFRESH_EXPIRE)


def decode_token(token: str, expected_type: str) -> dict[str, str]:
    """Decode a token and enforce its type claim.

    Raises InvalidCredentialsError for a bad access token and
    InvalidRefreshTokenError for a bad refresh token.
    """
    try:
        payload: dict[str, str] = jwt.decode(
            token, settings.JWT_SECRET, algorithms=[_ALGORITHM]
        )
    except JWTError:
        _raise_auth_error(expected_type)
    if payload.get("type") != expected_type or not payload.get("sub"):
        _raise_auth_error(expected_type)
    return payload


def _raise_auth_error(expected_type: str) -> None:
    if expected_type == "access":
        raise InvalidCredentialsError()
    raise InvalidRefreshTokenError()
