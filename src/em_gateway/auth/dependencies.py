"""FastAPI dependency: get_current_signer.

Usage in any router whose operation needs a signing wallet:
    from src.em_gateway.auth.dependencies import get_current_signer

    @router.post("/x")
    async def x(signer: Annotated[str, Depends(get_current_signer)]):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.em_common.errors import InvalidCredentialsError
from src.em_gateway.auth.jwt_handler import decode_token
from src.em_ledger.domain.derivation import is_valid_address

_bearer = HTTPBearer(auto_error=False)

_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_signer(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> str:
    """Return the wallet address carried by a valid access token; HTTP 401 otherwise."""
    if credentials is None:
        raise _CREDENTIALS_EXCEPTION
    try:
        payload = decode_token(credentials.credentials, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    address = payload["sub"]
    if not is_valid_address(address):
        raise _CREDENTIALS_EXCEPTION
    return address
