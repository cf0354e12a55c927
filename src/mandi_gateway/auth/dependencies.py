"""FastAPI dependency: get_current_user.

Caller identity comes only from the verified bearer token, never from
request bodies or query strings.

Usage in any protected router:
    from src.mandi_gateway.auth.dependencies import CurrentUser, get_current_user

    @router.get("/protected")
    async def protected(user: CurrentUser = Depends(get_current_user)):
        ...
"""

from dataclasses import dataclass

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from src.mandi_common.enums import UserRole
from src.mandi_common.errors import InvalidCredentialsError
from src.mandi_gateway.auth.jwt_handler import decode_token

# Tokens are issued by the OTP auth service; tokenUrl only feeds Swagger UI
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/verify-otp")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


@dataclass(frozen=True)
class CurrentUser:
    user_id: str
    role: UserRole

    @property
    def is_vendor(self) -> bool:
        return self.role == UserRole.VENDOR


async def get_current_user(token: str = Depends(oauth2_scheme)) -> CurrentUser:
    """Extract and validate the JWT Bearer token.

    Raises HTTP 401 if the token is missing, invalid, expired, or carries an
    unknown role.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    user_id = payload.get("sub")
    role = payload.get("role")
    if not user_id or role not in {r.value for r in UserRole}:
        raise _CREDENTIALS_EXCEPTION

    return CurrentUser(user_id=str(user_id), role=UserRole(role))
