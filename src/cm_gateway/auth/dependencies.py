"""FastAPI dependency: get_current_identity.

Usage in any protected router:
    from src.cm_gateway.auth.dependencies import get_current_identity

    @router.get("/protected")
    async def protected(identity: Identity = Depends(get_current_identity)):
        ...
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.cm_common.database import get_db_session
from src.cm_common.errors import AccountDisabledError, InvalidCredentialsError
from src.cm_gateway.auth.identity import Identity
from src.cm_gateway.auth.jwt_handler import decode_token
from src.cm_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (issued by the identity service)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_identity(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Identity:
    """Validate the Bearer token and return the caller's Identity.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an
    unknown user. Raises AccountDisabledError (403) for disabled accounts.
    """
    try:
        payload = decode_token(token)
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    sub = payload.get("sub")
    try:
        user_id = int(sub)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise _CREDENTIALS_EXCEPTION from None

    result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    roles = payload.get("roles") or []
    return Identity(user_id=user.id, roles=[str(r) for r in roles])
