"""FastAPI dependencies for identity resolution."""

from fastapi import Depends, HTTPException, status, Header
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from studynext.database.database import get_db
from studynext.database.user_repository import UserRepository
from studynext.auth.jwt import get_user_id_from_token
from studynext.models.identity import Identity

# HTTP Bearer token security scheme
security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    x_guest_session: str = Header(default="", alias="X-Guest-Session"),
    db: Session = Depends(get_db),
) -> Identity:
    """Resolve the caller to a durable account or an ephemeral guest session.

    A bearer token always wins; a guest session header is only consulted
    when no token is sent.

    Raises:
        HTTPException: If the token is invalid, the user is unknown, or no
            identity was supplied at all
    """
    if credentials:
        user_id = get_user_id_from_token(credentials.credentials)
        if not user_id:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if UserRepository(db).get(user_id) is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="User not found",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return Identity.durable(user_id)

    if x_guest_session:
        return Identity.guest(x_guest_session)

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
