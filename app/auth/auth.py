from datetime import datetime, timedelta, timezone
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt

from app.config.config import settings
from app.repositories.base import Repository
from app.repositories.dependencies import get_repository
from app.schemas.status_schema import UserRole
from app.schemas.user_schemas import ProfileSchema

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def create_access_token(data: dict) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + timedelta(
        minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
    )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(
        to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM
    )
    return encoded_jwt


def create_session_token(user_id: UUID, session_id: UUID, role: UserRole) -> str:
    return create_access_token(
        {"sub": str(user_id), "jti": str(session_id), "role": role.value}
    )


async def get_token_payload(
    token: str = Depends(oauth2_scheme),
    repository: Repository = Depends(get_repository),
) -> dict:
    """Decode the bearer token and make sure its session is still live."""
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(
            token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        user_id = UUID(payload.get("sub"))
        session_id = UUID(payload.get("jti"))
    except (JWTError, TypeError, ValueError):
        raise credentials_exception

    session = await repository.get_session(session_id)
    if session is None or session.revoked or session.user_id != user_id:
        raise credentials_exception

    return {"user_id": user_id, "session_id": session_id}


async def get_current_user(
    payload: dict = Depends(get_token_payload),
    repository: Repository = Depends(get_repository),
) -> ProfileSchema:
    profile = await repository.get_profile(payload["user_id"])
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return profile


async def get_current_admin_user(
    current_user: ProfileSchema = Depends(get_current_user),
) -> ProfileSchema:
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions for this resource",
        )
    return current_user
