import logging
from uuid import UUID
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError, jwt
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.utils.token_generate import SECRET_KEY, ALGORITHM
from gold_invest_app.users.utils.user_role import UserRole

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_current_user(token: str = Depends(oauth2_scheme)) -> UserModel:
    return await verify_token(token)


async def verify_token(token: str) -> UserModel:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authorized to access this route",
        headers={"WWW-Authenticate": "Bearer"},
    )

    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
        user_id = UUID(payload.get("sub"))
    except (JWTError, TypeError, ValueError) as e:
        logger.debug(f"Token rejected: {e}")
        raise credentials_exception

    user = await UserModel.get(user_id)

    if user is None:
        logger.debug(f"User not found in DB for id: {user_id}")
        raise credentials_exception

    return user


async def get_current_admin(current_user: UserModel = Depends(get_current_user)) -> UserModel:
    """
    Dependency for admin-only routes.
    """
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User role {current_user.role.value} is not authorized to access this route",
        )
    return current_user
