import logging
from fastapi import APIRouter, HTTPException, Depends, status
from gold_invest_app.core.base.base import ApiResponse
from gold_invest_app.users.models.user_models import UserModel
from gold_invest_app.users.schemas.user_schemas import AuthResponse, UserCreate, UserLogin, UserResponse
from gold_invest_app.users.utils.get_current_user import get_current_user
from gold_invest_app.users.utils.password import hash_password, needs_rehash, verify_password
from gold_invest_app.users.utils.token_generate import create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])


def _auth_payload(user: UserModel) -> AuthResponse:
    token = create_access_token(data={
        "sub": str(user.id),
        "email": user.email,
        "role": user.role.value
    })
    return AuthResponse(token=token, user=UserResponse.model_validate(user))


@router.post("/register", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate):
    db_user = await UserModel.find_one(UserModel.email == user.email.lower())
    if db_user:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")

    new_user = UserModel(
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        password=hash_password(user.password),
    )
    await new_user.create()
    logger.info(f"Registered user {new_user.id}")

    return ApiResponse(data=_auth_payload(new_user), message="Registration successful")


@router.post("/login", response_model=ApiResponse[AuthResponse], status_code=status.HTTP_200_OK)
async def login(credentials: UserLogin):
    db_user = await UserModel.find_one(UserModel.email == credentials.email.lower())

    if not db_user or not verify_password(credentials.password, db_user.password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    if needs_rehash(db_user.password):
        db_user.password = hash_password(credentials.password)
        await db_user.save()

    return ApiResponse(data=_auth_payload(db_user))


@router.get("/me", response_model=ApiResponse[UserResponse])
async def me(current_user: UserModel = Depends(get_current_user)):
    return ApiResponse(data=UserResponse.model_validate(current_user))
