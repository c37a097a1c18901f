"""
Authentication API endpoints.
"""

from fastapi import APIRouter, HTTPException, status, Depends

from ..core.exceptions import UserStoreError
from ..models import UserCreate, UserLogin, User, AuthResponse
from ..storage import UserStorage, EmailAlreadyRegistered
from ..utils.auth import (
    create_access_token,
    get_current_user_id,
    get_password_hash,
    verify_password,
)
from .dependencies import get_user_storage

router = APIRouter(prefix="/auth", tags=["authentication"])


def _public_user(user: dict) -> User:
    return User(**{k: v for k, v in user.items() if k != 'hashed_password'})


def _issue_token(user: dict) -> str:
    return create_access_token(data={"sub": user["user_id"], "email": user["email"]})


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, users: UserStorage = Depends(get_user_storage)):
    """
    Register a new user and log them in.

    Raises:
        HTTPException: 400 if the email is already registered
            500 if the account could not be stored
    """
    try:
        user = await users.create_user(
            email=user_data.email,
            hashed_password=get_password_hash(user_data.password),
            name=user_data.name,
        )
    except EmailAlreadyRegistered:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email"
        )
    except UserStoreError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create user"
        )

    return AuthResponse(user=_public_user(user), token=_issue_token(user))


@router.post("/login", response_model=AuthResponse)
async def login(credentials: UserLogin, users: UserStorage = Depends(get_user_storage)):
    """
    Exchange email and password for an access token.

    Raises:
        HTTPException: 401 if authentication fails
    """
    user = await users.get_user_by_email(credentials.email)
    if not user or not user.get("is_active", True) or not verify_password(
        credentials.password, user["hashed_password"]
    ):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return AuthResponse(user=_public_user(user), token=_issue_token(user))


@router.get("/me")
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    users: UserStorage = Depends(get_user_storage),
):
    """Return the authenticated user."""
    user = await users.get_user(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return {"user": _public_user(user)}
