import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from resume_builder.database import get_db
from resume_builder.dependencies import get_current_user
from resume_builder.schemas.auth import (
    UserRegister,
    UserLogin,
    Token,
    UserResponse,
    UserProfileUpdate,
)
from resume_builder.core.security import verify_password, create_access_token, hash_password
from resume_builder.repos.user_repo import (
    get_by_email,
    get_by_id,
    create as create_user,
    update as update_user,
    delete_user,
)
from resume_builder.repos.resume_repo import count_by_user
from resume_builder.models.user import User

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


def _user_to_response(user: User, resume_count: int) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=getattr(user, "name", None),
        resume_count=resume_count,
    )


def _token_for(db: Session, user: User) -> Token:
    token = create_access_token(user.id)
    return Token(access_token=token, user=_user_to_response(user, count_by_user(db, user.id)))


@router.post("/register", response_model=Token)
def register(data: UserRegister, db: Session = Depends(get_db)):
    try:
        if get_by_email(db, data.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Email already registered",
            )
        user = create_user(db, data.email, data.password, name=data.name)
        logger.info("User registered: %s", user.email)
        return _token_for(db, user)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Register failed for email=%s: %s", data.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed") from e


@router.post("/login", response_model=Token)
def login(data: UserLogin, db: Session = Depends(get_db)):
    try:
        user = get_by_email(db, data.email)
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        if not user.is_active:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Account is disabled",
            )
        if not verify_password(data.password, user.password_hash):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid email or password",
            )
        logger.info("User logged in: %s", user.email)
        return _token_for(db, user)
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Login failed for email=%s: %s", data.email, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Login failed") from e


@router.get("/me", response_model=UserResponse)
def get_me(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return _user_to_response(user, count_by_user(db, user.id))


@router.patch("/me", response_model=UserResponse)
def update_profile(
    data: UserProfileUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        if data.email is not None and data.email != user.email:
            if get_by_email(db, data.email):
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="Email already in use",
                )
            update_user(db, user.id, email=data.email)

        if data.name is not None:
            update_user(db, user.id, name=data.name.strip())

        if data.new_password is not None:
            if not verify_password(data.current_password, user.password_hash):
                raise HTTPException(
                    status_code=status.HTTP_401_UNAUTHORIZED,
                    detail="Current password is incorrect",
                )
            update_user(db, user.id, password_hash=hash_password(data.new_password))

        user = get_by_id(db, user.id)
        return _user_to_response(user, count_by_user(db, user.id))
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Profile update failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to update profile") from e


@router.delete("/account")
def delete_account(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    try:
        delete_user(db, user.id)
        logger.info("Account deleted: %s", user.email)
        return {"message": "Account deleted"}
    except Exception as e:
        logger.exception("Account delete failed for user=%s: %s", user.id, e)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to delete account") from e
