from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from database import get_db
from models.common_models import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserOut,
)
from models.db_models import User
from routers.deps import bearer_scheme, get_current_user
from services import auth_service, storage_service

router = APIRouter(prefix="/api", tags=["auth"])


def _token_response(db: Session, user: User) -> TokenResponse:
    token = auth_service.issue_token(db, user)
    return TokenResponse(
        access_token=token.token,
        expires_at=token.expires_at,
        user=UserOut.model_validate(user),
    )


@router.post("/register", status_code=201, response_model=TokenResponse)
def register(req: RegisterRequest, db: Session = Depends(get_db)):
    if storage_service.get_user_by_username(db, req.username):
        raise HTTPException(status_code=400, detail="Username already exists")
    if storage_service.get_user_by_email(db, req.email):
        raise HTTPException(status_code=400, detail="Email already exists")

    user = auth_service.register_user(db, req.username, req.email, req.password, req.full_name)
    # registration logs the user straight in
    return _token_response(db, user)


@router.post("/login", response_model=TokenResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = auth_service.authenticate(db, req.username, req.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid username or password")
    return _token_response(db, user)


@router.post("/logout")
def logout(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    auth_service.revoke_token(db, credentials.credentials)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserOut)
def current_user(user: User = Depends(get_current_user)):
    return user


@router.post("/forgot-password")
def forgot_password(req: ForgotPasswordRequest, db: Session = Depends(get_db)):
    auth_service.request_password_reset(db, req.email)
    # same answer whether or not the email exists
    return {"message": "If the email exists, a reset link will be sent"}


@router.post("/reset-password")
def reset_password(req: ResetPasswordRequest, db: Session = Depends(get_db)):
    if not auth_service.reset_password(db, req.token, req.new_password):
        raise HTTPException(status_code=400, detail="Invalid or expired reset token")
    return {"message": "Password reset successfully"}
