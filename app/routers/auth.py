from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.schemas.user import (
    ForgotPasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyOtpRequest,
)
from app.services.account_service import AccountService
from app.services.auth_service import JwtTokenSigner
from app.services.credential_store import SqlAlchemyCredentialStore
from app.services.email_services import get_notifier
from app.services.password_hasher import BcryptHasher
from app.utils.response import create_response, handle_exception

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def get_account_service(
    db: Session = Depends(get_db),
    notifier=Depends(get_notifier),
) -> AccountService:
    return AccountService(
        store=SqlAlchemyCredentialStore(db),
        hasher=BcryptHasher(settings.BCRYPT_ROUNDS),
        notifier=notifier,
        signer=JwtTokenSigner(settings),
        config=settings,
    )


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(body: RegisterRequest, service: AccountService = Depends(get_account_service)):
    try:
        user = service.register(body.name, body.email, body.password)
        return create_response(
            message="Registration successful",
            data={"user": user},
            status_code=status.HTTP_201_CREATED,
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/login")
def login(body: LoginRequest, service: AccountService = Depends(get_account_service)):
    try:
        result = service.login(body.email, body.password)
        return create_response(message="Login successful", data=result)
    except Exception as exc:
        return handle_exception(exc)


@router.post("/lupa-password")
def forgot_password(body: ForgotPasswordRequest, service: AccountService = Depends(get_account_service)):
    try:
        result = service.request_otp(body.email)
        return create_response(message=result["message"], data=None)
    except Exception as exc:
        return handle_exception(exc)


@router.post("/verif-otp")
def verify_otp(body: VerifyOtpRequest, service: AccountService = Depends(get_account_service)):
    try:
        result = service.verify_otp(body.email, body.otp)
        return create_response(
            message="OTP verified",
            data={"resetToken": result["reset_token"]},
        )
    except Exception as exc:
        return handle_exception(exc)


@router.post("/reset-password")
def reset_password(body: ResetPasswordRequest, service: AccountService = Depends(get_account_service)):
    try:
        result = service.reset_password(body.email, body.reset_token, body.new_password)
        return create_response(message=result["message"], data=None)
    except Exception as exc:
        return handle_exception(exc)
