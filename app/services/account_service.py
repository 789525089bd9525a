"""Registration, login and the OTP based password recovery flow.

Recovery runs in three steps, each driven by state stored on the user row:

1. ``request_otp`` issues a 6 digit code, valid for 5 minutes, at most once
   every 10 minutes per user.
2. ``verify_otp`` trades a correct code for a reset token valid for 10
   minutes. Five wrong guesses burn the code.
3. ``reset_password`` trades the reset token for a new password. The token
   works once.

Expiry is checked lazily when a code or token is presented.
"""

import logging
import math
import secrets
from datetime import datetime, timedelta
from typing import Callable

from app.config import Settings, settings
from app.models.user import User
from app.services.credential_store import CredentialStore
from app.utils.errors import (
    AuthError,
    DeliveryError,
    ExpiredError,
    LockedError,
    NotFoundError,
    RateLimitError,
    ValidationError,
    service_operation,
)
from app.utils.validation import (
    INVALID_EMAIL_MESSAGE,
    MAX_NAME_LENGTH,
    MIN_NAME_LENGTH,
    NAME_LENGTH_MESSAGE,
    OTP_FORMAT_MESSAGE,
    PASSWORD_POLICY_MESSAGE,
    Violations,
    clean,
    is_strong_password,
    is_valid_email,
    is_valid_otp,
    normalize_email,
)

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(days=1)
OTP_TTL = timedelta(minutes=5)
OTP_REQUEST_INTERVAL_MINUTES = 10
OTP_MAX_ATTEMPTS = 5
RESET_TOKEN_TTL = timedelta(minutes=10)
RESET_TOKEN_BYTES = 32

INVALID_CREDENTIALS = "Invalid email or password"
OTP_SUBJECT = "Password Reset Request - OTP Code"


def public_user(user: User) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email}


def generate_otp() -> str:
    return str(secrets.randbelow(900000) + 100000)


def generate_reset_token() -> str:
    return secrets.token_hex(RESET_TOKEN_BYTES)


class AccountService:
    def __init__(
        self,
        store: CredentialStore,
        hasher,
        notifier,
        signer,
        config: Settings = settings,
        clock: Callable[[], datetime] = datetime.utcnow,
    ):
        self.store = store
        self.hasher = hasher
        self.notifier = notifier
        self.signer = signer
        self.config = config
        self.clock = clock

    @service_operation("Register Service")
    def register(self, name, email, password) -> dict:
        name = clean(name)
        email = clean(email)
        password = password or ""

        violations = Violations()
        if violations.require(name, "Name is required") and not (
            MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH
        ):
            violations.add(NAME_LENGTH_MESSAGE)
        has_email = violations.require(email, "Email is required")
        has_password = violations.require(password.strip(), "Password is required")

        if has_password and not is_strong_password(password):
            violations.add(PASSWORD_POLICY_MESSAGE)

        normalized_email = email.lower()
        if has_email:
            if not is_valid_email(email):
                violations.add(INVALID_EMAIL_MESSAGE)
            elif self.store.find_by_email(normalized_email):
                violations.add("Email is already registered")

        violations.raise_if_any()

        user = User(
            name=name,
            email=normalized_email,
            password_hash=self.hasher.hash(password),
            otp_attempts=0,
        )
        user = self.store.create(user)
        logger.info("Registered user id=%s", user.id)
        return public_user(user)

    @service_operation("Login Service")
    def login(self, email, password) -> dict:
        email = normalize_email(email)
        password = password or ""

        violations = Violations()
        violations.require_email(email)
        violations.require(password.strip(), "Password is required")
        violations.raise_if_any()

        user = self.store.find_by_email(email)
        if not user or not self.hasher.verify(password, user.password_hash):
            raise AuthError(INVALID_CREDENTIALS)

        token = self.signer.issue({"id": user.id, "email": user.email}, ACCESS_TOKEN_TTL)
        return {"token": token, "user": public_user(user)}

    @service_operation("Forgot Password Service")
    def request_otp(self, email) -> dict:
        email = normalize_email(email)
        violations = Violations()
        violations.require_email(email)
        violations.raise_if_any()

        user = self.store.find_by_email(email)
        if not user:
            raise NotFoundError("Email not found")

        now = self.clock()
        if user.otp_requested_at is not None:
            elapsed_minutes = (now - user.otp_requested_at).total_seconds() / 60
            if elapsed_minutes < OTP_REQUEST_INTERVAL_MINUTES:
                # A stored timestamp ahead of the clock never asks for more than one interval
                wait = min(
                    math.ceil(OTP_REQUEST_INTERVAL_MINUTES - elapsed_minutes),
                    OTP_REQUEST_INTERVAL_MINUTES,
                )
                raise RateLimitError(
                    f"OTP requested too often. Please wait {wait} more minute(s).",
                    retry_after_minutes=wait,
                )

        code = generate_otp()
        user.otp = code
        user.otp_expires_at = now + OTP_TTL
        user.otp_requested_at = now
        user.otp_attempts = 0
        self.store.save(user)
        logger.info("Issued password reset OTP for user id=%s", user.id)

        try:
            delivered = self.notifier.send(user.email, OTP_SUBJECT, self._otp_message(user, code))
        except Exception:
            logger.exception("OTP delivery raised for user id=%s", user.id)
            delivered = False
        if not delivered:
            raise DeliveryError("Failed to send OTP. Please try again later.")

        return {"message": "OTP code has been sent to your email"}

    @service_operation("Verify OTP Service")
    def verify_otp(self, email, otp) -> dict:
        email = normalize_email(email)
        otp = clean(otp)

        violations = Violations()
        violations.require_email(email)
        if violations.require(otp, "OTP is required") and not is_valid_otp(otp):
            violations.add(OTP_FORMAT_MESSAGE)
        violations.raise_if_any()

        user = self.store.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        now = self.clock()
        if user.otp_expires_at is None or user.otp_expires_at < now:
            _clear_otp(user)
            self.store.save(user)
            raise ExpiredError("OTP code has expired")

        if user.otp is None or not secrets.compare_digest(user.otp.encode(), otp.encode()):
            user.otp_attempts = (user.otp_attempts or 0) + 1
            if user.otp_attempts >= OTP_MAX_ATTEMPTS:
                _clear_otp(user)
                self.store.save(user)
                logger.warning("OTP invalidated after %s wrong attempts for user id=%s", OTP_MAX_ATTEMPTS, user.id)
                raise LockedError(f"Wrong OTP entered {OTP_MAX_ATTEMPTS} times. The code has been invalidated.")
            self.store.save(user)
            raise AuthError("Invalid OTP code")

        token = generate_reset_token()
        user.reset_token = token
        user.reset_token_expires_at = now + RESET_TOKEN_TTL
        _clear_otp(user)
        self.store.save(user)
        return {"reset_token": token}

    @service_operation("Reset Password Service")
    def reset_password(self, email, reset_token, new_password) -> dict:
        email = normalize_email(email)
        reset_token = clean(reset_token)
        new_password = new_password or ""

        violations = Violations()
        violations.require_email(email)
        violations.require(reset_token, "Reset token is required")
        violations.require(new_password.strip(), "New password is required")
        violations.raise_if_any()

        user = self.store.find_by_email(email)
        if not user:
            raise NotFoundError("User not found")

        if user.reset_token_expires_at is None or user.reset_token_expires_at < self.clock():
            _clear_reset_token(user)
            self.store.save(user)
            raise ExpiredError("Reset token has expired")

        if user.reset_token is None or not secrets.compare_digest(user.reset_token.encode(), reset_token.encode()):
            raise AuthError("Invalid reset token")

        if not is_strong_password(new_password):
            raise ValidationError([PASSWORD_POLICY_MESSAGE])

        user.password_hash = self.hasher.hash(new_password)
        _clear_reset_token(user)
        self.store.save(user)
        logger.info("Password reset for user id=%s", user.id)
        return {"message": "Password has been reset"}

    def _otp_message(self, user: User, code: str) -> str:
        app_name = self.config.PROJECT_NAME
        minutes = int(OTP_TTL.total_seconds() // 60)
        return (
            f"Hello {user.name},\n\n"
            f"We received a request to reset the password of your {app_name} account.\n\n"
            f"Your OTP code is: {code}\n\n"
            f"This code is valid for {minutes} minutes. Do not share it with anyone.\n\n"
            "If you did not request a password reset, you can ignore this email.\n\n"
            f"Regards,\n{app_name} Team"
        )


def _clear_otp(user: User) -> None:
    user.otp = None
    user.otp_expires_at = None
    user.otp_attempts = 0


def _clear_reset_token(user: User) -> None:
    user.reset_token = None
    user.reset_token_expires_at = None
