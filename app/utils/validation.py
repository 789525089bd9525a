import re
import string

from app.utils.errors import ValidationError

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
OTP_PATTERN = re.compile(r"^[0-9]{6}$")
PASSWORD_SYMBOLS = string.punctuation
MIN_PASSWORD_LENGTH = 8
MIN_NAME_LENGTH = 3
MAX_NAME_LENGTH = 100

PASSWORD_POLICY_MESSAGE = (
    "Password must be at least 8 characters and contain a letter, a number and a symbol"
)
INVALID_EMAIL_MESSAGE = "Invalid email format"
NAME_LENGTH_MESSAGE = f"Name must be {MIN_NAME_LENGTH} to {MAX_NAME_LENGTH} characters"
OTP_FORMAT_MESSAGE = "OTP must be 6 digits"


class Violations:
    """Collects validation messages so every broken rule is reported at once."""

    def __init__(self):
        self.messages: list[str] = []

    def add(self, message: str) -> None:
        self.messages.append(message)

    def require(self, value: str, message: str) -> bool:
        if not value:
            self.add(message)
            return False
        return True

    def require_email(self, email: str) -> bool:
        if not self.require(email, "Email is required"):
            return False
        if not is_valid_email(email):
            self.add(INVALID_EMAIL_MESSAGE)
            return False
        return True

    def raise_if_any(self) -> None:
        if self.messages:
            raise ValidationError(self.messages)


def clean(value) -> str:
    if value is None:
        return ""
    return str(value).strip()


def normalize_email(email) -> str:
    return clean(email).lower()


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match(email))


def is_valid_otp(otp: str) -> bool:
    return bool(OTP_PATTERN.match(otp))


def is_strong_password(password: str) -> bool:
    if len(password) < MIN_PASSWORD_LENGTH:
        return False
    has_letter = any(char.isascii() and char.isalpha() for char in password)
    has_digit = any(char.isdigit() for char in password)
    has_symbol = any(char in PASSWORD_SYMBOLS for char in password)
    return has_letter and has_digit and has_symbol
