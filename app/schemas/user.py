from pydantic import BaseModel, ConfigDict, Field


# Request bodies accept missing or blank fields on purpose: AccountService
# reports every violation together, so the schema only checks types.
class RegisterRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class ForgotPasswordRequest(BaseModel):
    email: str | None = None


class VerifyOtpRequest(BaseModel):
    email: str | None = None
    otp: str | None = None


class ResetPasswordRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    reset_token: str | None = Field(default=None, alias="resetToken")
    new_password: str | None = Field(default=None, alias="newPassword")
