from datetime import datetime, timedelta

from jose import ExpiredSignatureError, JWTError, jwt

from app.config import Settings, settings
from app.utils.errors import AuthError


class JwtTokenSigner:
    """Issues and verifies HS256 bearer tokens."""

    def __init__(self, config: Settings = settings):
        self.secret = config.JWT_SECRET
        self.algorithm = config.ALGORITHM

    def issue(self, claims: dict, ttl: timedelta) -> str:
        now = datetime.utcnow()
        payload = dict(claims)
        payload.update({"iat": now, "exp": now + ttl})
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> dict:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except ExpiredSignatureError:
            raise AuthError("Token has expired")
        except JWTError:
            raise AuthError("Invalid token")
