from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.config import settings
from app.database import get_db
from app.models.user import User
from app.services.auth_service import JwtTokenSigner
from app.services.credential_store import SqlAlchemyCredentialStore
from app.utils.errors import AuthError


def _get_auth_context(token: str, db: Session):
    try:
        payload = JwtTokenSigner(settings).verify(token)
    except AuthError as exc:
        raise HTTPException(status_code=401, detail=exc.message)

    user_id = payload.get("id")
    if user_id is None:
        raise HTTPException(status_code=401, detail="Invalid token payload")

    user = SqlAlchemyCredentialStore(db).find_by_id(user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User no longer exists")

    return {"user": user, "payload": payload}


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(settings.bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    token = credentials.credentials
    auth_context = _get_auth_context(token, db)
    return auth_context["user"]
