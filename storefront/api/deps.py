# storefront/api/deps.py
import uuid

from fastapi import Depends, Header, HTTPException, Request, Response
from sqlalchemy.orm import Session

from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.services.lock_service import LockService
from storefront.services.user_service import UserService
from storefront.utils.settings import SESSION_COOKIE_NAME


def get_lock_service(request: Request) -> LockService:
    return request.app.state.lock_service


def get_session_id(request: Request, response: Response) -> str:
    """
    Per-browser session id from the cookie; a new one is issued when missing.
    """
    session_id = request.cookies.get(SESSION_COOKIE_NAME)
    if not session_id:
        session_id = uuid.uuid4().hex
        response.set_cookie(SESSION_COOKIE_NAME, session_id, httponly=True, samesite="lax")
    return session_id


def get_optional_user(
    x_user_id: int | None = Header(None),
    db: Session = Depends(get_db),
) -> UserModel | None:
    # authentication itself lives outside this service, the header is trusted
    if x_user_id is None:
        return None
    user = UserService(db).get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="Unknown user")
    return user


def get_current_user(user: UserModel | None = Depends(get_optional_user)) -> UserModel:
    if user is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_admin(user: UserModel = Depends(get_current_user)) -> UserModel:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admin only")
    return user
