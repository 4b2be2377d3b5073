# app/api/deps.py
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, Response
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.data.models.user import UserModel
from app.repos.user_repo import UserRepo
from app.services.session_store import SessionStore, WebSession
from app.utils.settings import SESSION_COOKIE_NAME, SESSION_COOKIE_SECURE, SESSION_TTL_SECONDS


@lru_cache
def get_session_store() -> SessionStore:
    return SessionStore()


def set_session_cookie(response: Response, session_id: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        session_id,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
        secure=SESSION_COOKIE_SECURE,
    )


def get_web_session(
    request: Request,
    response: Response,
    store: SessionStore = Depends(get_session_store),
) -> WebSession:
    session = store.open(request.cookies.get(SESSION_COOKIE_NAME))
    if session.is_new:
        set_session_cookie(response, session.id)
    return session


def require_user(session: WebSession = Depends(get_web_session)) -> int:
    if session.user_id is None:
        raise HTTPException(status_code=401, detail="Authentication required")
    return session.user_id


def require_admin(
    user_id: int = Depends(require_user),
    db: Session = Depends(get_db),
) -> UserModel:
    #role is read from the database so a demotion takes effect immediately
    user = UserRepo(db).get_user(user_id)
    if not user or user.role != "admin":
        raise HTTPException(status_code=403, detail="Admin privileges required")
    return user


def client_ip(request: Request) -> str | None:
    return request.client.host if request.client else None
