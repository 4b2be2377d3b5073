# app/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.orm import Session

from app.api.deps import get_session_store, get_web_session
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import ConflictError
from app.domain.schemas import AuthCheckOut, AuthOut, LoginIn, RegisterIn, SuccessOut
from app.repos.user_repo import UserRepo
from app.services.cart_service import CartService
from app.services.session_store import SessionStore, WebSession
from app.services.user_service import UserService, to_user_read
from app.utils.settings import SESSION_COOKIE_NAME

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _sign_in(db: Session, store: SessionStore, session: WebSession, user: UserModel) -> AuthOut:
    CartService(db).attach_to_user(session.id, user.id)
    session.data.update({"user_id": user.id, "role": user.role})
    store.commit(session)
    return AuthOut(**to_user_read(user).model_dump())


@router.post("/register", response_model=AuthOut, status_code=201)
def register(
    payload: RegisterIn,
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
    store: SessionStore = Depends(get_session_store),
):
    svc = UserService(db)
    try:
        user = svc.register(payload)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _sign_in(db, store, session, user)


@router.post("/login", response_model=AuthOut)
def login(
    payload: LoginIn,
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
    store: SessionStore = Depends(get_session_store),
):
    user = UserService(db).authenticate(payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _sign_in(db, store, session, user)


@router.post("/logout", response_model=SuccessOut)
def logout(
    response: Response,
    session: WebSession = Depends(get_web_session),
    store: SessionStore = Depends(get_session_store),
):
    store.delete(session.id)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return SuccessOut()


@router.get("/check", response_model=AuthCheckOut)
def check(
    db: Session = Depends(get_db),
    session: WebSession = Depends(get_web_session),
):
    if session.user_id is None:
        return AuthCheckOut(authenticated=False)

    user = UserRepo(db).get_user(session.user_id)
    if not user:
        return AuthCheckOut(authenticated=False)
    return AuthCheckOut(authenticated=True, user=to_user_read(user))
