# app/api/routers/admin/users.py
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import require_admin
from app.data.database import get_db
from app.data.models.user import UserModel
from app.domain.errors import NotFoundError
from app.domain.schemas import AdminUserOut, RoleIn
from app.services.user_service import UserService

router = APIRouter(prefix="/api/admin/users", tags=["admin-users"])


@router.get("", response_model=List[AdminUserOut])
def list_users(
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return UserService(db).list_users()


@router.put("/{user_id}/role", response_model=AdminUserOut)
def set_role(
    user_id: int,
    payload: RoleIn,
    admin: UserModel = Depends(require_admin),
    db: Session = Depends(get_db),
):
    svc = UserService(db)
    try:
        return svc.set_role(user_id, payload.role)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
