# helpdesk/routers/user.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.database import get_db
from helpdesk.models.user import User
from helpdesk.schemas.user import ManagerAssign, UserDetail
from helpdesk.schemas.response import ApiResponse, send_response
from helpdesk.services.user_service import UserService
from helpdesk.utils.auth import get_current_user, require_admin
from helpdesk.utils.hierarchy import HierarchyManager

router = APIRouter()

@router.get("/", response_model=ApiResponse)
def get_users(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get all users with their manager"""
    users = UserService(db).get_users()
    return send_response([UserDetail.model_validate(u) for u in users])

@router.get("/me", response_model=ApiResponse)
def get_current_user_info(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Current user plus derived manager flag"""
    data = UserDetail.model_validate(current_user).model_dump()
    data["is_manager"] = HierarchyManager(db).is_manager(current_user.id)
    return send_response(data)

@router.patch("/manager", response_model=ApiResponse)
def set_manager(
    payload: ManagerAssign,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Assign a manager - ADMIN only"""
    user = UserService(db).set_manager(payload.username, payload.manager_username)
    return send_response(UserDetail.model_validate(user))

@router.get("/{user_id}", response_model=ApiResponse)
def get_user(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Get a specific user by ID"""
    user = UserService(db).get_user(user_id)
    return send_response(UserDetail.model_validate(user))
