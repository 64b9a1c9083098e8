# helpdesk/utils/auth.py
import re
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from helpdesk.config.settings import settings
from helpdesk.database import get_db
from helpdesk.models.user import User, UserType
from helpdesk.utils.errors import Unauthenticated, Forbidden
from helpdesk.utils.hierarchy import HierarchyManager

# Both "Bearer <token>" and "Token <token>" are accepted
AUTH_HEADER_PATTERN = re.compile(r"^(Bearer|Token)\s+(.+)$", re.IGNORECASE)

def verify_token(token: str) -> Optional[dict]:
    """Verify JWT token and return payload without raising exceptions"""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

def get_current_user(
    authorization: Optional[str] = Header(None),
    db: Session = Depends(get_db),
) -> User:
    if not authorization:
        raise Unauthenticated("Authorization header missing")

    match = AUTH_HEADER_PATTERN.match(authorization.strip())
    if not match:
        raise Unauthenticated('Invalid authorization format. Use "Bearer <token>" or "Token <token>"')

    payload = verify_token(match.group(2))
    if payload is None or payload.get("sub") is None:
        raise Unauthenticated("Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise Unauthenticated("Invalid or expired token")

    # Always read the user fresh; role and manager may have changed since issue
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise Unauthenticated("User not found")
    return user

def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if current_user.user_type != UserType.ADMIN:
        raise Forbidden("Admin access required")
    return current_user

def require_employee(current_user: User = Depends(get_current_user)) -> User:
    if current_user.user_type != UserType.EMPLOYEE:
        raise Forbidden("This endpoint is only available for employees")
    return current_user

def require_hr_or_it(current_user: User = Depends(get_current_user)) -> User:
    if current_user.user_type not in (UserType.HR, UserType.IT):
        raise Forbidden("This endpoint is only available for HR or IT")
    return current_user

def require_manager(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    if not HierarchyManager(db).is_manager(current_user.id):
        raise Forbidden("This endpoint is only available for managers")
    return current_user

def require_reviewer(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> User:
    """HR, IT, ADMIN or anyone with direct reports"""
    if current_user.user_type in (UserType.HR, UserType.IT, UserType.ADMIN):
        return current_user
    if not HierarchyManager(db).is_manager(current_user.id):
        raise Forbidden("This endpoint is not available for employees")
    return current_user
