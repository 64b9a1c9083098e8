from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.database import get_db
from helpdesk.models.user import User
from helpdesk.schemas.activity import ActivityOut
from helpdesk.schemas.response import ApiResponse, send_response
from helpdesk.services.activity_service import ActivityService
from helpdesk.utils.auth import require_admin

router = APIRouter()

@router.get("/", response_model=ApiResponse)
def get_activity(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    """Audit trail, newest first - ADMIN only"""
    activities = ActivityService(db).list_activity()
    return send_response([ActivityOut.model_validate(a) for a in activities])
