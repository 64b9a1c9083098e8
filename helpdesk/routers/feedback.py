from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from helpdesk.database import get_db
from helpdesk.models.user import User
from helpdesk.schemas.feedback import FeedbackCreate, FeedbackOut
from helpdesk.schemas.response import ApiResponse, send_response
from helpdesk.services.feedback_service import FeedbackService
from helpdesk.utils.auth import get_current_user, require_admin

router = APIRouter()

@router.get("/", response_model=ApiResponse)
def get_feedbacks(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_admin)
):
    feedbacks = FeedbackService(db).list_feedback()
    return send_response([FeedbackOut.model_validate(f) for f in feedbacks])

@router.post("/", response_model=ApiResponse, status_code=status.HTTP_201_CREATED)
def give_feedback(
    payload: FeedbackCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Rate an HR or IT user who resolved one of your tickets"""
    feedback = FeedbackService(db).give_feedback(
        actor=current_user,
        target_username=payload.given_to,
        rating=payload.rating,
        comment=payload.comment,
    )
    return send_response(FeedbackOut.model_validate(feedback), status.HTTP_201_CREATED)
