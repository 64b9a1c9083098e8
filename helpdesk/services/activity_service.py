# helpdesk/services/activity_service.py
"""
Append-only audit trail of ticket transitions.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from helpdesk.models import Activity, ActivityType
from helpdesk.utils.errors import NotFound

logger = logging.getLogger(__name__)


def log_activity(
    db: Session,
    user_id: int,
    activity_type: ActivityType,
    ticket_id: int,
    message: Optional[str] = None,
) -> Activity:
    """Add an activity row to the caller's transaction.

    Nothing is committed here: the row lands or disappears together with the
    ticket update that produced it. Storage errors propagate to the caller.
    """
    activity = Activity(
        user_id=user_id,
        type=activity_type,
        ticket_id=ticket_id,
        message=message or None,
    )
    db.add(activity)
    db.flush()
    logger.debug(f"Activity {activity_type.value} queued for ticket {ticket_id} by user {user_id}")
    return activity


class ActivityService:
    def __init__(self, db: Session):
        self.db = db

    def list_activity(self) -> List[Activity]:
        activities = (
            self.db.query(Activity)
            .options(joinedload(Activity.user))
            .order_by(Activity.created_at.desc(), Activity.id.desc())
            .all()
        )
        if not activities:
            raise NotFound("No activities found", code="NO_ACTIVITIES_FOUND")
        return activities
