# helpdesk/services/feedback_service.py
import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from helpdesk.models import Feedback, Ticket, TicketStatus, TicketType, User, UserType
from helpdesk.utils.errors import Forbidden, InternalError, InvalidTarget, NoMatchingTickets, NotFound

logger = logging.getLogger(__name__)


class FeedbackService:
    def __init__(self, db: Session):
        self.db = db

    def count_resolved_tickets(self, user_id: int, ticket_type: TicketType) -> int:
        """Tickets of ``ticket_type`` raised by the user that reached RESOLVED.

        A resolved ticket the owner has since closed still counts; only
        resolved tickets carry ``resolved_at`` and RESOLVED can only move on
        to CLOSED.
        """
        return (
            self.db.query(Ticket)
            .filter(
                Ticket.created_by_id == user_id,
                Ticket.ticket_type == ticket_type,
                Ticket.status.in_([TicketStatus.RESOLVED, TicketStatus.CLOSED]),
                Ticket.resolved_at.isnot(None),
            )
            .count()
        )

    def give_feedback(
        self,
        actor: User,
        target_username: str,
        rating: int,
        comment: Optional[str] = None,
    ) -> Feedback:
        if actor.user_type != UserType.EMPLOYEE:
            logger.warning(f"Non-employee {actor.id} attempted to give feedback")
            raise Forbidden("Only employees can give feedback")

        target = self.db.query(User).filter(User.username == target_username).first()
        if target is None:
            logger.warning(f"Feedback target '{target_username}' not found")
            raise NotFound("Target user not found", code="USER_NOT_FOUND")

        if target.user_type not in (UserType.HR, UserType.IT):
            logger.warning(f"User {actor.id} tried to rate {target.id} of type {target.user_type.value}")
            raise InvalidTarget("Feedback can only be given to HR or IT personnel")

        expected_type = TicketType.HR if target.user_type == UserType.HR else TicketType.IT
        if self.count_resolved_tickets(actor.id, expected_type) == 0:
            logger.warning(f"User {actor.id} has no resolved {expected_type.value} tickets")
            raise NoMatchingTickets(
                f"You can only give feedback to {target.user_type.value} personnel who worked on your "
                f"{expected_type.value} tickets. You need to have at least one resolved "
                f"{expected_type.value} ticket."
            )

        feedback = Feedback(
            rating=rating,
            comment=comment or None,
            given_by_id=actor.id,
            given_to_id=target.id,
        )
        try:
            self.db.add(feedback)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Create feedback failed for user {actor.id}")
            raise InternalError()
        self.db.refresh(feedback)

        logger.info(f"Feedback {feedback.id} from user {actor.id} to user {target.id}")
        return feedback

    def list_feedback(self) -> List[Feedback]:
        return (
            self.db.query(Feedback)
            .options(joinedload(Feedback.given_by), joinedload(Feedback.given_to))
            .order_by(Feedback.id.desc())
            .all()
        )
