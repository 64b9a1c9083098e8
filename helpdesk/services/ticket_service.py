# helpdesk/services/ticket_service.py
"""
Ticket creation, routing and the action state machine
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from helpdesk.models import Ticket, TicketType, TicketStatus, HrType, ItType, User, UserType
from helpdesk.services.activity_service import log_activity
from helpdesk.services.workflow import ActionContext, PlannedAction, plan_action
from helpdesk.utils.approval import requires_manager_approval, initial_status
from helpdesk.utils.errors import Forbidden, HelpdeskError, InternalError, NotFound, ValidationError
from helpdesk.utils.hierarchy import HierarchyManager

logger = logging.getLogger(__name__)


class TicketService:
    """Ticket operations bound to one request's session"""

    def __init__(self, db: Session):
        self.db = db
        self.hierarchy = HierarchyManager(db)

    def _query(self):
        return self.db.query(Ticket).options(joinedload(Ticket.created_by))

    def create_ticket(
        self,
        actor: User,
        title: str,
        description: str,
        ticket_type: TicketType,
        hr_type: Optional[HrType] = None,
        it_type: Optional[ItType] = None,
    ) -> Ticket:
        if actor.user_type == UserType.ADMIN:
            logger.warning(f"Admin {actor.id} attempted to create ticket")
            raise Forbidden("Admins cannot create tickets")
        if actor.user_type != UserType.EMPLOYEE:
            logger.warning(f"User {actor.id} of type {actor.user_type.value} attempted to create ticket")
            raise Forbidden("Only employees can create tickets")

        if ticket_type == TicketType.HR and (hr_type is None or it_type is not None):
            raise ValidationError("HR tickets need an hr_type and no it_type")
        if ticket_type == TicketType.IT and (it_type is None or hr_type is not None):
            raise ValidationError("IT tickets need an it_type and no hr_type")

        # Managers skip approval whatever the subtype
        is_manager = self.hierarchy.is_manager(actor.id)
        requires_approval = False if is_manager else requires_manager_approval(ticket_type, hr_type, it_type)

        ticket = Ticket(
            title=title,
            description=description,
            ticket_type=ticket_type,
            hr_type=hr_type,
            it_type=it_type,
            requires_approval=requires_approval,
            status=initial_status(ticket_type, requires_approval),
            created_by_id=actor.id,
        )
        try:
            self.db.add(ticket)
            self.db.commit()
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Create ticket failed for user {actor.id}")
            raise InternalError()
        self.db.refresh(ticket)

        logger.info(
            f"Ticket {ticket.id} ({ticket.subtype.value}) created by user {actor.id} "
            f"(status={ticket.status.value}, manager={is_manager})"
        )
        return ticket

    def perform_action(
        self,
        actor: User,
        ticket_id: int,
        action: str,
        remarks: str,
        rating: Optional[int] = None,
    ) -> PlannedAction:
        """Validate and apply an action in a single transaction.

        The ticket row is locked before any check runs, so the status the
        rules see is the status that gets overwritten. Any failure rolls back
        both the ticket update and the activity row.
        """
        try:
            ticket = (
                self.db.query(Ticket)
                .filter(Ticket.id == ticket_id)
                .populate_existing()
                .with_for_update()
                .first()
            )
            if ticket is None:
                raise NotFound("Ticket not found", code="TICKET_NOT_FOUND")

            ctx = ActionContext(
                actor=actor,
                ticket=ticket,
                is_manager=self.hierarchy.is_manager(actor.id),
            )
            planned = plan_action(ctx, action, rating)

            ticket.status = planned.new_status
            ticket.remarks = remarks
            if rating is not None:
                ticket.rating = rating
            if planned.new_status == TicketStatus.RESOLVED:
                ticket.resolved_at = datetime.now(timezone.utc)

            log_activity(self.db, actor.id, planned.activity, ticket.id, remarks)
            self.db.commit()
        except HelpdeskError as e:
            self.db.rollback()
            logger.warning(f"Action '{action}' on ticket {ticket_id} by user {actor.id} rejected: {e.code}")
            raise
        except SQLAlchemyError:
            self.db.rollback()
            logger.exception(f"Action '{action}' on ticket {ticket_id} by user {actor.id} failed")
            raise InternalError()

        logger.info(
            f"Ticket {ticket_id} {planned.action} by user {actor.id} as {planned.rule.name} "
            f"-> {planned.new_status.value}"
        )
        return planned

    def get_ticket_by_id(self, ticket_id: int) -> Ticket:
        ticket = self._query().filter(Ticket.id == ticket_id).first()
        if ticket is None:
            raise NotFound("Ticket not found", code="TICKET_NOT_FOUND")
        return ticket

    def get_all_tickets(self, actor: User) -> List[Ticket]:
        """ADMIN sees everything; everyone else their own tickets"""
        query = self._query()
        if actor.user_type != UserType.ADMIN:
            query = query.filter(Ticket.created_by_id == actor.id)
        return query.order_by(Ticket.created_at.desc(), Ticket.id.desc()).all()

    def get_ticket(self, actor: User, ticket_id: int) -> Ticket:
        query = self._query().filter(Ticket.id == ticket_id)
        if actor.user_type != UserType.ADMIN:
            query = query.filter(Ticket.created_by_id == actor.id)
        ticket = query.first()
        if ticket is None:
            raise NotFound(
                "Ticket not found or you dont have access to see ticket generated by another employee",
                code="TICKET_NOT_FOUND_OR_FORBIDDEN",
            )
        return ticket

    def get_action_tickets(self, actor: User) -> List[Ticket]:
        """Tickets waiting in the actor's queue.

        HR and IT see their whole queue. Everyone else, ADMIN included, only
        sees tickets raised by their direct reports.
        """
        if actor.user_type == UserType.HR:
            status = TicketStatus.FORWARDED_TO_HR
        elif actor.user_type == UserType.IT:
            status = TicketStatus.FORWARDED_TO_IT
        else:
            status = TicketStatus.FORWARDED_TO_MANAGER

        query = self._query().filter(Ticket.status == status)
        if actor.user_type not in (UserType.HR, UserType.IT):
            report_ids = self.hierarchy.get_report_ids(actor.id)
            query = query.filter(Ticket.created_by_id.in_(report_ids))
        return query.order_by(Ticket.id.desc()).all()

    def get_employee_tickets(self, actor: User) -> List[Ticket]:
        """Every ticket raised by the actor's direct reports, any status"""
        report_ids = self.hierarchy.get_report_ids(actor.id)
        return (
            self._query()
            .filter(Ticket.created_by_id.in_(report_ids))
            .order_by(Ticket.id.desc())
            .all()
        )

    def get_department_tickets(self, actor: User) -> List[Ticket]:
        ticket_type = TicketType.HR if actor.user_type == UserType.HR else TicketType.IT
        return (
            self._query()
            .filter(Ticket.ticket_type == ticket_type)
            .order_by(Ticket.id.desc())
            .all()
        )
