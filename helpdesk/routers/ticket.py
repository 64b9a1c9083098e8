# helpdesk/routers/ticket.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from helpdesk.database import get_db
from helpdesk.models.user import User
from helpdesk.schemas.ticket import TicketCreate, TicketAction, TicketOut, TicketActionOut
from helpdesk.schemas.response import ApiResponse, send_response
from helpdesk.services.ticket_service import TicketService
from helpdesk.utils.auth import get_current_user, require_employee, require_hr_or_it, require_manager, require_reviewer

router = APIRouter(prefix="/tickets", tags=["Tickets"])

def _tickets(tickets):
    return [TicketOut.model_validate(t) for t in tickets]

@router.post("/", response_model=ApiResponse)
def create_ticket(
    payload: TicketCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_employee)
):
    """Create a ticket; routing and approval are decided here"""
    service = TicketService(db)
    ticket = service.create_ticket(
        actor=current_user,
        title=payload.title,
        description=payload.description,
        ticket_type=payload.ticket_type,
        hr_type=payload.hr_type,
        it_type=payload.it_type,
    )
    return send_response(TicketOut.model_validate(service.get_ticket_by_id(ticket.id)))

@router.get("/", response_model=ApiResponse)
def get_all_tickets(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return send_response(_tickets(TicketService(db).get_all_tickets(current_user)))

@router.get("/action", response_model=ApiResponse)
def get_action_tickets(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_reviewer)
):
    """Tickets waiting on the current user"""
    return send_response(_tickets(TicketService(db).get_action_tickets(current_user)))

@router.post("/action/{ticket_id}", response_model=ApiResponse)
def perform_action(
    ticket_id: int,
    payload: TicketAction,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    """Approve, reject, resolve, close or reopen a ticket"""
    service = TicketService(db)
    planned = service.perform_action(
        actor=current_user,
        ticket_id=ticket_id,
        action=payload.action,
        remarks=payload.remarks,
        rating=payload.rating,
    )
    result = TicketActionOut(
        ticket=TicketOut.model_validate(service.get_ticket_by_id(ticket_id)),
        action=planned.action,
        remarks=payload.remarks,
        rating=payload.rating,
    )
    # rating only appears in the response when one was given
    exclude = {"rating"} if payload.rating is None else None
    return send_response(result.model_dump(mode="json", exclude=exclude))

@router.get("/manager/action", response_model=ApiResponse)
def get_employee_tickets(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_manager)
):
    """All tickets raised by the current user's direct reports"""
    return send_response(_tickets(TicketService(db).get_employee_tickets(current_user)))

@router.get("/department", response_model=ApiResponse)
def get_department_tickets(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_hr_or_it)
):
    return send_response(_tickets(TicketService(db).get_department_tickets(current_user)))

@router.get("/{ticket_id}", response_model=ApiResponse)
def get_ticket(
    ticket_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return send_response(TicketOut.model_validate(TicketService(db).get_ticket(current_user, ticket_id)))
