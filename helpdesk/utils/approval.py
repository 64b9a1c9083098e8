# helpdesk/utils/approval.py
from typing import Optional

from helpdesk.models.ticket import TicketType, TicketStatus, HrType, ItType

# Subtypes that need the creator's manager to sign off first
APPROVAL_REQUIRED_HR_TYPES = frozenset({
    HrType.ANY_FORM_OF_LETTER,
    HrType.REFERRAL_APPLICATION,
    HrType.COURSE_PURCHASE,
})

APPROVAL_REQUIRED_IT_TYPES = frozenset({
    ItType.ADD_RAM,
    ItType.NEW_MONITOR,
})

def requires_manager_approval(
    ticket_type: TicketType,
    hr_type: Optional[HrType] = None,
    it_type: Optional[ItType] = None,
) -> bool:
    if ticket_type == TicketType.HR and hr_type:
        return hr_type in APPROVAL_REQUIRED_HR_TYPES
    if ticket_type == TicketType.IT and it_type:
        return it_type in APPROVAL_REQUIRED_IT_TYPES
    return False

def department_queue(ticket_type: TicketType) -> TicketStatus:
    """Queue a ticket waits in once no approval is pending"""
    if ticket_type == TicketType.HR:
        return TicketStatus.FORWARDED_TO_HR
    return TicketStatus.FORWARDED_TO_IT

def initial_status(ticket_type: TicketType, requires_approval: bool) -> TicketStatus:
    if requires_approval:
        return TicketStatus.FORWARDED_TO_MANAGER
    return department_queue(ticket_type)
