import pytest

from helpdesk.models import HrType, TicketType
from helpdesk.services.feedback_service import FeedbackService
from helpdesk.services.ticket_service import TicketService
from helpdesk.utils.errors import Forbidden, InvalidTarget, NoMatchingTickets, NotFound


@pytest.fixture
def feedback(db):
    return FeedbackService(db)


def resolve(db, resolver, ticket):
    TicketService(db).perform_action(resolver, ticket.id, "resolved", "Done")


def test_feedback_after_resolution(db, org, tickets, feedback):
    ticket = tickets.it(org["loner"])
    resolve(db, org["it"], ticket)

    entry = feedback.give_feedback(org["loner"], "itdesk", 5, "Quick fix")

    assert entry.given_by_id == org["loner"].id
    assert entry.given_to_id == org["it"].id
    assert entry.rating == 5
    assert entry.comment == "Quick fix"


def test_feedback_still_allowed_after_owner_closes(db, org, tickets, feedback):
    ticket = tickets.it(org["loner"])
    resolve(db, org["it"], ticket)
    TicketService(db).perform_action(org["loner"], ticket.id, "close", "Thanks", rating=4)

    assert feedback.count_resolved_tickets(org["loner"].id, TicketType.IT) == 1
    assert feedback.give_feedback(org["loner"], "itdesk", 4).comment is None


def test_closing_unresolved_ticket_does_not_unlock_feedback(db, org, tickets, feedback):
    ticket = tickets.hr(org["loner"], HrType.PAYROLL)
    TicketService(db).perform_action(org["loner"], ticket.id, "close", "Sorted it myself")

    with pytest.raises(NoMatchingTickets):
        feedback.give_feedback(org["loner"], "hrdesk", 3)


def test_resolved_ticket_must_match_target_department(db, org, tickets, feedback):
    ticket = tickets.it(org["loner"])
    resolve(db, org["it"], ticket)

    with pytest.raises(NoMatchingTickets) as exc:
        feedback.give_feedback(org["loner"], "hrdesk", 5)
    assert exc.value.status_code == 403


def test_rejected_ticket_does_not_count(db, org, tickets, feedback):
    ticket = tickets.it(org["loner"])
    TicketService(db).perform_action(org["it"], ticket.id, "rejected", "No")

    assert feedback.count_resolved_tickets(org["loner"].id, TicketType.IT) == 0


def test_target_must_be_hr_or_it(org, feedback):
    with pytest.raises(InvalidTarget):
        feedback.give_feedback(org["loner"], "manager", 5)


def test_unknown_target(org, feedback):
    with pytest.raises(NotFound) as exc:
        feedback.give_feedback(org["loner"], "nobody", 5)
    assert exc.value.code == "USER_NOT_FOUND"


@pytest.mark.parametrize("role", ["admin", "hr", "it"])
def test_only_employees_give_feedback(org, feedback, role):
    with pytest.raises(Forbidden):
        feedback.give_feedback(org[role], "itdesk", 5)


def test_list_feedback_newest_first(db, org, tickets, feedback):
    ticket = tickets.it(org["loner"])
    resolve(db, org["it"], ticket)
    first = feedback.give_feedback(org["loner"], "itdesk", 3)
    second = feedback.give_feedback(org["loner"], "itdesk", 5)

    assert [f.id for f in feedback.list_feedback()] == [second.id, first.id]
