import pytest
from sqlalchemy.exc import OperationalError

from helpdesk.models import Activity, ActivityType, HrType, ItType, Ticket, TicketStatus
from helpdesk.services.ticket_service import TicketService
from helpdesk.services.workflow import ACTION_RULES, ActionContext, resolve_rule
from helpdesk.utils.errors import (
    Forbidden,
    InternalError,
    InvalidAction,
    InvalidStatus,
    InvalidUserType,
    NotFound,
    RatingRequired,
)


@pytest.fixture
def service(db):
    return TicketService(db)


def reload(db, ticket_id):
    db.expire_all()
    return db.query(Ticket).filter(Ticket.id == ticket_id).one()


def activities(db, ticket_id):
    return db.query(Activity).filter(Activity.ticket_id == ticket_id).order_by(Activity.id).all()


def test_rule_precedence_is_explicit():
    assert [rule.name for rule in ACTION_RULES] == ["manager", "hr", "it", "owner", "admin"]


def test_manager_approves_subordinate_it_ticket(db, org, tickets, service):
    ticket = tickets.it(org["employee"], ItType.ADD_RAM)

    planned = service.perform_action(org["manager"], ticket.id, "approve", "Go ahead")

    assert planned.rule.name == "manager"
    ticket = reload(db, ticket.id)
    assert ticket.status == TicketStatus.FORWARDED_TO_IT
    assert ticket.remarks == "Go ahead"
    [entry] = activities(db, ticket.id)
    assert entry.type == ActivityType.TICKET_APPROVED
    assert entry.user_id == org["manager"].id
    assert entry.message == "Go ahead"


def test_manager_approval_routes_hr_ticket_to_hr(db, org, tickets, service):
    ticket = tickets.hr(org["employee"], HrType.ANY_FORM_OF_LETTER)

    service.perform_action(org["manager"], ticket.id, "APPROVE", "ok")

    assert reload(db, ticket.id).status == TicketStatus.FORWARDED_TO_HR


def test_manager_rejects(db, org, tickets, service):
    ticket = tickets.hr(org["employee"], HrType.COURSE_PURCHASE)

    service.perform_action(org["manager"], ticket.id, "rejected", "Not this quarter")

    assert reload(db, ticket.id).status == TicketStatus.REJECTED
    assert activities(db, ticket.id)[0].type == ActivityType.TICKET_REJECTED


def test_manager_cannot_review_someone_elses_report(db, org, tickets, service):
    ticket = tickets.hr(org["loner"], HrType.COURSE_PURCHASE)

    with pytest.raises(Forbidden):
        service.perform_action(org["manager"], ticket.id, "approve", "ok")

    assert reload(db, ticket.id).status == TicketStatus.FORWARDED_TO_MANAGER


def test_manager_action_needs_manager_queue(db, org, tickets, service):
    ticket = tickets.hr(org["employee"], HrType.PAYROLL)

    with pytest.raises(InvalidStatus) as exc:
        service.perform_action(org["manager"], ticket.id, "approve", "ok")

    assert "FORWARDED_TO_MANAGER" in exc.value.details[0]


def test_manager_cannot_resolve(org, tickets, service):
    ticket = tickets.hr(org["employee"], HrType.COURSE_PURCHASE)

    with pytest.raises(InvalidAction) as exc:
        service.perform_action(org["manager"], ticket.id, "resolved", "done")

    assert exc.value.details == ["Action must be one of: approve, rejected"]


def test_manager_acts_as_owner_on_own_ticket(db, org, tickets, service):
    ticket = tickets.it(org["manager"], ItType.NEW_MOUSE)

    planned = service.perform_action(org["manager"], ticket.id, "close", "Found one")

    assert planned.rule.name == "owner"
    assert reload(db, ticket.id).status == TicketStatus.CLOSED


def test_hr_resolves_and_records_resolution_time(db, org, tickets, service):
    ticket = tickets.hr(org["loner"], HrType.PAYROLL)

    service.perform_action(org["hr"], ticket.id, "resolved", "Fixed payslip")

    ticket = reload(db, ticket.id)
    assert ticket.status == TicketStatus.RESOLVED
    assert ticket.resolved_at is not None
    assert activities(db, ticket.id)[0].type == ActivityType.TICKET_APPROVED


def test_hr_cannot_touch_it_queue(db, org, tickets, service):
    ticket = tickets.it(org["loner"])

    with pytest.raises(InvalidStatus) as exc:
        service.perform_action(org["hr"], ticket.id, "resolved", "done")

    assert "FORWARDED_TO_HR" in exc.value.details[0]


def test_it_rejects(db, org, tickets, service):
    ticket = tickets.it(org["loner"])

    service.perform_action(org["it"], ticket.id, "rejected", "Works on my machine")

    assert reload(db, ticket.id).status == TicketStatus.REJECTED


def test_resolve_close_and_rate(db, org, tickets, service):
    ticket = tickets.it(org["loner"])
    service.perform_action(org["it"], ticket.id, "resolved", "Reimaged")

    with pytest.raises(RatingRequired):
        service.perform_action(org["loner"], ticket.id, "close", "Thanks")
    assert reload(db, ticket.id).status == TicketStatus.RESOLVED

    planned = service.perform_action(org["loner"], ticket.id, "close", "Thanks", rating=4)

    ticket = reload(db, ticket.id)
    assert planned.new_status == TicketStatus.CLOSED
    assert ticket.status == TicketStatus.CLOSED
    assert ticket.rating == 4
    assert [a.type for a in activities(db, ticket.id)] == [
        ActivityType.TICKET_APPROVED,
        ActivityType.TICKET_CLOSED,
    ]


def test_owner_can_close_before_resolution_without_rating(db, org, tickets, service):
    ticket = tickets.hr(org["employee"], HrType.COURSE_PURCHASE)

    service.perform_action(org["employee"], ticket.id, "close", "No longer needed")

    ticket = reload(db, ticket.id)
    assert ticket.status == TicketStatus.CLOSED
    assert ticket.rating is None


def test_reopen_requires_rejected_status(db, org, tickets, service):
    ticket = tickets.hr(org["loner"], HrType.PAYROLL)

    with pytest.raises(InvalidStatus):
        service.perform_action(org["loner"], ticket.id, "reopen", "Again")

    assert reload(db, ticket.id).status == TicketStatus.FORWARDED_TO_HR
    assert activities(db, ticket.id) == []


def test_reopen_returns_to_manager_when_approval_required(db, org, tickets, service):
    ticket = tickets.it(org["employee"], ItType.NEW_MONITOR)
    service.perform_action(org["manager"], ticket.id, "rejected", "No budget")

    service.perform_action(org["employee"], ticket.id, "reopen", "Budget approved now")

    ticket = reload(db, ticket.id)
    assert ticket.status == TicketStatus.FORWARDED_TO_MANAGER
    assert ticket.requires_approval is True
    assert activities(db, ticket.id)[-1].type == ActivityType.TICKET_REOPENED


def test_reopen_returns_to_department_when_no_approval(db, org, tickets, service):
    ticket = tickets.hr(org["loner"], HrType.LEAVE_BALANCE)
    service.perform_action(org["hr"], ticket.id, "rejected", "Check the portal")

    service.perform_action(org["loner"], ticket.id, "reopen", "Portal is down")

    ticket = reload(db, ticket.id)
    assert ticket.status == TicketStatus.FORWARDED_TO_HR
    assert ticket.requires_approval is False


def test_employee_cannot_act_on_others_ticket(db, org, tickets, service):
    ticket = tickets.hr(org["employee"])

    with pytest.raises(Forbidden):
        service.perform_action(org["loner"], ticket.id, "close", "Closing")

    assert reload(db, ticket.id).status == TicketStatus.FORWARDED_TO_HR


def test_owner_invalid_action(org, tickets, service):
    ticket = tickets.hr(org["loner"])

    with pytest.raises(InvalidAction) as exc:
        service.perform_action(org["loner"], ticket.id, "approve", "ok")

    assert exc.value.details == ["Action must be one of: close, reopen"]


def test_admin_matches_hr_rule_first(db, org, tickets, service):
    hr_ticket = tickets.hr(org["loner"])
    it_ticket = tickets.it(org["loner"])

    planned = service.perform_action(org["admin"], hr_ticket.id, "resolved", "done")
    assert planned.rule.name == "hr"
    assert reload(db, hr_ticket.id).status == TicketStatus.RESOLVED

    with pytest.raises(InvalidStatus):
        service.perform_action(org["admin"], it_ticket.id, "resolved", "done")


def test_failed_action_changes_nothing(db, org, tickets, service):
    ticket = tickets.it(org["loner"])
    service.perform_action(org["it"], ticket.id, "resolved", "Done")
    before = reload(db, ticket.id)
    snapshot = (before.status, before.remarks, before.rating)

    for actor, action, rating in [
        (org["loner"], "close", None),
        (org["loner"], "reopen", None),
        (org["it"], "resolved", None),
        (org["employee"], "close", 5),
    ]:
        with pytest.raises(Exception):
            service.perform_action(actor, ticket.id, action, "should not stick", rating=rating)

    after = reload(db, ticket.id)
    assert (after.status, after.remarks, after.rating) == snapshot
    assert len(activities(db, ticket.id)) == 1


def test_missing_ticket(org, service):
    with pytest.raises(NotFound) as exc:
        service.perform_action(org["loner"], 9999, "close", "gone")
    assert exc.value.code == "TICKET_NOT_FOUND"


def test_no_matching_rule_is_invalid_user_type(org, tickets):
    ticket = tickets.hr(org["loner"])
    ctx = ActionContext(actor=org["loner"], ticket=ticket, is_manager=False)

    with pytest.raises(InvalidUserType):
        resolve_rule(ctx, rules=())


def test_activity_failure_rolls_back_ticket_update(db, org, tickets, service, monkeypatch):
    ticket = tickets.it(org["loner"])

    def broken_log(*args, **kwargs):
        raise OperationalError("INSERT INTO activities", {}, Exception("disk I/O error"))

    monkeypatch.setattr("helpdesk.services.ticket_service.log_activity", broken_log)

    with pytest.raises(InternalError):
        service.perform_action(org["it"], ticket.id, "resolved", "Reimaged")

    ticket = reload(db, ticket.id)
    assert ticket.status == TicketStatus.FORWARDED_TO_IT
    assert ticket.remarks is None
    assert ticket.resolved_at is None
    assert activities(db, ticket.id) == []


def test_status_is_reread_under_lock(db, session_factory, org, tickets, service):
    ticket = tickets.it(org["loner"])
    assert ticket.status == TicketStatus.FORWARDED_TO_IT

    # Another request rejects the ticket while this session still holds it
    other = session_factory()
    other.query(Ticket).filter(Ticket.id == ticket.id).update({"status": TicketStatus.REJECTED})
    other.commit()
    other.close()

    with pytest.raises(InvalidStatus):
        service.perform_action(org["it"], ticket.id, "resolved", "Reimaged")

    assert reload(db, ticket.id).status == TicketStatus.REJECTED
