# helpdesk/services/workflow.py
"""
Ticket action rules.

Which actions an actor may take on a ticket depends on who they are for that
particular ticket: the same employee can be the reviewing manager on a
subordinate's ticket and the owner of their own. ``ACTION_RULES`` lists the
effective roles in precedence order; the first rule whose predicate matches
decides. Checks then run in this order:

1. the rule's relationship check (``Forbidden``)
2. the action is one the rule knows (``InvalidAction``)
3. the ticket is in the rule's expected status (``InvalidStatus``)
4. the transition's own guard (``RatingRequired``, ``InvalidStatus``)
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from helpdesk.models import Ticket, TicketStatus, User, UserType, ActivityType
from helpdesk.utils.approval import department_queue, initial_status
from helpdesk.utils.errors import Forbidden, InvalidAction, InvalidStatus, InvalidUserType, RatingRequired


@dataclass(frozen=True)
class ActionContext:
    actor: User
    ticket: Ticket
    is_manager: bool

    @property
    def is_own_ticket(self) -> bool:
        return self.ticket.created_by_id == self.actor.id

    @property
    def role(self) -> UserType:
        return self.actor.user_type


@dataclass(frozen=True)
class Transition:
    next_status: Callable[[Ticket], TicketStatus]
    activity: ActivityType
    guard: Optional[Callable[[Ticket, Optional[int]], None]] = None


@dataclass(frozen=True)
class ActionRule:
    name: str
    applies: Callable[[ActionContext], bool]
    transitions: Dict[str, Transition]
    expected_status: Optional[TicketStatus] = None
    authorize: Optional[Callable[[ActionContext], None]] = None

    @property
    def valid_actions(self) -> Tuple[str, ...]:
        return tuple(self.transitions)


@dataclass(frozen=True)
class PlannedAction:
    rule: ActionRule
    action: str
    new_status: TicketStatus
    activity: ActivityType


def _to_department(ticket: Ticket) -> TicketStatus:
    return department_queue(ticket.ticket_type)


def _to_rejected(ticket: Ticket) -> TicketStatus:
    return TicketStatus.REJECTED


def _to_resolved(ticket: Ticket) -> TicketStatus:
    return TicketStatus.RESOLVED


def _to_closed(ticket: Ticket) -> TicketStatus:
    return TicketStatus.CLOSED


def _reopen_destination(ticket: Ticket) -> TicketStatus:
    # Same routing as creation; requires_approval never changes
    return initial_status(ticket.ticket_type, ticket.requires_approval)


def _rating_when_resolved(ticket: Ticket, rating: Optional[int]) -> None:
    if ticket.status == TicketStatus.RESOLVED and rating is None:
        raise RatingRequired("Rating (1-5) is required when closing a resolved ticket")


def _only_from_rejected(ticket: Ticket, rating: Optional[int]) -> None:
    if ticket.status != TicketStatus.REJECTED:
        raise InvalidStatus(
            f"Ticket must be in {TicketStatus.REJECTED.value} status for this action",
            "Ticket can only be reopened if it is in REJECTED status",
        )


def _require_creators_manager(ctx: ActionContext) -> None:
    if ctx.ticket.created_by.manager_id != ctx.actor.id:
        raise Forbidden("You can only approve/reject tickets of employees under you")


def _require_owner(ctx: ActionContext) -> None:
    if not ctx.is_own_ticket:
        raise Forbidden("You can only perform actions on tickets that you created")


def _is_reviewing_manager(ctx: ActionContext) -> bool:
    return ctx.is_manager and ctx.role == UserType.EMPLOYEE and not ctx.is_own_ticket


RESOLVER_TRANSITIONS = {
    "resolved": Transition(_to_resolved, ActivityType.TICKET_APPROVED),
    "rejected": Transition(_to_rejected, ActivityType.TICKET_REJECTED),
}

# Evaluated top to bottom; first match wins
ACTION_RULES: Tuple[ActionRule, ...] = (
    ActionRule(
        name="manager",
        applies=_is_reviewing_manager,
        authorize=_require_creators_manager,
        expected_status=TicketStatus.FORWARDED_TO_MANAGER,
        transitions={
            "approve": Transition(_to_department, ActivityType.TICKET_APPROVED),
            "rejected": Transition(_to_rejected, ActivityType.TICKET_REJECTED),
        },
    ),
    ActionRule(
        name="hr",
        applies=lambda ctx: ctx.role in (UserType.HR, UserType.ADMIN),
        expected_status=TicketStatus.FORWARDED_TO_HR,
        transitions=RESOLVER_TRANSITIONS,
    ),
    ActionRule(
        name="it",
        applies=lambda ctx: ctx.role in (UserType.IT, UserType.ADMIN),
        expected_status=TicketStatus.FORWARDED_TO_IT,
        transitions=RESOLVER_TRANSITIONS,
    ),
    ActionRule(
        name="owner",
        applies=lambda ctx: ctx.role in (UserType.EMPLOYEE, UserType.ADMIN),
        authorize=_require_owner,
        transitions={
            "close": Transition(_to_closed, ActivityType.TICKET_CLOSED, guard=_rating_when_resolved),
            "reopen": Transition(_reopen_destination, ActivityType.TICKET_REOPENED, guard=_only_from_rejected),
        },
    ),
    # Shadowed by "hr" while ADMIN stays in that rule's role set
    ActionRule(
        name="admin",
        applies=lambda ctx: ctx.role == UserType.ADMIN,
        authorize=_require_owner,
        transitions={
            "close": Transition(_to_closed, ActivityType.TICKET_CLOSED),
        },
    ),
)


def resolve_rule(ctx: ActionContext, rules: Tuple[ActionRule, ...] = ACTION_RULES) -> ActionRule:
    for rule in rules:
        if rule.applies(ctx):
            return rule
    raise InvalidUserType("User type is not authorized to perform actions on tickets")


def plan_action(
    ctx: ActionContext,
    action: str,
    rating: Optional[int] = None,
    rules: Tuple[ActionRule, ...] = ACTION_RULES,
) -> PlannedAction:
    """Work out the transition for ``action`` without touching the ticket"""
    rule = resolve_rule(ctx, rules)

    if rule.authorize is not None:
        rule.authorize(ctx)

    action = action.strip().lower()
    transition = rule.transitions.get(action)
    if transition is None:
        raise InvalidAction(f"Action must be one of: {', '.join(rule.valid_actions)}")

    if rule.expected_status is not None and ctx.ticket.status != rule.expected_status:
        raise InvalidStatus(f"Ticket must be in {rule.expected_status.value} status for this action")

    if transition.guard is not None:
        transition.guard(ctx.ticket, rating)

    return PlannedAction(
        rule=rule,
        action=action,
        new_status=transition.next_status(ctx.ticket),
        activity=transition.activity,
    )
