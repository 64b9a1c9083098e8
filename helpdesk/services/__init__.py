from .activity_service import ActivityService, log_activity
from .feedback_service import FeedbackService
from .ticket_service import TicketService
from .user_service import UserService
from .workflow import ACTION_RULES, ActionContext, ActionRule, plan_action, resolve_rule
