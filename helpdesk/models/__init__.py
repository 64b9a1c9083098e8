from .user import User, UserType
from .ticket import Ticket, TicketType, TicketStatus, HrType, ItType
from .feedback import Feedback
from .activity import Activity, ActivityType
