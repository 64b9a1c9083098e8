from .user import UserRegister, UserLogin, ManagerAssign, UserSummary, UserOut, UserDetail
from .tokens import Token
from .ticket import TicketCreate, TicketAction, TicketOut, TicketActionOut
from .feedback import FeedbackCreate, FeedbackOut
from .activity import ActivityOut
from .response import ApiResponse, ErrorPayload, send_response
