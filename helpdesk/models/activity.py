# helpdesk/models/activity.py
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from helpdesk.database import Base
import enum

class ActivityType(str, enum.Enum):
    TICKET_APPROVED = "TICKET_APPROVED"
    TICKET_REJECTED = "TICKET_REJECTED"
    TICKET_CLOSED = "TICKET_CLOSED"
    TICKET_REOPENED = "TICKET_REOPENED"

class Activity(Base):
    """Append-only audit row for a ticket transition"""
    __tablename__ = "activities"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    type = Column(Enum(ActivityType), nullable=False)
    ticket_id = Column(Integer, ForeignKey("tickets.id"), nullable=False, index=True)
    message = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    user = relationship("User")
    ticket = relationship("Ticket", back_populates="activities")

    def __repr__(self):
        return f"<Activity(id={self.id}, type='{self.type}', ticket_id={self.ticket_id})>"
