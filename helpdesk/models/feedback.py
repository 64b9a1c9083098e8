# helpdesk/models/feedback.py
from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from helpdesk.database import Base

class Feedback(Base):
    __tablename__ = "feedback"

    id = Column(Integer, primary_key=True, index=True)
    rating = Column(Integer, nullable=False)  # 1-5
    comment = Column(Text, nullable=True)

    given_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    given_to_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    given_by = relationship("User", foreign_keys=[given_by_id])
    given_to = relationship("User", foreign_keys=[given_to_id])
