# helpdesk/models/user.py
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from helpdesk.database import Base
import enum

class UserType(str, enum.Enum):
    ADMIN = "ADMIN"
    HR = "HR"
    IT = "IT"
    EMPLOYEE = "EMPLOYEE"

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(30), unique=True, index=True, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    hashed_password = Column(String, nullable=False)
    user_type = Column(Enum(UserType), default=UserType.EMPLOYEE, nullable=False)

    # Manager tree: at most one manager, any number of direct reports
    manager_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    manager = relationship("User", remote_side=[id], back_populates="reports")
    reports = relationship("User", back_populates="manager")
    tickets = relationship("Ticket", back_populates="created_by", foreign_keys="Ticket.created_by_id")

    def __repr__(self):
        return f"<User(id={self.id}, username='{self.username}', type='{self.user_type}')>"
