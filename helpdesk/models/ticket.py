# helpdesk/models/ticket.py
from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from helpdesk.database import Base
import enum

class TicketType(str, enum.Enum):
    HR = "HR"
    IT = "IT"

class HrType(str, enum.Enum):
    LEAVE_BALANCE = "LEAVE_BALANCE"
    LEAVE_POLICY = "LEAVE_POLICY"
    PAYROLL = "PAYROLL"
    PF = "PF"
    KEKA_ISSUES = "KEKA_ISSUES"
    SODEXO_FOOD_COUPONS = "SODEXO_FOOD_COUPONS"
    HEALTH_INSURANCE = "HEALTH_INSURANCE"
    ANY_FORM_OF_LETTER = "ANY_FORM_OF_LETTER"
    REFERRAL_APPLICATION = "REFERRAL_APPLICATION"
    COURSE_PURCHASE = "COURSE_PURCHASE"
    BANK_ACCOUNT_ISSUE = "BANK_ACCOUNT_ISSUE"

class ItType(str, enum.Enum):
    LAPTOP_BOOTUP = "LAPTOP_BOOTUP"
    LAPTOP_CHARGER_NOT_WORKING = "LAPTOP_CHARGER_NOT_WORKING"
    LAPTOP_BATTERY_LIFE = "LAPTOP_BATTERY_LIFE"
    ADD_RAM = "ADD_RAM"
    NEW_MONITOR = "NEW_MONITOR"
    NEW_KEYBOARD = "NEW_KEYBOARD"
    NEW_MOUSE = "NEW_MOUSE"
    MOBILE_PHONE_ISSUE = "MOBILE_PHONE_ISSUE"
    MOBILE_DATA_CABLE_ISSUE = "MOBILE_DATA_CABLE_ISSUE"
    HARD_DISK_FAILURE = "HARD_DISK_FAILURE"

class TicketStatus(str, enum.Enum):
    FORWARDED_TO_MANAGER = "FORWARDED_TO_MANAGER"
    FORWARDED_TO_HR = "FORWARDED_TO_HR"
    FORWARDED_TO_IT = "FORWARDED_TO_IT"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"
    CLOSED = "CLOSED"

class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    description = Column(Text, nullable=False)

    ticket_type = Column(Enum(TicketType), nullable=False, index=True)
    hr_type = Column(Enum(HrType), nullable=True)
    it_type = Column(Enum(ItType), nullable=True)

    status = Column(Enum(TicketStatus), nullable=False, index=True)
    # Fixed at creation; reopen routes on it
    requires_approval = Column(Boolean, default=False, nullable=False)
    remarks = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)

    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    resolved_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    created_by = relationship("User", foreign_keys=[created_by_id], back_populates="tickets")
    activities = relationship("Activity", back_populates="ticket")

    @property
    def subtype(self):
        return self.hr_type if self.ticket_type == TicketType.HR else self.it_type

    def __repr__(self):
        return f"<Ticket(id={self.id}, type='{self.ticket_type}', status='{self.status}')>"
