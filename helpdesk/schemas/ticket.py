# helpdesk/schemas/ticket.py
from pydantic import BaseModel, Field, field_validator, model_validator
from datetime import datetime
from typing import Optional

from helpdesk.models.ticket import TicketType, TicketStatus, HrType, ItType
from helpdesk.schemas.user import UserSummary

def _upper(v):
    if isinstance(v, str):
        v = v.strip().upper()
        return v or None
    return v

class TicketCreate(BaseModel):
    title: str
    description: str
    ticket_type: TicketType
    hr_type: Optional[HrType] = None
    it_type: Optional[ItType] = None

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    # Enum values are matched case-insensitively
    @field_validator("ticket_type", "hr_type", "it_type", mode="before")
    @classmethod
    def normalize_enum(cls, v):
        return _upper(v)

    @model_validator(mode="after")
    def subtype_matches_type(self):
        if self.ticket_type == TicketType.HR:
            if self.hr_type is None:
                raise ValueError("hr_type is required for HR tickets")
            if self.it_type is not None:
                raise ValueError("it_type must be empty for HR tickets")
        else:
            if self.it_type is None:
                raise ValueError("it_type is required for IT tickets")
            if self.hr_type is not None:
                raise ValueError("hr_type must be empty for IT tickets")
        return self

class TicketAction(BaseModel):
    action: str
    remarks: str
    rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("action")
    @classmethod
    def normalize_action(cls, v):
        v = v.strip().lower()
        if not v:
            raise ValueError("action is required")
        return v

    @field_validator("remarks")
    @classmethod
    def remarks_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("remarks must not be empty")
        return v

class TicketOut(BaseModel):
    id: int
    title: str
    description: str
    ticket_type: TicketType
    hr_type: Optional[HrType] = None
    it_type: Optional[ItType] = None
    status: TicketStatus
    requires_approval: bool
    remarks: Optional[str] = None
    rating: Optional[int] = None
    created_by_id: int
    created_by: Optional[UserSummary] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class TicketActionOut(BaseModel):
    ticket: TicketOut
    action: str
    remarks: str
    rating: Optional[int] = None
