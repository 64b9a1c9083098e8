from pydantic import AliasChoices, BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from helpdesk.schemas.user import UserSummary

class FeedbackCreate(BaseModel):
    given_to: str
    rating: int = Field(..., ge=1, le=5)
    # "description" is accepted for older clients
    comment: Optional[str] = Field(None, validation_alias=AliasChoices("comment", "description"))

    @field_validator("given_to")
    @classmethod
    def target_not_blank(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("given_to is required")
        return v

    @field_validator("comment")
    @classmethod
    def empty_comment_is_none(cls, v):
        if v is None:
            return None
        return v.strip() or None

class FeedbackOut(BaseModel):
    id: int
    rating: int
    comment: Optional[str] = None
    given_by: UserSummary
    given_to: UserSummary
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }
