from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from helpdesk.models.activity import ActivityType

class ActivityActor(BaseModel):
    username: str

    model_config = {
        "from_attributes": True
    }

class ActivityOut(BaseModel):
    id: int
    type: ActivityType
    ticket_id: int
    message: Optional[str] = None
    created_at: Optional[datetime] = None
    user: ActivityActor

    model_config = {
        "from_attributes": True
    }
