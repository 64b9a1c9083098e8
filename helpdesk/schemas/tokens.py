# helpdesk/schemas/tokens.py
from pydantic import BaseModel
from helpdesk.schemas.user import UserOut

class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut

    model_config = {
        "from_attributes": True
    }
