import re
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime

from helpdesk.config.settings import settings
from helpdesk.models.user import UserType

# At least one lower, one upper, one digit, one of $@!%*?& and 8+ characters
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)(?=.*[$@!%*?&])[A-Za-z\d$@!%*?&]{8,}$")

class UserRegister(BaseModel):
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    name: Optional[str] = None
    password: str

    @field_validator("username")
    @classmethod
    def username_alphanumeric(cls, v):
        if not v.isalnum():
            raise ValueError("Username must only contain alphanumeric characters")
        return v

    @field_validator("email")
    @classmethod
    def email_in_allowed_domain(cls, v):
        domain = settings.ALLOWED_EMAIL_DOMAIN
        if domain and not v.lower().endswith("@" + domain.lower()):
            raise ValueError(f"Email must belong to the {domain} domain")
        return v

    @field_validator("password")
    @classmethod
    def password_strength(cls, v):
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must be at least 8 characters with upper and lower case letters, a digit and one of $@!%*?&"
            )
        return v

class UserLogin(BaseModel):
    username: str
    password: str

class ManagerAssign(BaseModel):
    username: str = Field(..., min_length=1)
    manager_username: str = Field(..., min_length=1)

    @field_validator("username", "manager_username")
    @classmethod
    def strip_names(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("must not be empty")
        return v

    @model_validator(mode="after")
    def not_self_managed(self):
        if self.username == self.manager_username:
            raise ValueError("User cannot be their own manager")
        return self

class UserSummary(BaseModel):
    id: int
    username: str
    name: Optional[str] = None
    email: str

    model_config = {
        "from_attributes": True
    }

class UserOut(BaseModel):
    id: int
    username: str
    email: str
    name: Optional[str] = None
    user_type: UserType
    manager_id: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {
        "from_attributes": True
    }

class UserDetail(UserOut):
    manager: Optional[UserSummary] = None
