from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=256, description="Display name")
    email: EmailStr = Field(description="Email address, used to sign in")
    password: str = Field(min_length=8, max_length=72, description="Plain text password")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if not v.strip():
            raise ValueError('Name cannot be empty or only whitespace')
        return v.strip()

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class SessionGet(BaseModel):
    session_token: str
    expires_at: datetime

    model_config = ConfigDict(from_attributes=True)

class UserGet(BaseModel):
    id: int
    name: str
    email: str
    image: Optional[str] = None
    is_email_verified: Optional[bool] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class MeGet(BaseModel):
    user: UserGet
    organization_id: int
    permissions: List[str]
