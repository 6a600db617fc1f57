from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from enum import Enum

class Role(str, Enum):
    fleet_manager = "Fleet Manager"
    dispatcher = "Dispatcher"
    safety_officer = "Safety Officer"
    financial_analyst = "Financial Analyst"

class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=100)
    role: Role

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class ForgotPasswordRequest(BaseModel):
    email: EmailStr

class UserOut(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None

class RegisterResponse(BaseModel):
    message: str
    user: UserOut

class LoginResponse(BaseModel):
    message: str
    token: str
    user: UserOut

class ProfileResponse(BaseModel):
    user: UserOut

class MessageResponse(BaseModel):
    message: str
