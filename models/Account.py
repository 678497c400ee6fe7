from pydantic import BaseModel
from typing import Optional


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class RegisterRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None


class Account(BaseModel):
    id: str
    email: str
    name: Optional[str] = None
    role: str


class AuthResponse(BaseModel):
    success: bool = True
    token: str
    user: Account

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "token": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                "user": {
                    "id": "-NmB1x0a9c8d7e6f5g4h",
                    "email": "ana@x.com",
                    "name": "Ana",
                    "role": "user"
                }
            }
        }
