"""
Pydantic schemas for registration request/response validation.
"""

from pydantic import BaseModel, Field


class RegistrationCreate(BaseModel):
    user_id: int = Field(..., gt=0)


class MessageResponse(BaseModel):
    message: str
