"""
Pydantic Schemas - Request/Response Validation

All API request and response schemas in one file for simplicity.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from typing import Optional, List, Dict, Any
from datetime import datetime
from enum import Enum


# ============================================================
# ENUMS
# ============================================================

class UserRole(str, Enum):
    student = "student"
    alumni = "alumni"
    admin = "admin"


# ============================================================
# AUTH SCHEMAS
# ============================================================

class RegisterRequest(BaseModel):
    full_name: str = Field(..., min_length=2, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=8)
    role: UserRole

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int
    role: UserRole

class CurrentUser(BaseModel):
    """Who is calling. Resolved from the bearer token, passed explicitly to every service."""
    id: int
    role: UserRole
    full_name: str = ""
    email: str = ""

class UserResponse(BaseModel):
    id: int
    full_name: str
    email: str
    role: UserRole
    is_active: bool
    created_at: datetime


# ============================================================
# MESSAGING SCHEMAS
# ============================================================

class User(BaseModel):
    """A contact as shown in the directory. Credentials never leave the store."""
    model_config = ConfigDict(extra="ignore")

    id: int
    full_name: str
    email: str
    role: UserRole

class Message(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    sender_id: int
    recipient_id: int
    body: str
    is_read: bool = False
    created_at: datetime

class Conversation(BaseModel):
    contact: User
    last_message: Optional[Message] = None
    unread_count: int = 0
    last_activity: Optional[datetime] = None

class ConversationList(BaseModel):
    conversations: List[Conversation]
    failed_lookups: int = 0
    partial_failure: Optional[Dict[str, Any]] = None
    total_unread: int = 0

class SendMessageRequest(BaseModel):
    # Blank, oversized and self-addressed messages are rejected by the thread service
    body: str

class ThreadResponse(BaseModel):
    contact_id: int
    contact: User
    messages: List[Message]
    marked_read: int = 0

class MarkReadResponse(BaseModel):
    contact_id: int
    marked_read: int

class UnreadCountResponse(BaseModel):
    unread_count: int


# ============================================================
# GENERIC SCHEMAS
# ============================================================

class StatusResponse(BaseModel):
    message: str
    success: bool = True

class ErrorResponse(BaseModel):
    error: str
    detail: str
