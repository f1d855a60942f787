"""Advertisement request payloads."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from app.schema.base import ORMModel


class AdvertisementRequestCreate(BaseModel):
    email: EmailStr
    description: str = Field(min_length=1)
    budget: float


class AdvertisementRequestRead(ORMModel):
    id: UUID
    email: str
    description: str
    budget: float
    user_ip: str
    created_at: datetime


class RecentRequestCheck(BaseModel):
    since: datetime | None = None


class RecentRequestStatus(BaseModel):
    has_recent_request: bool
