"""
User Model - MongoDB Pydantic Schema
=====================================

Users are created on first Google sign-in (upsert by googleId) and never
hard-deleted: deactivation flips isActive to False.
"""

from typing import Optional
from datetime import datetime, timezone

from pydantic import Field, field_validator

from .trip import MongoModel


class NotificationPreferences(MongoModel):
    email: bool = True
    push: bool = True


class UserPreferences(MongoModel):
    currency: str = Field(default="USD", min_length=3, max_length=3)
    timezone: str = Field(default="UTC", min_length=1, max_length=64)
    notifications: NotificationPreferences = Field(default_factory=NotificationPreferences)

    @field_validator('currency', mode='before')
    @classmethod
    def upper_currency(cls, v):
        return v.strip().upper() if isinstance(v, str) else v


class User(MongoModel):
    """User document for the `users` collection."""

    google_id: str
    email: str
    name: str
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    photo: Optional[str] = None
    refresh_token: Optional[str] = None
    last_login: Optional[datetime] = None
    is_active: bool = True
    preferences: UserPreferences = Field(default_factory=UserPreferences)

    created_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))

    @field_validator('email', mode='before')
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower() if isinstance(v, str) else v


class UserUpdateRequest(MongoModel):
    """Profile edit; only name and photo are writable."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    photo: Optional[str] = Field(None, max_length=2048)


class PreferencesUpdateRequest(MongoModel):
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    timezone: Optional[str] = Field(None, min_length=1, max_length=64)
    notifications: Optional[NotificationPreferences] = None

    @field_validator('currency', mode='before')
    @classmethod
    def upper_currency(cls, v):
        return v.strip().upper() if isinstance(v, str) else v
