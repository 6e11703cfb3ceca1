"""Pydantic response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class UpdateProfileRequest(BaseModel):
    display_name: str | None = Field(None, max_length=255)
    email: str | None = Field(None, max_length=254)


class ProfileResponse(BaseModel):
    user_id: str
    display_name: str | None = None
    email: str | None = None
    total_orders: int = 0
    total_spent: int = 0
