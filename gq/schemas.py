# (C) 2025 Rodrigo Rodrigues da Silva <rodrigopitanga@posteo.net>
# SPDX-License-Identifier: GPL-3.0-or-later

"""Pydantic models for stored records and API envelopes."""

from typing import Any, Literal
from pydantic import BaseModel, Field


class Group(BaseModel):
    """A group is a collection of members."""
    id: int | None = Field(None, ge=0, description="Unique id of the group")
    name: str = Field(..., description="Name of the group")
    description: str | None = Field(None, description="Description of the group")


class Member(BaseModel):
    """A member is an entity of a group."""
    id: int | None = Field(None, ge=0, description="Unique id of the member")
    name: str = Field(..., description="Name of the member")


class ErrorResponse(BaseModel):
    """API error envelope."""
    ok: Literal[False]
    code: str
    error: str
    details: dict[str, Any] | None = None
