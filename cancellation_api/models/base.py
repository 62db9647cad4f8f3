# -*- coding: utf-8 -*-
# SPDX-License-Identifier: Apache-2.0

"""
Base entity models with common fields and validation.
"""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict
from bson import ObjectId


def generate_object_id() -> str:
    """Generate a new MongoDB ObjectId as string."""
    return str(ObjectId())


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class BaseEntity(BaseModel):
    """Base entity with common fields for all domain objects."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Use enum values instead of enum objects
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True
    )

    id: str = Field(default_factory=generate_object_id, description="Unique identifier")
    created_at: datetime = Field(
        default_factory=utc_now, alias="createdAt", description="Creation timestamp"
    )
    updated_at: datetime = Field(
        default_factory=utc_now, alias="updatedAt", description="Last update timestamp"
    )
    schema_version: int = Field(default=1, alias="schemaVersion", description="Schema version for migrations")

    def update_timestamp(self) -> None:
        """Update the last modification timestamp."""
        self.updated_at = utc_now()


class BaseApiModel(BaseModel):
    """Base model for API request payloads."""

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_assignment=True
    )
