"""
Common Schemas

Shared schema configuration.

Schema Types:
=============
- BaseSchema: Projection base, buildable from ORM objects and row mappings
- InputSchema: Base for insert/update payloads

Usage:
======
    from pgblog.schemas.common import BaseSchema

    class UserBasicInfo(BaseSchema):
        id: UUID
        email: str
        name: str

    UserBasicInfo.model_validate(user)          # from a User instance
    UserBasicInfo.model_validate(row_mapping)   # from result.mappings()
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class BaseSchema(BaseModel):
    """
    Base schema with common configuration.

    Provides:
    - from_attributes: Allow creating from ORM models
    - populate_by_name: Allow field population by name or alias
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class InputSchema(BaseModel):
    """Base for payloads passed to repository create/update helpers."""

    model_config = ConfigDict(extra="forbid")

    def to_values(self) -> dict[str, Any]:
        """Column values that were explicitly provided."""
        return self.model_dump(exclude_unset=True)
