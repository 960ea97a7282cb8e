"""Org request schemas."""

from pydantic import BaseModel, Field, field_validator

from grokloc.core.constants import STR_MAX
from grokloc.core.safe import validate


class OrgCreate(BaseModel):
    """Schema for provisioning an org and its owner.

    ``owner_password`` is the raw password; it is derived before it
    reaches the model.
    """

    name: str = Field(..., min_length=1, max_length=STR_MAX)
    owner_display_name: str = Field(..., min_length=1, max_length=STR_MAX)
    owner_email: str = Field(..., min_length=3, max_length=STR_MAX)
    owner_password: str = Field(..., min_length=1, max_length=STR_MAX)

    @field_validator("name", "owner_display_name", "owner_email")
    @classmethod
    def validate_safe(cls, v: str) -> str:
        """Reject values the safe value gate would refuse."""
        if not validate(v):
            raise ValueError("value contains unsafe content")
        return v
