"""
Session Schemas
===============

Pydantic model for the identity object handed over by the external auth provider.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class SessionUserSchema(BaseModel):
    """Signed-in user as reported by the auth provider."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    uid: str = Field(..., min_length=1, max_length=128)
    display_name: Optional[str] = Field(default=None, alias="displayName")
    email: Optional[str] = Field(default=None, max_length=254)

    def to_session(self) -> dict:
        return {"uid": self.uid, "displayName": self.display_name, "email": self.email}
