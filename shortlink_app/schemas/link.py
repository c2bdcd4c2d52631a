from pydantic import BaseModel, HttpUrl, Field, computed_field, ConfigDict
from typing import Any, Optional
from datetime import datetime
from shortlink_app.config import settings


class ShortLinkCreate(BaseModel):
    url: HttpUrl = Field(..., description="The URL to shorten")
    expires_at: Optional[datetime] = Field(None, description="When the link stops resolving")
    relation_type: Optional[str] = Field(None, max_length=255, description="Associated entity type, e.g. Post")
    # Loosely typed on purpose: a non-numeric id drops the relation instead of failing
    relation_id: Optional[Any] = Field(None, description="Associated entity id")


class ShortLinkResponse(BaseModel):
    """Serializes the ShortLink model (from_attributes reads ORM attributes)"""
    id: int
    hash: str
    url: str
    expires: bool
    expires_at: Optional[datetime] = None
    relation_type: Optional[str] = None
    relation_id: Optional[int] = None
    created_at: Optional[datetime] = None

    @computed_field
    @property
    def short_url(self) -> str:
        return f"{settings.base_url}/{self.hash}"

    model_config = ConfigDict(from_attributes=True)
