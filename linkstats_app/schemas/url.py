from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from linkstats_app.config import settings
from linkstats_app.timeutils import to_iso, utcnow


class CamelModel(BaseModel):
    """Base schema that reads snake_case attributes and writes camelCase JSON."""

    # Pydantic V2 style configuration
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class UrlRecord(CamelModel):
    """
    A stored short link.

    This is the record every storage backend reads and writes.
    ``click_count`` is only ever changed by the storage layer's atomic
    increment on the redirect path.
    """
    short_code: str
    original_url: str
    click_count: int = 0
    created_at: datetime = Field(default_factory=utcnow)

    @field_serializer("created_at")
    def serialize_created_at(self, value: datetime) -> str:
        return to_iso(value)


class ShortenRequest(BaseModel):
    # Both optional so that a missing url is reported as a 400 by the service
    url: Optional[str] = Field(None, description="The original URL to be shortened")
    alias: Optional[str] = Field(None, description="Custom short code (3-20 chars of [A-Za-z0-9_-])")


class ShortenResponse(CamelModel):
    short_code: str
    original_url: str

    @computed_field(alias="shortUrl")  # Like SerializerMethodField in DRF
    @property
    def short_url(self) -> str:
        """Computed field - full short link when a base URL is configured"""
        if settings.base_url:
            return f"{settings.base_url.rstrip('/')}/{self.short_code}"
        return self.short_code


class UrlListResponse(BaseModel):
    urls: List[UrlRecord]


class MessageResponse(BaseModel):
    message: str
