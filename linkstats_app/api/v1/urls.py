from typing import Optional

from fastapi import APIRouter, Body, Depends, status

from linkstats_app.dependencies import get_url_service
from linkstats_app.errors import ValidationError
from linkstats_app.schemas.url import (
    MessageResponse,
    ShortenRequest,
    ShortenResponse,
    UrlListResponse,
    UrlRecord,
)
from linkstats_app.services.url_service import URLService

router = APIRouter(tags=["urls"])


@router.post("/shorten", response_model=ShortenResponse, status_code=status.HTTP_201_CREATED)
async def create_short_url(
    payload: Optional[ShortenRequest] = Body(None),
    url_service: URLService = Depends(get_url_service)
):
    """Create a new short URL, optionally with a custom alias"""
    if payload is None:
        raise ValidationError("Request body is required")
    return await url_service.create_short_url(payload.url, payload.alias)


@router.get("/urls", response_model=UrlListResponse)
async def list_urls(url_service: URLService = Depends(get_url_service)):
    """List short URLs, newest first"""
    return UrlListResponse(urls=await url_service.list_urls())


@router.get("/stats/{short_code}", response_model=UrlRecord)
async def get_url_stats(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Get the click count and metadata for a short URL"""
    return await url_service.get_url_stats(short_code)


@router.delete("/{short_code}", response_model=MessageResponse)
async def delete_url(
    short_code: str,
    url_service: URLService = Depends(get_url_service)
):
    """Delete a short URL (its click history is kept)"""
    await url_service.delete_url(short_code)
    return MessageResponse(message="URL deleted successfully")
