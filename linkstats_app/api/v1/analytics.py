from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query

from linkstats_app.dependencies import get_analytics_service
from linkstats_app.schemas.analytics import Granularity, OverviewAnalytics, UrlAnalytics
from linkstats_app.services.analytics_service import AnalyticsService

router = APIRouter(prefix="/analytics", tags=["analytics"])


# Declared before /{short_code} so "overview" is not taken as a short code
@router.get("/overview", response_model=OverviewAnalytics)
async def get_overview(
    start: Optional[datetime] = Query(None, alias="from"),
    end: Optional[datetime] = Query(None, alias="to"),
    granularity: Granularity = Granularity.DAY,
    limit: Optional[int] = Query(None, ge=1),
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    """Analytics aggregated across every short URL"""
    return await analytics.overview_report(start, end, granularity, limit)


@router.get("/{short_code}", response_model=UrlAnalytics)
async def get_url_analytics(
    short_code: str,
    start: Optional[datetime] = Query(None, alias="from"),
    end: Optional[datetime] = Query(None, alias="to"),
    granularity: Granularity = Granularity.DAY,
    analytics: AnalyticsService = Depends(get_analytics_service)
):
    """Click analytics for one short URL"""
    return await analytics.url_report(short_code, start, end, granularity)
