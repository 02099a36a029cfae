from urllib.parse import quote

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status

from linkstats_app.dependencies import get_click_recorder, get_url_service
from linkstats_app.services.click_recorder import ClickRecorder
from linkstats_app.services.url_service import URLService

router = APIRouter(tags=["redirect"])

NO_CACHE = "no-cache, no-store, must-revalidate"


def location_header(url: str) -> str:
    """Stored URL as a header value; only characters outside latin-1 are percent-encoded"""
    return "".join(char if ord(char) < 256 else quote(char, safe="") for char in url)


@router.get("/{short_code}")
async def redirect_to_original_url(
    short_code: str,
    request: Request,
    background_tasks: BackgroundTasks,
    url_service: URLService = Depends(get_url_service),
    recorder: ClickRecorder = Depends(get_click_recorder)
):
    """
    Redirect to the original URL.

    Flow:
    1. Resolve the target (cache-aside) and atomically count the click
    2. Classify the request headers into a click event
    3. Schedule the event write as a background task (runs after the
       response is sent; failures are logged, never surfaced)
    4. Redirect with 301, ``Location`` carrying the stored URL unchanged
    """
    original_url = await url_service.resolve_for_redirect(short_code)

    event = recorder.build_event(short_code, request.headers)
    background_tasks.add_task(recorder.record, event)

    return Response(
        status_code=status.HTTP_301_MOVED_PERMANENTLY,
        headers={"Location": location_header(original_url), "Cache-Control": NO_CACHE},
    )
