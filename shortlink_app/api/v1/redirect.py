from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import RedirectResponse
from shortlink_app.exceptions import ShortLinkNotFoundError
from shortlink_app.services.shortener_service import ShortenerService
from shortlink_app.dependencies import get_shortener_service

router = APIRouter(tags=["redirect"])


@router.get("/{hash}")
def redirect_to_url(
    hash: str,
    shortener: ShortenerService = Depends(get_shortener_service)
):
    """
    Redirect to the target URL.

    Expired links answer 404 exactly like unknown ones.
    """
    try:
        url = shortener.resolve(hash)
    except ShortLinkNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Short link not found or expired"
        )

    return RedirectResponse(url=url, status_code=status.HTTP_302_FOUND)
